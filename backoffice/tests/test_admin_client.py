"""
Tests for the admin editor client
"""
import httpx
import pytest

from backoffice.admin_client import (
    AdminApiClient,
    AdminBackendUnavailable,
    AdminForbidden,
    AdminNotFound,
    AdminValidationError,
    FeatureMatrixEditor,
    LatestRequestGate,
    ProjectAccessEditor,
    UnsavedChanges,
    VisibilityEditor,
)


class FakeApi:
    """In-memory stand-in for AdminApiClient"""

    def __init__(self):
        self.visibility = {1: {"chat.view"}, 2: {"payroll.view"}}
        self.fail_saves = False
        self.saved = []

    def get_user_visibility(self, user_id):
        if user_id not in self.visibility:
            raise AdminNotFound("User not found", status_code=404)
        return set(self.visibility[user_id])

    def save_user_visibility(self, user_id, feature_codes):
        if self.fail_saves:
            raise AdminBackendUnavailable("timed out")
        self.saved.append((user_id, set(feature_codes)))
        self.visibility[user_id] = set(feature_codes)
        return set(feature_codes)


class FakeMatrixApi:
    """Matrix endpoints of AdminApiClient, in memory"""

    def __init__(self, fail_loads=False):
        self.fail_loads = fail_loads
        self.saved = []

    def get_feature_matrix(self):
        if self.fail_loads:
            raise AdminBackendUnavailable("timed out")
        return {
            "roles": ["manager", "worker"],
            "features": [{"code": "chat.view"}, {"code": "payroll.view"}],
            "matrix": {
                "manager": {"chat.view": True, "payroll.view": False},
                "worker": {"chat.view": True, "payroll.view": False},
            },
        }

    def save_feature_matrix(self, records):
        self.saved.append(records)
        return self.get_feature_matrix()


@pytest.fixture
def api_client(client, admin_user):
    api = AdminApiClient(http_client=client, api_prefix="/api/v1", timeout=5)
    api.login(admin_user.email, "testpass123")
    return api


def test_gate_only_latest_ticket_is_current():
    gate = LatestRequestGate()
    first = gate.issue("user_visibility", 1)
    second = gate.issue("user_visibility", 2)
    other_scope = gate.issue("project_access", 1)

    assert gate.is_current(first) is False
    assert gate.is_current(second) is True
    assert gate.is_current(other_scope) is True


def test_select_loads_granted_set():
    editor = VisibilityEditor(FakeApi())

    assert editor.select(1) is True
    assert editor.granted == {"chat.view"}
    assert editor.dirty is False
    assert editor.loading is False


def test_stale_select_response_is_ignored():
    editor = VisibilityEditor(FakeApi())
    slow = editor.begin_select(1)
    fast = editor.begin_select(2)

    assert editor.apply(fast, {"payroll.view"}) is True
    assert editor.apply(slow, {"chat.view"}) is False

    assert editor.selected == 2
    assert editor.granted == {"payroll.view"}


def test_switching_with_unsaved_edits_needs_confirmation():
    editor = VisibilityEditor(FakeApi())
    editor.select(1)
    editor.toggle("leave.view", True)

    with pytest.raises(UnsavedChanges):
        editor.select(2)
    assert editor.selected == 1
    assert editor.granted == {"chat.view", "leave.view"}

    editor.select(2, confirm_discard=True)
    assert editor.granted == {"payroll.view"}
    assert editor.dirty is False


def test_toggle_while_loading_is_rejected():
    editor = VisibilityEditor(FakeApi())
    editor.begin_select(1)

    with pytest.raises(ValueError):
        editor.toggle("chat.view", False)


def test_failed_save_keeps_edits():
    api = FakeApi()
    editor = VisibilityEditor(api)
    editor.select(1)
    editor.toggle("chat.view", False)
    editor.toggle("leave.view", True)
    api.fail_saves = True

    with pytest.raises(AdminBackendUnavailable):
        editor.save()

    assert editor.dirty is True
    assert editor.granted == {"leave.view"}


def test_save_sends_granted_items_and_reloads():
    api = FakeApi()
    editor = VisibilityEditor(api)
    editor.select(1)
    editor.toggle("leave.view", True)

    assert editor.save() is True

    assert api.saved == [(1, {"chat.view", "leave.view"})]
    assert editor.dirty is False


def test_failed_select_clears_loading():
    editor = VisibilityEditor(FakeApi())

    with pytest.raises(AdminNotFound):
        editor.select(99)
    assert editor.loading is False


def test_client_maps_error_statuses(client, worker_user):
    api = AdminApiClient(http_client=client, api_prefix="/api/v1")
    api.login(worker_user.email, "testpass123")

    with pytest.raises(AdminForbidden) as exc_info:
        api.get_feature_matrix()
    assert exc_info.value.status_code == 403


def test_client_maps_transport_errors():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    http = httpx.Client(base_url="http://backoffice.invalid", transport=httpx.MockTransport(handler))
    api = AdminApiClient(http_client=http, token="token")

    with pytest.raises(AdminBackendUnavailable):
        api.get_feature_matrix()


def test_client_maps_server_errors():
    transport = httpx.MockTransport(lambda request: httpx.Response(503, json={"detail": "down"}))
    api = AdminApiClient(http_client=httpx.Client(base_url="http://backoffice.invalid", transport=transport))

    with pytest.raises(AdminBackendUnavailable) as exc_info:
        api.list_projects()
    assert str(exc_info.value) == "down"


def test_visibility_editor_against_api(api_client, worker_user):
    assert [u["id"] for u in api_client.list_visibility_users()] == [worker_user.id]
    assert "purchase_requests.create" in {f["code"] for f in api_client.list_active_features()}

    editor = VisibilityEditor(api_client)
    editor.select(worker_user.id)
    assert editor.granted == frozenset()

    editor.toggle("purchase_requests.create", True)
    editor.save()

    assert api_client.get_user_visibility(worker_user.id) == {"purchase_requests.create"}
    assert editor.dirty is False


def test_visibility_editor_unknown_feature(api_client, worker_user):
    editor = VisibilityEditor(api_client)
    editor.select(worker_user.id)
    editor.toggle("rockets.launch", True)

    with pytest.raises(AdminValidationError):
        editor.save()
    assert editor.dirty is True


def test_project_access_editor_against_api(api_client, project, worker_user):
    editor = ProjectAccessEditor(api_client)
    editor.select(project.id)

    editor.toggle(worker_user.id, True)
    editor.save()

    assert api_client.get_project_access(project.id) == {worker_user.id}
    assert [p["id"] for p in api_client.list_projects()] == [project.id]
    assert [u["id"] for u in api_client.list_project_access_users()] == [worker_user.id]


def test_matrix_editor_against_api(api_client):
    editor = FeatureMatrixEditor(api_client)
    editor.load()
    assert editor.grid["manager"]["approvals.view"] is True

    editor.toggle("manager", "approvals.view", False)
    editor.toggle("worker", "payroll.view", True)
    assert editor.dirty is True
    assert len(editor.records()) == len(editor.roles) * len(editor.features)

    assert editor.save() is True

    saved = api_client.get_feature_matrix()["matrix"]
    assert saved["manager"]["approvals.view"] is False
    assert saved["worker"]["payroll.view"] is True
    assert editor.dirty is False


def test_logout_clears_token(api_client):
    api_client.logout()

    assert api_client.token is None


def test_save_while_loading_is_rejected():
    api = FakeApi()
    editor = VisibilityEditor(api)
    editor.select(1)
    editor.begin_select(2)

    with pytest.raises(ValueError):
        editor.save()

    assert api.saved == []
    assert api.visibility[2] == {"payroll.view"}


def test_reselecting_same_key_with_unsaved_edits_needs_confirmation():
    editor = VisibilityEditor(FakeApi())
    editor.select(1)
    editor.toggle("leave.view", True)

    with pytest.raises(UnsavedChanges):
        editor.select(1)
    assert editor.granted == {"chat.view", "leave.view"}

    editor.select(1, confirm_discard=True)
    assert editor.granted == {"chat.view"}


def test_matrix_save_before_load_is_refused():
    api = FakeMatrixApi()
    editor = FeatureMatrixEditor(api)

    with pytest.raises(ValueError):
        editor.toggle("worker", "chat.view", True)
    with pytest.raises(ValueError):
        editor.save()
    assert api.saved == []


def test_matrix_save_after_failed_load_is_refused():
    api = FakeMatrixApi(fail_loads=True)
    editor = FeatureMatrixEditor(api)

    with pytest.raises(AdminBackendUnavailable):
        editor.load()
    with pytest.raises(ValueError):
        editor.save()
    assert api.saved == []


def test_matrix_save_sends_every_loaded_cell():
    api = FakeMatrixApi()
    editor = FeatureMatrixEditor(api)
    editor.load()
    editor.toggle("worker", "payroll.view", True)

    assert editor.save() is True

    sent = {(r["role"], r["feature_code"]): r["can_access"] for r in api.saved[0]}
    assert len(sent) == 4
    assert sent[("worker", "payroll.view")] is True
    assert sent[("manager", "payroll.view")] is False
