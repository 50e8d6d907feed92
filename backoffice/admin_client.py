"""
HTTP client and editor state for the admin permission screens.

Usage pattern:

    from backoffice.admin_client import AdminApiClient, VisibilityEditor

    client = AdminApiClient()
    client.login("admin@company.com", "Admin@12345")

    editor = VisibilityEditor(client)
    editor.select(42)
    editor.toggle("payroll.view", True)
    editor.save()

Every fetch is tagged with a ticket from LatestRequestGate. A response whose
ticket is no longer the latest for its scope is dropped, so a slow reply for
a previously selected user can't land in the form of the current one.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set

import httpx

from backoffice.constants import ALL_ROLES
from backoffice.core.config import settings

logger = logging.getLogger(__name__)


# -----------------------------
# Error types
# -----------------------------


class AdminApiError(Exception):
    """Raised for any non-success response of the backend"""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class AdminAuthRequired(AdminApiError):
    pass


class AdminForbidden(AdminApiError):
    pass


class AdminNotFound(AdminApiError):
    pass


class AdminValidationError(AdminApiError):
    pass


class AdminBackendUnavailable(AdminApiError):
    """Timeouts, connection failures and 5xx"""


class UnsavedChanges(Exception):
    """Switching selection would drop edits; retry with confirm_discard=True"""


_STATUS_ERRORS = {
    401: AdminAuthRequired,
    403: AdminForbidden,
    404: AdminNotFound,
    422: AdminValidationError,
}


# -----------------------------
# API client
# -----------------------------


class AdminApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
        api_prefix: str = "",
    ):
        self.timeout = timeout if timeout is not None else settings.ADMIN_CLIENT_TIMEOUT_SECONDS
        self._client = http_client or httpx.Client(
            base_url=(base_url or settings.ADMIN_CLIENT_BASE_URL).rstrip("/"),
            timeout=self.timeout,
        )
        self.api_prefix = api_prefix.rstrip("/")
        self.token = token

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.api_prefix}{path}"
        try:
            response = self._client.request(
                method, url, headers=self._headers(), timeout=self.timeout, **kwargs
            )
        except httpx.TimeoutException as e:
            raise AdminBackendUnavailable(f"{method} {url} timed out after {self.timeout}s") from e
        except httpx.TransportError as e:
            raise AdminBackendUnavailable(f"{method} {url} failed: {e}") from e

        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = {"detail": response.text}
            detail = payload.get("detail") if isinstance(payload, dict) else payload
            error_cls = _STATUS_ERRORS.get(response.status_code)
            if error_cls is None:
                error_cls = AdminBackendUnavailable if response.status_code >= 500 else AdminApiError
            raise error_cls(str(detail), status_code=response.status_code, payload=payload)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # auth

    def login(self, email: str, password: str) -> str:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["access_token"]
        return self.token

    def logout(self) -> None:
        self._request("POST", "/auth/logout")
        self.token = None

    # feature matrix

    def get_feature_matrix(self) -> Dict[str, Any]:
        return self._request("GET", "/admin/feature-matrix")

    def save_feature_matrix(self, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._request("PUT", "/admin/feature-matrix", json={"records": records})

    # user visibility

    def list_active_features(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/features", params={"active_only": True})

    def list_visibility_users(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/admin/visibility/users")

    def get_user_visibility(self, user_id: int) -> Set[str]:
        return set(self._request("GET", f"/admin/visibility/{user_id}")["feature_codes"])

    def save_user_visibility(self, user_id: int, feature_codes: Iterable[str]) -> Set[str]:
        data = self._request(
            "PUT", f"/admin/visibility/{user_id}", json={"feature_codes": sorted(feature_codes)}
        )
        return set(data["feature_codes"])

    # project access

    def list_projects(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/projects")

    def list_project_access_users(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/admin/project-access/users")

    def get_project_access(self, project_id: int) -> Set[int]:
        return set(self._request("GET", f"/admin/project-access/{project_id}")["user_ids"])

    def save_project_access(self, project_id: int, user_ids: Iterable[int]) -> Set[int]:
        data = self._request(
            "PUT", f"/admin/project-access/{project_id}", json={"user_ids": sorted(user_ids)}
        )
        return set(data["user_ids"])


# -----------------------------
# Stale-response guard
# -----------------------------


@dataclass(frozen=True)
class GateTicket:
    scope: str
    key: Any
    generation: int


class LatestRequestGate:
    """Monotonic request numbering per scope"""

    def __init__(self):
        self._lock = threading.Lock()
        self._generations: Dict[str, int] = {}

    def issue(self, scope: str, key: Any = None) -> GateTicket:
        with self._lock:
            generation = self._generations.get(scope, 0) + 1
            self._generations[scope] = generation
            return GateTicket(scope=scope, key=key, generation=generation)

    def is_current(self, ticket: GateTicket) -> bool:
        with self._lock:
            return self._generations.get(ticket.scope) == ticket.generation


# -----------------------------
# Editors
# -----------------------------


class _GrantSetEditor:
    """Editor over a sparse grant set scoped to one selected key"""

    scope = "grants"

    def __init__(self, client: AdminApiClient, gate: Optional[LatestRequestGate] = None):
        self.client = client
        self.gate = gate or LatestRequestGate()
        self.selected: Any = None
        self.loading = False
        self._saved: FrozenSet[Any] = frozenset()
        self._current: Set[Any] = set()

    def _fetch(self, key: Any) -> Set[Any]:
        raise NotImplementedError

    def _store(self, key: Any, granted: Set[Any]) -> Set[Any]:
        raise NotImplementedError

    @property
    def granted(self) -> FrozenSet[Any]:
        return frozenset(self._current)

    @property
    def dirty(self) -> bool:
        return self.selected is not None and set(self._saved) != self._current

    def begin_select(self, key: Any, confirm_discard: bool = False) -> GateTicket:
        # Reloading the same key drops edits too
        if self.dirty and not confirm_discard:
            raise UnsavedChanges(f"Unsaved changes for {self.selected!r}")
        ticket = self.gate.issue(self.scope, key)
        self.selected = key
        self.loading = True
        self._saved = frozenset()
        self._current = set()
        return ticket

    def apply(self, ticket: GateTicket, granted: Iterable[Any]) -> bool:
        """Apply a fetch result; stale tickets are ignored."""
        if not self.gate.is_current(ticket) or ticket.key != self.selected:
            logger.debug("Ignoring stale %s response for %r", self.scope, ticket.key)
            return False
        self._saved = frozenset(granted)
        self._current = set(self._saved)
        self.loading = False
        return True

    def select(self, key: Any, confirm_discard: bool = False) -> bool:
        ticket = self.begin_select(key, confirm_discard=confirm_discard)
        try:
            granted = self._fetch(key)
        except AdminApiError:
            if self.gate.is_current(ticket):
                self.loading = False
            raise
        return self.apply(ticket, granted)

    def toggle(self, item: Any, granted: bool) -> None:
        if self.selected is None:
            raise ValueError("Nothing selected")
        if self.loading:
            raise ValueError(f"{self.selected!r} is still loading")
        if granted:
            self._current.add(item)
        else:
            self._current.discard(item)

    def save(self) -> bool:
        """
        Send the current set. On failure the edits stay in place (still
        dirty) and the error propagates.
        """
        if self.selected is None:
            raise ValueError("Nothing selected")
        if self.loading:
            raise ValueError(f"{self.selected!r} is still loading")
        ticket = self.gate.issue(self.scope, self.selected)
        stored = self._store(self.selected, set(self._current))
        return self.apply(ticket, stored)


class VisibilityEditor(_GrantSetEditor):
    """
    Per-user feature visibility; key = user id, items = feature codes.

    Saving an empty set removes the user's list altogether. Under the
    "override" precedence the user then falls back to their role defaults,
    which may show more than the cleared list did.
    """

    scope = "user_visibility"

    def _fetch(self, key: Any) -> Set[str]:
        return self.client.get_user_visibility(key)

    def _store(self, key: Any, granted: Set[Any]) -> Set[str]:
        return self.client.save_user_visibility(key, granted)


class ProjectAccessEditor(_GrantSetEditor):
    """Project access list; key = project id, items = user ids"""

    scope = "project_access"

    def _fetch(self, key: Any) -> Set[int]:
        return self.client.get_project_access(key)

    def _store(self, key: Any, granted: Set[Any]) -> Set[int]:
        return self.client.save_project_access(key, granted)


class FeatureMatrixEditor:
    """The role x feature grid; saved whole, false cells included"""

    scope = "feature_matrix"

    def __init__(self, client: AdminApiClient, gate: Optional[LatestRequestGate] = None):
        self.client = client
        self.gate = gate or LatestRequestGate()
        self.roles: List[str] = list(ALL_ROLES)
        self.features: List[Dict[str, Any]] = []
        self.grid: Dict[str, Dict[str, bool]] = {}
        self._saved: Dict[str, Dict[str, bool]] = {}
        self.loaded = False

    @property
    def dirty(self) -> bool:
        return self.grid != self._saved

    def _apply(self, ticket: GateTicket, data: Dict[str, Any]) -> bool:
        if not self.gate.is_current(ticket):
            return False
        self.roles = list(data["roles"])
        self.features = list(data["features"])
        self._saved = {role: dict(cells) for role, cells in data["matrix"].items()}
        self.grid = {role: dict(cells) for role, cells in self._saved.items()}
        self.loaded = True
        return True

    def load(self) -> bool:
        ticket = self.gate.issue(self.scope)
        self.loaded = False
        return self._apply(ticket, self.client.get_feature_matrix())

    def toggle(self, role: str, feature_code: str, granted: bool) -> None:
        if not self.loaded:
            raise ValueError("Feature matrix is not loaded")
        self.grid.setdefault(role, {})[feature_code] = bool(granted)

    def records(self) -> List[Dict[str, Any]]:
        return [
            {
                "role": role,
                "feature_code": feature["code"],
                "can_access": bool(self.grid.get(role, {}).get(feature["code"], False)),
            }
            for role in self.roles
            for feature in self.features
        ]

    def save(self) -> bool:
        """Send every cell of the loaded grid; refuses before a load has succeeded."""
        if not self.loaded or not self.features:
            raise ValueError("Feature matrix is not loaded")
        ticket = self.gate.issue(self.scope)
        return self._apply(ticket, self.client.save_feature_matrix(self.records()))
