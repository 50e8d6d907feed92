"""
Pytest configuration and fixtures
"""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-backoffice-tests")

from typing import Iterable, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backoffice.main import app  # noqa: E402
from backoffice.db.base import Base  # noqa: E402
from backoffice.db.init_db import seed_features, seed_role_matrix  # noqa: E402
from backoffice.core.deps import get_db  # noqa: E402
from backoffice.core.security import hash_password  # noqa: E402
from backoffice.services.authorization_session import registry  # noqa: E402

# Import all models to ensure they're registered with Base.metadata
from backoffice.models import (  # noqa: E402,F401
    AuditLog,
    Feature,
    LeaveBalance,
    Profile,
    Project,
    ProjectAccess,
    RolePermission,
    UserFeatureVisibility,
    UserRole,
)


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpass123"


@pytest.fixture(scope="function")
def db():
    """Fresh schema with the default feature catalog and role matrix"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    seed_features(db)
    seed_role_matrix(db)
    db.commit()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_registry():
    """Authorization sessions live in process memory; start every test empty"""
    registry.clear()
    yield
    registry.clear()


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(
    db: Session,
    email: str,
    role: str = "worker",
    extra_roles: Iterable[str] = (),
    full_name: Optional[str] = None,
    is_active: bool = True,
) -> Profile:
    """Profile plus role assignments for its primary role and any extras"""
    profile = Profile(
        full_name=full_name or email.split("@")[0],
        email=email,
        role=role,
        password_hash=hash_password(TEST_PASSWORD),
        is_active=is_active,
    )
    db.add(profile)
    db.flush()
    for r in dict.fromkeys([role, *extra_roles]):
        db.add(UserRole(user_id=profile.id, role=r))
    db.commit()
    db.refresh(profile)
    return profile


def login(client: TestClient, email: str, password: str = TEST_PASSWORD) -> dict:
    """Bearer headers for a fresh sign-in"""
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_user(db):
    return make_user(db, "admin@test.com", role="admin", full_name="Admin")


@pytest.fixture
def manager_user(db):
    return make_user(db, "manager@test.com", role="manager", full_name="Manager B")


@pytest.fixture
def worker_user(db):
    return make_user(db, "worker@test.com", role="worker", full_name="Worker A")


@pytest.fixture
def purchaser_user(db):
    return make_user(db, "purchaser@test.com", role="purchaser", full_name="Purchaser")


@pytest.fixture
def admin_headers(client, admin_user):
    return login(client, admin_user.email)


@pytest.fixture
def worker_headers(client, worker_user):
    return login(client, worker_user.email)


@pytest.fixture
def project(db):
    p = Project(name="North Tower", code="NT-01")
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@pytest.fixture
def user_factory(db):
    """make_user bound to the test database"""
    def _make(email: str, role: str = "worker", **kwargs) -> Profile:
        return make_user(db, email, role=role, **kwargs)
    return _make


@pytest.fixture
def login_as(client):
    """login bound to the test client"""
    def _login(email: str, password: str = TEST_PASSWORD) -> dict:
        return login(client, email, password)
    return _login
