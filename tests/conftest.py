import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import siteops.models  # noqa: F401  (registers the tables on SQLModel.metadata)
from siteops.api import deps
from siteops.core.security import create_access_token
from siteops.db.session import get_db
from siteops.main import app
from siteops.models.user import User, UserRole
from siteops.store.memory import MemoryStore
from siteops.store.sql import SqlStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every service test runs against both storage backends."""
    if request.param == "memory":
        yield MemoryStore()
        return
    engine = request.getfixturevalue("engine")
    with Session(engine) as session:
        yield SqlStore(session)


@pytest.fixture
def memory_store():
    return MemoryStore()


def _seed_users(store):
    admin = store.add(User(email="admin@example.com", name="Site Admin", role=UserRole.ADMIN.value))
    staff = store.add(User(email="staff@example.com", name="Field Staff", employee_id="EMP-100"))
    other = store.add(User(email="other@example.com", name="Other Staff", employee_id="EMP-200"))
    return admin, staff, other


def _auth(user):
    return {"Authorization": f"Bearer {create_access_token(subject=user.email)}"}


@pytest.fixture
def client(memory_store):
    """API client over an in-memory store, with tokens for an admin and two field users."""
    admin, staff, other = _seed_users(memory_store)
    app.dependency_overrides[deps.get_store] = lambda: memory_store
    test_client = TestClient(app)
    test_client.store = memory_store
    test_client.admin_headers = _auth(admin)
    test_client.staff_headers = _auth(staff)
    test_client.other_headers = _auth(other)
    test_client.staff = staff
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sql_client(engine):
    """API client running the real SqlStore over in-memory SQLite, one session per request."""
    with Session(engine) as session:
        admin, staff, _ = _seed_users(SqlStore(session))
        headers = (_auth(admin), _auth(staff))

    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)
    test_client.admin_headers, test_client.staff_headers = headers
    yield test_client
    app.dependency_overrides.clear()
