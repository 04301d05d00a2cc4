"""Pytest configuration and fixtures"""
import os

# Settings are read at import time; pin them before the app is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("IDENTITY_PROVIDER", "local")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import uuid
from typing import Callable, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from voyage_admin.auth.activity import ActivityLog
from voyage_admin.auth.directory import AdminDirectory
from voyage_admin.auth.identity import ProviderAuth, ProviderError, ProviderUser
from voyage_admin.auth.local_provider import LocalIdentityProvider
from voyage_admin.auth.service import AdminAuth
from voyage_admin.auth.session_store import MemorySessionStore
from voyage_admin.database import Base, get_db
from voyage_admin.main import app
from voyage_admin.schemas.admin_user import AdminProfile
from voyage_admin.schemas.session import ProviderSession

TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

T0 = 1_700_000_000.0  # 2023-11-14 22:13:20 UTC
DAY_MS = 24 * 60 * 60 * 1000


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override"""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------

class FakeClock:
    """Settable replacement for time.time"""

    def __init__(self, now: float = T0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms / 1000.0


class UnreachableDatabase:
    """Session whose every query fails the way a dropped connection does"""

    def __init__(self):
        self.rollbacks = 0

    def query(self, *entities):
        raise OperationalError("SELECT FROM admin_users", {}, Exception("server closed the connection unexpectedly"))

    def rollback(self) -> None:
        self.rollbacks += 1


class FakeIdentityProvider:
    """In-memory identity provider that records every call"""

    def __init__(self):
        self.passwords: Dict[str, str] = {}
        self.users: Dict[str, ProviderUser] = {}
        self.tokens: Dict[str, ProviderUser] = {}
        self.sign_in_calls: List[str] = []
        self.sign_out_calls: List[Optional[ProviderSession]] = []
        self.deleted: List[str] = []
        self.fail_sign_out = False
        self.fail_create = False

    def add_user(self, email: str, password: str) -> ProviderUser:
        user = ProviderUser(id=str(uuid.uuid4()), email=email)
        self.users[email] = user
        self.passwords[email] = password
        return user

    def sign_in_with_password(self, email: str, password: str) -> ProviderAuth:
        self.sign_in_calls.append(email)
        if email not in self.users or self.passwords[email] != password:
            raise ProviderError("Invalid login credentials", status_code=400)
        user = self.users[email]
        token = f"token-{uuid.uuid4()}"
        self.tokens[token] = user
        return ProviderAuth(user=user, session=ProviderSession(access_token=token, expires_in=3600))

    def sign_out(self, session: Optional[ProviderSession]) -> None:
        self.sign_out_calls.append(session)
        if self.fail_sign_out:
            raise ProviderError("provider unreachable")
        if session is not None:
            self.tokens.pop(session.access_token, None)

    def get_user(self, access_token: str) -> ProviderUser:
        if access_token not in self.tokens:
            raise ProviderError("invalid JWT", status_code=401)
        return self.tokens[access_token]

    def create_user(self, email: str, password: str, email_confirm: bool = True) -> ProviderUser:
        if self.fail_create or email in self.users:
            raise ProviderError("A user with this email address has already been registered", status_code=422)
        return self.add_user(email, password)

    def delete_user(self, user_id: str) -> None:
        self.deleted.append(user_id)
        for email, user in list(self.users.items()):
            if user.id == user_id:
                del self.users[email]
                del self.passwords[email]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def make_auth(db: Session, provider: FakeIdentityProvider, clock: FakeClock) -> Callable[..., AdminAuth]:
    """Build an AdminAuth over the fake provider and the test database"""

    def _make(**overrides) -> AdminAuth:
        kwargs = {
            "provider": provider,
            "directory": AdminDirectory(db),
            "activity_log": ActivityLog(db),
            "session_store": MemorySessionStore(),
            "clock": clock,
        }
        kwargs.update(overrides)
        return AdminAuth(**kwargs)

    return _make


@pytest.fixture
def add_admin(db: Session, provider: FakeIdentityProvider) -> Callable[..., AdminProfile]:
    """Register a provider identity plus an admin profile for it"""

    def _add(email: str, password: str = "correct-horse", role: str = "staff", is_active: bool = True) -> AdminProfile:
        identity = provider.add_user(email, password)
        directory = AdminDirectory(db)
        profile = directory.insert(
            user_id=identity.id,
            email=email,
            first_name="Test",
            last_name="Admin",
            role=role,
            created_by=None,
        )
        if not is_active:
            directory.deactivate(profile.id)
            profile = directory.get(profile.id)
        return profile

    return _add


# ---------------------------------------------------------------------------
# API helpers (built-in identity provider)
# ---------------------------------------------------------------------------

@pytest.fixture
def create_local_admin(db: Session) -> Callable[..., AdminProfile]:
    """Provision an identity in identity_users plus its admin profile"""

    def _create(email: str, password: str, role: str, first_name: str = "Test", last_name: str = "Admin") -> AdminProfile:
        identity = LocalIdentityProvider(db, session_lifetime=3600).create_user(email, password)
        return AdminDirectory(db).insert(
            user_id=identity.id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            created_by=None,
        )

    return _create


@pytest.fixture
def super_admin(create_local_admin) -> AdminProfile:
    return create_local_admin("admin@example.com", "admin123", "super_admin", "Super", "Admin")


@pytest.fixture
def login_headers(client: TestClient) -> Callable[[str, str], dict]:
    """Log in through the API and return bearer headers for the session"""

    def _login(email: str, password: str) -> dict:
        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        token = response.json()["session"]["provider_session"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture
def admin_headers(super_admin: AdminProfile, login_headers) -> dict:
    """Bearer headers for the seeded super_admin"""
    return login_headers("admin@example.com", "admin123")
