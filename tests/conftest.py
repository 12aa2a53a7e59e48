"""
Pytest configuration and fixtures for auth service tests.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Dict, List, Optional

import pytest
import pytest_asyncio
import fakeredis
import fakeredis.aioredis
from httpx import ASGITransport, AsyncClient

from authservice.core.config import Settings
from authservice.core.exceptions import DuplicateResourceError, RepositoryError
from authservice.core.security import PasswordHasher, TokenIssuer, generate_private_key
from authservice.main import create_application
from authservice.services.auth import AuthService
from authservice.services.rate_limit import LoginAttemptTracker
from authservice.services.session_store import SessionStore
from authservice.services.user import UserRecord


TEST_PASSWORD = "Str0ng!Pass"


class InMemoryUserRepository:
    """UserRepository fake keyed by user id."""

    def __init__(self):
        self.users: Dict[str, UserRecord] = {}
        self.fail_with: Optional[Exception] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def email_exists(self, email: str) -> bool:
        self._check()
        return any(user.email == email for user in self.users.values())

    async def create(self, email: str, password_hash: str, first_name: str, last_name: str) -> UserRecord:
        self._check()
        if await self.email_exists(email):
            raise DuplicateResourceError("Email already registered")
        user = UserRecord(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            created_at=datetime.now(timezone.utc)
        )
        self.users[user.id] = user
        return user

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        self._check()
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        self._check()
        return self.users.get(user_id)

    async def update_last_login(self, user_id: str) -> None:
        self._check()
        if user_id in self.users:
            self.users[user_id].last_login_at = datetime.now(timezone.utc)

    async def update_password(self, user_id: str, password_hash: str) -> bool:
        self._check()
        user = self.users.get(user_id)
        if user is None:
            return False
        user.password_hash = password_hash
        return True

    async def ping(self) -> bool:
        self._check()
        return True


class RecordingNotifier:
    """ResetNotifier that keeps every token it is handed."""

    def __init__(self):
        self.sent: List[Dict] = []

    async def send_password_reset(self, user: UserRecord, token: str, expires_in: timedelta) -> None:
        self.sent.append({"user": user, "token": token, "expires_in": expires_in})


@pytest.fixture
def settings() -> Settings:
    """Settings with cheap Argon2 parameters."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        ARGON2_MEMORY_COST=1024,
        ARGON2_TIME_COST=1,
        ARGON2_PARALLELISM=1
    )


@pytest.fixture(scope="session")
def rsa_private_key():
    """One RSA key per test session; generation is slow."""
    return generate_private_key()


@pytest.fixture
def hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher.from_settings(settings)


@pytest.fixture
def issuer(settings: Settings, rsa_private_key) -> TokenIssuer:
    return TokenIssuer(
        issuer=settings.JWT_ISSUER,
        access_token_ttl=settings.access_token_expire_timedelta,
        refresh_token_ttl=settings.refresh_token_expire_timedelta,
        private_key=rsa_private_key
    )


@pytest.fixture
def redis_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest_asyncio.fixture
async def redis_client(redis_server):
    """Create a fake Redis client for testing."""
    client = fakeredis.aioredis.FakeRedis(server=redis_server, decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def store(redis_client) -> SessionStore:
    return SessionStore(redis_client)


@pytest.fixture
def tracker(store: SessionStore, settings: Settings) -> LoginAttemptTracker:
    return LoginAttemptTracker.from_settings(store, settings)


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def auth_service(settings, hasher, issuer, store, tracker, user_repository, notifier) -> AuthService:
    return AuthService(
        settings=settings,
        hasher=hasher,
        issuer=issuer,
        store=store,
        tracker=tracker,
        users=user_repository,
        notifier=notifier
    )


@pytest_asyncio.fixture
async def test_user(auth_service: AuthService) -> UserRecord:
    """Create a registered test user."""
    response = await auth_service.sign_up(
        email="a@x.com",
        password=TEST_PASSWORD,
        first_name="A",
        last_name="B"
    )
    return await auth_service.users.get_by_id(response.user.id)


@pytest_asyncio.fixture
async def async_client(settings: Settings, auth_service: AuthService) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client bound to the fixture AuthService."""
    app = create_application(settings=settings, auth_service=auth_service)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def store_outage(monkeypatch):
    """Make selected SessionStore methods fail as if Redis were down."""
    from authservice.core.exceptions import StoreError

    def _break(store: SessionStore, *method_names: str) -> None:
        async def _fail(*args, **kwargs):
            raise StoreError("session store get failed", transient=True)

        for name in method_names:
            monkeypatch.setattr(store, name, _fail)

    return _break


@pytest.fixture
def repository_error() -> RepositoryError:
    return RepositoryError("user repository lookup failed", transient=True)
