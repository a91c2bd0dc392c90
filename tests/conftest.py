"""
Pytest configuration and shared fixtures for testing.
"""
import os
from pathlib import Path

# Settings and the database engine are read at import time
_TEST_DB = Path(__file__).parent / "test.db"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-attempt-service")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TEST_DB}")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DEBUG", "False")

from contextlib import asynccontextmanager  # noqa: E402
from typing import AsyncGenerator, Dict  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from attempt_service.core.auth import TokenAuthenticationGate  # noqa: E402
from attempt_service.core.auth.security import create_access_token  # noqa: E402
from attempt_service.core.config import settings  # noqa: E402
from attempt_service.main import app  # noqa: E402
from attempt_service.models import Base, get_db  # noqa: E402
from attempt_service.services import AttemptLifecycleManager, AttemptStore  # noqa: E402

TEST_USER_ID = 7


@asynccontextmanager
async def _test_lifespan(app):
    """No-op lifespan for tests.

    Skips Sentry initialization and engine disposal.
    """
    yield


app.router.lifespan_context = _test_lifespan


ASYNC_SQLALCHEMY_DATABASE_URL = f"sqlite+aiosqlite:///{_TEST_DB}"

async_test_engine = create_async_engine(
    ASYNC_SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
AsyncTestingSessionLocal = async_sessionmaker(
    async_test_engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(scope="function")
async def async_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh async database session for each test.
    """
    async with async_test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncTestingSessionLocal() as session:
        yield session

    async with async_test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def attempt_store(async_db_session: AsyncSession) -> AttemptStore:
    return AttemptStore(async_db_session)


@pytest.fixture
def attempt_manager(attempt_store: AttemptStore) -> AttemptLifecycleManager:
    return AttemptLifecycleManager(attempt_store)


@pytest.fixture(scope="function")
async def async_client(
    async_db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async test client with database dependency override.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield async_db_session

    app.dependency_overrides[get_db] = override_get_db
    app.state.token_gate = TokenAuthenticationGate.from_settings(settings)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    del app.state.token_gate


@pytest.fixture
def access_token() -> str:
    """Valid token for TEST_USER_ID signed with the configured secret."""
    return create_access_token({"id": TEST_USER_ID})


@pytest.fixture
def auth_headers(access_token: str) -> Dict[str, str]:
    """
    Create authentication headers for the test user.
    """
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def enforce_ownership(monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_ATTEMPT_OWNERSHIP", True)


@pytest.fixture
def enforce_single_active(monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_SINGLE_ACTIVE_ATTEMPT", True)
