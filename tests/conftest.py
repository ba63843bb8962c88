"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import uuid
from typing import AsyncGenerator

import pytest
from fastapi import HTTPException, status
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from database import Base, get_async_session
from auth.models import User
from links.models import Link  # noqa: F401
from access_log.models import PortalAccessLog  # noqa: F401
from links.repository import SQLAlchemyLinkRepository
from links.service import LinkService


@pytest.fixture
async def engine():
    """In-memory SQLite shared by every connection of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def repository(session):
    return SQLAlchemyLinkRepository(session)


@pytest.fixture
def service(repository):
    return LinkService(repository)


@pytest.fixture
def owner_a():
    return uuid.uuid4()


@pytest.fixture
def owner_b():
    return uuid.uuid4()


def make_user(email: str) -> User:
    return User(
        id=uuid.uuid4(),
        email=email,
        name=email.split('@')[0],
        hashed_password='not-used',
        is_active=True,
        is_superuser=False,
        is_verified=True,
    )


class AuthState:
    """Which user the overridden auth dependencies report."""

    def __init__(self):
        self.user = None

    def login(self, user):
        self.user = user

    def logout(self):
        self.user = None


@pytest.fixture
def auth_state():
    return AuthState()


@pytest.fixture
async def client(session_maker, auth_state) -> AsyncGenerator[AsyncClient, None]:
    from main import app
    from auth.auth import current_active_user, current_user

    async def override_session():
        async with session_maker() as session:
            yield session

    def override_active_user():
        if auth_state.user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        return auth_state.user

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[current_user] = lambda: auth_state.user
    app.dependency_overrides[current_active_user] = override_active_user

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def alice():
    return make_user("alice@example.com")


@pytest.fixture
def bob():
    return make_user("bob@example.com")


@pytest.fixture
def sample_urls():
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def user_factory():
    return make_user
