"""Integration test fixtures for database and HTTP client operations.

These fixtures require a reachable PostgreSQL database; tests are skipped
when it is not available. Uses polyfactory for test data generation.
"""

from collections.abc import AsyncGenerator, Callable
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.collab.api.dependencies import get_email_sender
from src.collab.core import db
from src.collab.core.config import get_settings
from src.collab.core.db import run_migrations_async
from src.collab.core.security import create_access_token
from src.collab.main import create_app
from src.collab.models import Profile, Project
from tests.factories import ProfileFactory, ProjectFactory
from tests.utils.cleanup import cleanup_principals, cleanup_project_cascade


class RecordingEmailSender:
    """EmailSender stand-in that records every send."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail_for: set[str] = set()

    def send(self, to_address: str, subject: str, html_body: str) -> bool:
        self.sent.append((to_address, subject, html_body))
        return to_address not in self.fail_for


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure migrations are applied."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)
    try:
        async with test_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OperationalError, OSError) as e:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL not available: {e}")

    await run_migrations_async()

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does NOT auto-commit; tests commit explicitly.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def profiles(engine: AsyncEngine, db_session: AsyncSession) -> AsyncGenerator[dict]:
    """Owner, alice and bob profiles, removed after the test."""
    created = {
        "owner": ProfileFactory.build(display_name="Olivia"),
        "alice": ProfileFactory.build(display_name="Alice"),
        "bob": ProfileFactory.build(display_name=None),
    }
    db_session.add_all(created.values())
    await db_session.commit()

    yield created

    async with engine.connect() as conn:
        await cleanup_principals(conn, [p.id for p in created.values()])
        await conn.commit()


@pytest.fixture
async def project(
    engine: AsyncEngine, db_session: AsyncSession, profiles: dict[str, Profile]
) -> AsyncGenerator[Project]:
    """Private project owned by the owner profile."""
    project = ProjectFactory.build(
        owner_id=profiles["owner"].id, name="Blog", description="My blog"
    )
    db_session.add(project)
    await db_session.commit()

    yield project

    async with engine.connect() as conn:
        await cleanup_project_cascade(conn, project.id)
        await conn.commit()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
async def client(
    engine: AsyncEngine, email_sender: RecordingEmailSender
) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the real app with email captured."""
    await db.dispose_engine()

    app = create_app()
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    await db.dispose_engine()


@pytest.fixture
def auth_headers() -> Callable[[UUID], dict[str, str]]:
    def _headers(principal_id: UUID) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(principal_id)}"}

    return _headers
