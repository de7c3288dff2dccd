"""Shared fixtures for integration tests.

Integration tests run the real executor, repository and connection manager
against a file-backed SQLite database created fresh for each test. The
process-wide connection manager and invalidator are swapped for test
instances so the module-level actions use them.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from jobboard.actions.invalidation import CacheInvalidator
from jobboard.api.main import create_app
from jobboard.infrastructure.database.session import ConnectionManager


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """Endpoint of a fresh SQLite database for this test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'jobboard.db'}"


@pytest.fixture
async def connection_manager(
    monkeypatch: pytest.MonkeyPatch, database_url: str
) -> AsyncGenerator[ConnectionManager]:
    """Process-wide connection manager bound to the test database."""
    manager = ConnectionManager(database_url, create_tables=True)
    monkeypatch.setattr(
        "jobboard.infrastructure.database.session._connection_manager", manager
    )

    yield manager

    await manager.close()


@pytest.fixture
def invalidated_paths(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Paths passed to the process-wide invalidator during the test."""
    paths: list[str] = []
    monkeypatch.setattr(
        "jobboard.actions.invalidation._invalidator", CacheInvalidator([paths.append])
    )
    return paths


@pytest.fixture
async def client(
    connection_manager: ConnectionManager,
) -> AsyncGenerator[AsyncClient]:
    """HTTP client for a fresh app instance backed by the test database."""
    _ = connection_manager  # Ensure the test database is installed first
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
