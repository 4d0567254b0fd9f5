"""
Wine Catalog Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set at the top of this module, before
       anything under `app` is imported, so Settings() picks them up.

Fixtures (function-scoped):
    ├── mock_db_session:    AsyncMock standing in for AsyncSession
    ├── executed_sql:       compiles the statements passed to mock_db_session.execute
    ├── temp_storage:       temporary storage root
    ├── sample_image_bytes: minimal JPEG bytes
    ├── sample_wine:        a populated Wine ORM instance
    └── test_client:        httpx AsyncClient over the ASGI app, with the
                            database dependency replaced by mock_db_session
"""

import os
import tempfile
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.dialects import postgresql

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup (before any app import)
# ══════════════════════════════════════════════════════════════════════════

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="wine_catalog_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SESSION_SECRET"] = "test-session-secret-not-for-production"
# The limiter's counters live for the whole test session
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

from app.models.wine import Wine  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Mock async database session.

    Usage:
        mock_db_session.get.return_value = wine
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = [wine]
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def executed_sql(mock_db_session):
    """
    Compile the statement of the n-th `execute` call (PostgreSQL dialect).

    Usage:
        compiled = executed_sql(0)
        assert "ORDER BY wines.created_at DESC" in str(compiled)
        assert compiled.params["filename"] == "new.jpg"
    """
    def _compile(call_index=0):
        statement = mock_db_session.execute.await_args_list[call_index].args[0]
        return statement.compile(dialect=postgresql.dialect())
    return _compile


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Smallest JPEG that python-magic recognizes: SOI + JFIF header + EOI."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_wine():
    now = datetime.now(timezone.utc)
    return Wine(
        id=uuid.uuid4(),
        name="La Landonne",
        producer="Guigal",
        variety="Syrah",
        country="France",
        region="Rhône",
        appellation="Côte-Rôtie",
        vintage="2015",
        front_label="front.jpg",
        back_label=None,
        front_label_picture_id=uuid.uuid4(),
        back_label_picture_id=None,
        color_rating={"intensity": 4},
        attributes={"cellarLocation": "rack 3"},
        session_id="sess-1",
        created_at=now,
        updated_at=now,
    )


@pytest_asyncio.fixture
async def test_client(mock_db_session):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    The lifespan does not run under ASGITransport, so no database is needed.
    Every request gets mock_db_session from get_db_session.
    """
    from app.database import get_db_session
    from app.main import app

    async def _override():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = _override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()
