"""
Wine Catalog Backend — Configuration Tests
============================================

What:  Startup validation of required settings.
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from app.config import DEFAULT_SESSION_SECRET, Settings, settings
from app.main import app, lifespan


def test_default_session_secret_fails_validation():
    with pytest.raises(ValueError, match="SESSION_SECRET"):
        Settings(session_secret=DEFAULT_SESSION_SECRET).validate_required_for_production()


def test_custom_session_secret_passes_validation():
    Settings(session_secret="a-long-random-session-secret").validate_required_for_production()


@pytest.mark.asyncio
async def test_startup_logs_default_session_secret(caplog):
    with patch.object(settings, "session_secret", DEFAULT_SESSION_SECRET), \
            patch.object(settings, "auto_create_tables", False), \
            patch("app.main.setup_logging"), \
            patch("app.main.verify_connection", AsyncMock()), \
            patch("app.main.dispose_engine", AsyncMock()), \
            caplog.at_level(logging.ERROR, logger="app.main"):
        async with lifespan(app):
            pass

    errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    assert any("Configuration error" in m and "SESSION_SECRET" in m for m in errors)


def test_startup_retry_uses_configured_backoff():
    from app.database import verify_connection

    wait = verify_connection.retry.wait
    assert wait.multiplier == settings.retry_min_wait
    assert wait.max == settings.retry_max_wait
