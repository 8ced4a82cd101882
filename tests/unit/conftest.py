"""Unit test fixtures."""

from contextlib import contextmanager

import pytest

from config.settings import Settings


@contextmanager
def override_deps(app, overrides):
    """Temporarily replace FastAPI dependencies with fixed values.

    Args:
        app: The FastAPI application.
        overrides: Maps each dependency function to the value it should return.
    """

    def provide(value):
        return lambda: value

    for dep_fn, value in overrides.items():
        app.dependency_overrides[dep_fn] = provide(value)
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def mock_settings(monkeypatch):
    """Settings isolated from the developer's environment."""
    for var in ("SENTRY_DSN", "CATALOG_DB_PATH", "AUTO_SELECT_CONFIDENCE"):
        monkeypatch.delenv(var, raising=False)
    return Settings(
        _env_file=None,
        sentry_dsn=None,
        catalog_db_path="test_catalog.db",
    )
