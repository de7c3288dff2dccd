"""Root conftest.py for the Jobboard test suite.

This file contains project-wide fixtures and pytest configuration.
"""

import os
from collections.abc import Generator

import pytest

from jobboard.core.config import get_settings
from jobboard.core.error_context import _get_sensitive_fields
from jobboard.infrastructure.payments import get_payment_gateway


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear cached settings and settings-derived objects around each test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    get_payment_gateway.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    get_payment_gateway.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove application environment variables that could leak into a test.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    env_prefixes = [
        "APP_",
        "API_",
        "ENVIRONMENT",
        "DEBUG",
        "LOG_CONFIG__",
        "DATABASE_CONFIG__",
        "PAYMENT_CONFIG__",
    ]
    for key in list(os.environ.keys()):
        if any(key.upper().startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch

