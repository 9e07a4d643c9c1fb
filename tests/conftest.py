"""Pytest fixtures for nugrant tests."""

import pytest

from nugrant import clear_settings


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """Clear the settings override before and after each test."""
    clear_settings()
    yield
    clear_settings()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove nugrant-related environment variables."""
    env_vars = [
        "NUGRANT_ARRAY_STRATEGY",
        "NUGRANT_USE_STRING_KEYS",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config() -> dict:
    """Provide a nested configuration mapping."""
    return {
        "vm": {
            "box": "ubuntu",
            "memory": 1024,
            "network": {"private": True, "ip": "10.0.0.2"},
        },
        "ports": [22, 80],
        "debug": False,
        "owner": None,
    }
