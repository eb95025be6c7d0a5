"""Shared pytest configuration and fixtures."""

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring a chunking service or replica")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's exported service settings out of unit tests."""
    for name in ("LATE_CHUNKING_URL", "LATE_CHUNKING_TIMEOUT", "IC_URL", "IDENTITY_PEM_PATH"):
        monkeypatch.delenv(name, raising=False)
