"""Root test configuration for Airlock.

Isolates every test from the developer's own configuration: AIRLOCK_* env vars
are cleared, the working directory is a fresh tmp_path, and the home-directory
config path is removed from the search list.
"""

from typing import Callable

import pytest

from airlock.models.scan import Detector


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep load_config() from picking up config files outside the test."""
    import airlock.config

    monkeypatch.delenv("AIRLOCK_CONFIG", raising=False)
    monkeypatch.delenv("AIRLOCK_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(airlock.config, "DEFAULT_CONFIG_PATHS", [".airlock/config.yaml"])


@pytest.fixture
def make_detector() -> Callable[..., Detector]:
    """Factory for uncompiled Detectors with throwaway display metadata."""

    def _make(key: str, pattern: str, **kwargs) -> Detector:
        return Detector(
            key=key,
            display_name=kwargs.pop("display_name", key.upper()),
            description=kwargs.pop("description", f"{key} matched"),
            pattern=pattern,
            **kwargs,
        )

    return _make


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore default structlog configuration after CLI tests reconfigure it."""
    yield
    from airlock.utils.logger import configure_logging

    configure_logging()
