"""Pytest configuration for traffic2postman tests."""

import sys
from pathlib import Path

import pytest
import structlog
from structlog._config import BoundLoggerLazyProxy

# Add src directory to sys.path for test imports
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate each test from TRAFFIC2POSTMAN_* environment and cached settings."""
    import os

    for key in list(os.environ):
        if key.startswith("TRAFFIC2POSTMAN_"):
            monkeypatch.delenv(key)

    from traffic2postman.config import reset_settings

    reset_settings()


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Reset structlog after each test to prevent closed file handle errors.

    CliRunner captures stderr with a temporary file. When configure_logging()
    runs inside CliRunner, structlog binds loggers to that temp file. After
    the test, CliRunner closes the file.
    """
    yield
    structlog.reset_defaults()
    for module in list(sys.modules.values()):
        for attr in getattr(module, "__dict__", {}).values():
            if isinstance(attr, BoundLoggerLazyProxy):
                attr.__dict__.pop("bind", None)


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding sample Burp exports and cURL command lists."""
    return FIXTURES_DIR
