"""
Pytest configuration and shared fixtures for cargo-android tests.
"""

import logging
import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.ndk import linux_host, mock_ndk, mock_ndk_bin

from cargo_android.core.platform import clear_host_cache


@pytest.fixture(autouse=True)
def _clear_host_cache():
    """Never let host detection leak between tests."""
    clear_host_cache()
    yield
    clear_host_cache()


@pytest.fixture
def clean_environ(monkeypatch):
    """Remove every variable cargo-android reads from os.environ."""
    for name in (
        "ANDROID_NDK_ROOT",
        "ANDROID_API",
        "CARGO",
        "CARGO_ANDROID_LOG",
        "RUSTFLAGS",
        "CARGO_ENCODED_RUSTFLAGS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo logging.basicConfig(force=True) calls made by the CLI."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
