"""Test fixtures for cargo-android tests.

- ndk: Synthetic Android NDK directory trees

Import fixtures in your tests using:
    from tests.fixtures.ndk import mock_ndk
"""

__all__ = [
    "ndk",
]
