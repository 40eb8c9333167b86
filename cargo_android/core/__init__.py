"""
Core functionality for cargo-android.

This package contains the foundational modules that other components depend on.
"""

from .platform import (
    NDK_HOST_TAGS,
    HostInfo,
    detect_host,
    ndk_host_tag,
    clear_host_cache,
)

from .config import (
    Settings,
    parse_api_level,
    log_level_from_name,
)

from .exceptions import (
    CargoAndroidError,
    ResolutionError,
    MissingNdkRootError,
    InvalidApiLevelError,
    UnsupportedHostError,
    ToolchainDirectoryMissingError,
    UnsupportedArchitectureError,
    MissingToolchainBinaryError,
    ChildSpawnError,
)

__all__ = [
    "NDK_HOST_TAGS",
    "HostInfo",
    "detect_host",
    "ndk_host_tag",
    "clear_host_cache",
    "Settings",
    "parse_api_level",
    "log_level_from_name",
    "CargoAndroidError",
    "ResolutionError",
    "MissingNdkRootError",
    "InvalidApiLevelError",
    "UnsupportedHostError",
    "ToolchainDirectoryMissingError",
    "UnsupportedArchitectureError",
    "MissingToolchainBinaryError",
    "ChildSpawnError",
]
