"""
Centralized exception hierarchy for cargo-android.

Every failure that can stop the launcher before Cargo is spawned has its own
exception type and its own process exit code, so scripts wrapping
``cargo android`` can tell a misconfigured NDK from a failed build.
"""

from typing import Iterable, Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class CargoAndroidError(Exception):
    """Base exception for all cargo-android errors."""

    exit_code = 255


class ResolutionError(CargoAndroidError):
    """Base exception for failures while resolving the NDK toolchain."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class MissingNdkRootError(ResolutionError):
    """Raised when ANDROID_NDK_ROOT is unset while building for Android."""

    exit_code = 3

    def __init__(self, target: str):
        self.target = target
        super().__init__(
            f"ANDROID_NDK_ROOT must be set when building for Android "
            f"(target: {target})"
        )


class InvalidApiLevelError(ResolutionError):
    """Raised when ANDROID_API is malformed or outside the supported range."""

    exit_code = 7

    def __init__(
        self,
        value: str,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
        target: str = "",
    ):
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        self.target = target

        if minimum is None or maximum is None:
            msg = f"Invalid ANDROID_API: {value!r} (expected a positive integer)"
        else:
            msg = (
                f"ANDROID_API={value} is not supported for {target}: "
                f"valid range is {minimum}..{maximum}"
            )
        super().__init__(msg)


# ============================================================================
# Host / Toolchain Exceptions
# ============================================================================


class UnsupportedHostError(ResolutionError):
    """Raised when the running OS/architecture has no NDK prebuilt toolchain."""

    exit_code = 4

    def __init__(self, os_name: str, arch: str, supported: Iterable[str] = ()):
        self.os_name = os_name
        self.arch = arch
        msg = f"Unsupported host for the Android NDK: {os_name}-{arch}"
        supported = list(supported)
        if supported:
            msg += f" (supported hosts: {', '.join(supported)})"
        super().__init__(msg)


class ToolchainDirectoryMissingError(ResolutionError):
    """Raised when the prebuilt toolchain directory is absent from the NDK."""

    exit_code = 5

    def __init__(self, path):
        self.path = path
        super().__init__(
            f"Toolchain directory not found: {path} "
            f"(is ANDROID_NDK_ROOT pointing at a complete NDK?)"
        )


class UnsupportedArchitectureError(ResolutionError):
    """Raised when the NDK has no clang wrappers for the requested target."""

    exit_code = 6

    def __init__(self, target: str, reason: str = ""):
        self.target = target
        msg = f"Architecture not supported by this NDK: {target}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class MissingToolchainBinaryError(ResolutionError):
    """Raised when an expected NDK binary does not exist on disk."""

    exit_code = 8

    def __init__(self, path):
        self.path = path
        super().__init__(f"Missing toolchain binary: {path}")


# ============================================================================
# Launch Exceptions
# ============================================================================


class ChildSpawnError(CargoAndroidError):
    """Raised when the build tool cannot be started."""

    exit_code = 127

    def __init__(self, command, cause: OSError):
        self.command = list(command)
        self.cause = cause
        super().__init__(f"Failed to launch {self.command[0]!r}: {cause}")


__all__ = [
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
