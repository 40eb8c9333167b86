"""
Host platform detection for cargo-android.

The Android NDK ships one prebuilt LLVM toolchain per host, stored under
``toolchains/llvm/prebuilt/<host-tag>``. This module detects the running
OS and CPU architecture and maps them to that host tag.

Usage:
    from cargo_android.core.platform import detect_host, ndk_host_tag

    host = detect_host()
    print(f"Running on {host.platform_string()}")
    print(f"NDK prebuilt: {ndk_host_tag(host)}")
"""

import functools
import platform
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from cargo_android.core.exceptions import UnsupportedHostError


# (os, arch) -> NDK prebuilt directory name. The darwin prebuilt is a
# universal binary and also serves Apple Silicon hosts.
NDK_HOST_TAGS: Dict[Tuple[str, str], str] = {
    ("linux", "x64"): "linux-x86_64",
    ("macos", "x64"): "darwin-x86_64",
    ("macos", "arm64"): "darwin-x86_64",
    ("windows", "x64"): "windows-x86_64",
}


@dataclass(frozen=True)
class HostInfo:
    """
    Running host information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos') or the raw
            lower-cased system name for anything else
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm') or the raw
            machine name for anything else
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'macos-arm64').

        Example:
            >>> HostInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def clang_wrapper_suffix(self) -> str:
        """Suffix of the NDK's per-API clang wrapper scripts on this host."""
        return ".cmd" if self.is_windows else ""

    def executable_suffix(self) -> str:
        """Suffix of native executables (llvm-ar, llvm-strip, ...) on this host."""
        return ".exe" if self.is_windows else ""

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_host() -> HostInfo:
    """
    Detect the running host.

    This function is cached - it only runs detection once per process.

    Returns:
        HostInfo for the current process
    """
    return HostInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'windows', 'linux', 'macos', or the raw name
    """
    system = platform.system().lower()

    if system == "windows" or system.startswith(("cygwin", "msys", "mingw")):
        return "windows"
    elif system == "darwin":
        return "macos"
    return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm', or the raw name
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    # Return original for unknown architectures
    return machine


def ndk_host_tag(host: Optional[HostInfo] = None) -> str:
    """
    Get the NDK prebuilt host tag for a host.

    Args:
        host: Host to map. If None, detects the current host.

    Returns:
        Host tag such as 'linux-x86_64'

    Raises:
        UnsupportedHostError: If the NDK ships no prebuilt toolchain for host

    Example:
        >>> ndk_host_tag(HostInfo('macos', 'arm64'))
        'darwin-x86_64'
    """
    if host is None:
        host = detect_host()

    try:
        return NDK_HOST_TAGS[(host.os, host.arch)]
    except KeyError:
        supported = sorted(f"{os_name}-{arch}" for os_name, arch in NDK_HOST_TAGS)
        raise UnsupportedHostError(host.os, host.arch, supported) from None


def clear_host_cache():
    """
    Clear the host detection cache.

    Useful for testing.
    """
    detect_host.cache_clear()


__all__ = [
    "NDK_HOST_TAGS",
    "HostInfo",
    "detect_host",
    "ndk_host_tag",
    "clear_host_cache",
]
