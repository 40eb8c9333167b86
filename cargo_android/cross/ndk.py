"""
Android NDK toolchain resolution.

This module locates the prebuilt LLVM toolchain inside an NDK installation,
discovers which Android API levels it provides clang wrappers for, and picks
the API level to build against.

The NDK ships one clang wrapper script per (target, API level) pair:

    <ndk>/toolchains/llvm/prebuilt/linux-x86_64/bin/aarch64-linux-android21-clang
    <ndk>/toolchains/llvm/prebuilt/linux-x86_64/bin/aarch64-linux-android21-clang++
    ...
    <ndk>/toolchains/llvm/prebuilt/linux-x86_64/bin/aarch64-linux-android34-clang

Usage:
    from cargo_android.cross.ndk import NdkToolchainResolver
    from cargo_android.cross.targets import parse_triple

    resolver = NdkToolchainResolver(Path("/opt/android-ndk"))
    resolved = resolver.resolve(parse_triple("aarch64-linux-android"))
    print(resolved.api_level)
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from cargo_android.core.exceptions import (
    InvalidApiLevelError,
    MissingNdkRootError,
    ToolchainDirectoryMissingError,
    UnsupportedArchitectureError,
)
from cargo_android.core.platform import HostInfo, detect_host, ndk_host_tag
from cargo_android.cross.targets import TargetTriple

logger = logging.getLogger(__name__)

_WRAPPER_RE = re.compile(
    r"^(?P<prefix>[a-z0-9_]+-linux-android(?:eabi)?)(?P<api>\d+)"
    r"-(?P<driver>clang|clang\+\+)(?P<suffix>\.cmd)?$"
)


@dataclass(frozen=True)
class NdkToolchain:
    """
    Prebuilt NDK toolchain for the running host.

    Attributes:
        root: NDK installation root (ANDROID_NDK_ROOT)
        host_tag: Prebuilt directory name (e.g., 'linux-x86_64')
        bin_dir: Directory holding the clang wrappers and LLVM tools
        host: Host the toolchain was resolved for
    """

    root: Path
    host_tag: str
    bin_dir: Path
    host: HostInfo

    @property
    def prebuilt_dir(self) -> Path:
        return self.bin_dir.parent

    @property
    def sysroot(self) -> Path:
        return self.prebuilt_dir / "sysroot"

    @property
    def clang_lib_dir(self) -> Path:
        """Directory with one subdirectory per bundled clang version."""
        return self.prebuilt_dir / "lib" / "clang"

    def clang_wrapper(self, clang_prefix: str, api_level: int, cxx: bool = False) -> Path:
        """Path of the per-API clang (or clang++) wrapper."""
        driver = "clang++" if cxx else "clang"
        name = f"{clang_prefix}{api_level}-{driver}{self.host.clang_wrapper_suffix()}"
        return self.bin_dir / name

    def tool(self, name: str) -> Path:
        """Path of an architecture-independent LLVM tool such as 'llvm-ar'."""
        return self.bin_dir / f"{name}{self.host.executable_suffix()}"


@dataclass(frozen=True)
class ApiLevelRange:
    """Inclusive range of Android API levels an NDK supports for a target."""

    minimum: int
    maximum: int

    def __post_init__(self):
        if self.minimum <= 0 or self.minimum > self.maximum:
            raise ValueError(f"Invalid API level range: {self.minimum}..{self.maximum}")

    @classmethod
    def from_levels(cls, levels: Iterable[int]) -> Optional["ApiLevelRange"]:
        """Build a range from discovered levels, or None if there are none."""
        levels = list(levels)
        if not levels:
            return None
        return cls(minimum=min(levels), maximum=max(levels))

    def __contains__(self, level: int) -> bool:
        return self.minimum <= level <= self.maximum

    def __str__(self) -> str:
        return f"{self.minimum}..{self.maximum}"


@dataclass(frozen=True)
class ResolvedToolchain:
    """Result of resolving an NDK toolchain for one target."""

    toolchain: NdkToolchain
    target: TargetTriple
    clang_prefix: str
    api_range: ApiLevelRange
    api_level: int

    @property
    def clang(self) -> Path:
        return self.toolchain.clang_wrapper(self.clang_prefix, self.api_level)

    @property
    def clangxx(self) -> Path:
        return self.toolchain.clang_wrapper(self.clang_prefix, self.api_level, cxx=True)


def parse_clang_wrapper_name(name: str) -> Optional[Tuple[str, int, bool]]:
    """
    Parse an NDK clang wrapper file name.

    Args:
        name: File name such as 'armv7a-linux-androideabi21-clang++'

    Returns:
        (clang prefix, API level, is C++ driver), or None for other files

    Example:
        >>> parse_clang_wrapper_name('aarch64-linux-android34-clang')
        ('aarch64-linux-android', 34, False)
    """
    match = _WRAPPER_RE.match(name)
    if not match:
        return None
    return (
        match.group("prefix"),
        int(match.group("api")),
        match.group("driver") == "clang++",
    )


def discover_api_levels(bin_dir: Path, clang_prefix: str) -> Optional[ApiLevelRange]:
    """
    Discover API levels provided by the clang wrappers in bin_dir.

    Args:
        bin_dir: Prebuilt toolchain bin directory
        clang_prefix: NDK clang prefix (e.g., 'armv7a-linux-androideabi')

    Returns:
        ApiLevelRange, or None if no wrappers exist for clang_prefix
    """
    levels = set()
    for entry in bin_dir.iterdir():
        parsed = parse_clang_wrapper_name(entry.name)
        if parsed is None:
            continue
        prefix, api, _ = parsed
        if prefix == clang_prefix:
            levels.add(api)

    logger.debug(f"Found {clang_prefix} API levels in {bin_dir}: {sorted(levels)}")
    return ApiLevelRange.from_levels(levels)


class NdkToolchainResolver:
    """
    Resolve the NDK toolchain and API level for an Android target.

    Resolution never caches anything: it is a pure function of the NDK
    directory contents, the target and the requested API level.
    """

    def __init__(self, ndk_root: Optional[Path], host: Optional[HostInfo] = None):
        """
        Initialize resolver.

        Args:
            ndk_root: NDK installation root, or None if ANDROID_NDK_ROOT is unset
            host: Host to resolve for. If None, detects the current host.
        """
        self.ndk_root = Path(ndk_root) if ndk_root is not None else None
        self.host = host

    def locate_toolchain(self) -> NdkToolchain:
        """
        Locate the prebuilt toolchain for the host.

        Raises:
            UnsupportedHostError: If the host has no NDK prebuilt
            ToolchainDirectoryMissingError: If the bin directory does not exist
        """
        host = self.host or detect_host()
        host_tag = ndk_host_tag(host)

        bin_dir = self.ndk_root / "toolchains" / "llvm" / "prebuilt" / host_tag / "bin"
        if not bin_dir.is_dir():
            raise ToolchainDirectoryMissingError(bin_dir)

        logger.debug(f"Using NDK toolchain at {bin_dir}")
        return NdkToolchain(root=self.ndk_root, host_tag=host_tag, bin_dir=bin_dir, host=host)

    def resolve(
        self, target: TargetTriple, api_level: Optional[int] = None
    ) -> ResolvedToolchain:
        """
        Resolve toolchain and API level for target.

        Args:
            target: Android target triple
            api_level: Explicit API level, or None for the highest supported

        Returns:
            ResolvedToolchain

        Raises:
            MissingNdkRootError: If no NDK root was given
            UnsupportedHostError: If the host has no NDK prebuilt
            UnsupportedArchitectureError: If target is not a known Android
                triple or the NDK has no clang wrappers for it
            ToolchainDirectoryMissingError: If the bin directory does not exist
            InvalidApiLevelError: If api_level is outside the supported range
        """
        if self.ndk_root is None:
            raise MissingNdkRootError(target.triple)

        clang_prefix = target.ndk_clang_prefix
        if clang_prefix is None:
            raise UnsupportedArchitectureError(target.triple, "unknown Android triple")

        toolchain = self.locate_toolchain()

        api_range = discover_api_levels(toolchain.bin_dir, clang_prefix)
        if api_range is None:
            raise UnsupportedArchitectureError(
                target.triple,
                f"no {clang_prefix}<API>-clang wrappers in {toolchain.bin_dir}",
            )

        if api_level is None:
            api_level = api_range.maximum
            logger.debug(f"ANDROID_API not set, using highest level {api_level}")
        elif api_level not in api_range:
            raise InvalidApiLevelError(
                str(api_level), api_range.minimum, api_range.maximum, target.triple
            )

        logger.info(f"Resolved {target} to API level {api_level} (supported: {api_range})")
        return ResolvedToolchain(
            toolchain=toolchain,
            target=target,
            clang_prefix=clang_prefix,
            api_range=api_range,
            api_level=api_level,
        )


__all__ = [
    "NdkToolchain",
    "ApiLevelRange",
    "ResolvedToolchain",
    "parse_clang_wrapper_name",
    "discover_api_levels",
    "NdkToolchainResolver",
]
