"""
Android cross-compilation support for cargo-android.

This package parses Cargo's build target, resolves the matching Android NDK
toolchain and builds the environment overlay that points Cargo at it.
"""

from cargo_android.cross.targets import (
    NDK_CLANG_PREFIXES,
    TargetTriple,
    parse_triple,
    find_target,
    android_target,
)
from cargo_android.cross.ndk import (
    NdkToolchain,
    ApiLevelRange,
    ResolvedToolchain,
    NdkToolchainResolver,
    discover_api_levels,
    parse_clang_wrapper_name,
)
from cargo_android.cross.environment import EnvironmentOverlay, EnvironmentBuilder

__all__ = [
    "NDK_CLANG_PREFIXES",
    "TargetTriple",
    "parse_triple",
    "find_target",
    "android_target",
    "NdkToolchain",
    "ApiLevelRange",
    "ResolvedToolchain",
    "NdkToolchainResolver",
    "discover_api_levels",
    "parse_clang_wrapper_name",
    "EnvironmentOverlay",
    "EnvironmentBuilder",
]
