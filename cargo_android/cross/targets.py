"""
Target triple parsing and classification.

This module finds the ``--target`` that Cargo is being asked to build for and
decides whether it is an Android triple that needs an NDK toolchain.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

TARGET_FLAG = "--target"
END_OF_OPTIONS = "--"

ANDROID_SUFFIXES = ("-android", "-androideabi")

# Rust triple -> NDK clang wrapper prefix. The NDK names 32-bit ARM after
# the ISA revision, so every 32-bit ARM triple shares armv7a.
NDK_CLANG_PREFIXES: Dict[str, str] = {
    "aarch64-linux-android": "aarch64-linux-android",
    "arm-linux-androideabi": "armv7a-linux-androideabi",
    "armv7-linux-androideabi": "armv7a-linux-androideabi",
    "thumbv7neon-linux-androideabi": "armv7a-linux-androideabi",
    "i686-linux-android": "i686-linux-android",
    "x86_64-linux-android": "x86_64-linux-android",
    "riscv64-linux-android": "riscv64-linux-android",
}


@dataclass(frozen=True)
class TargetTriple:
    """
    Parsed target triple.

    Attributes:
        architecture: CPU architecture component (e.g., 'aarch64', 'armv7')
        platform: Everything after the architecture (e.g., 'linux-android')
        abi_variant: ABI suffix of the environment component ('eabi' for
            'androideabi', empty otherwise)
    """

    architecture: str
    platform: str
    abi_variant: str = ""

    @property
    def triple(self) -> str:
        """The full triple string."""
        return f"{self.architecture}-{self.platform}"

    @property
    def is_android(self) -> bool:
        """Whether this triple targets Android."""
        return self.triple.endswith(ANDROID_SUFFIXES)

    @property
    def ndk_clang_prefix(self) -> Optional[str]:
        """
        NDK clang wrapper prefix for this triple.

        Returns:
            Prefix such as 'armv7a-linux-androideabi', or None when the triple
            is not a known Android target
        """
        return NDK_CLANG_PREFIXES.get(self.triple)

    @property
    def env_key(self) -> str:
        """
        Triple in the upper-case underscored form Cargo uses for
        CARGO_TARGET_<triple>_* variables.

        Example:
            >>> parse_triple('aarch64-linux-android').env_key
            'AARCH64_LINUX_ANDROID'
        """
        return self.triple.upper().replace("-", "_").replace(".", "_")

    def __str__(self) -> str:
        return self.triple


def parse_triple(value: str) -> Optional[TargetTriple]:
    """
    Parse a target triple string.

    Args:
        value: Triple such as 'aarch64-linux-android'

    Returns:
        TargetTriple, or None if value is not shaped like a triple (for
        example a path to a custom target JSON file or a bare word)

    Example:
        >>> parse_triple('armv7-linux-androideabi').abi_variant
        'eabi'
    """
    architecture, sep, rest = value.partition("-")
    if not sep or not architecture or not rest:
        return None
    if any(not part for part in rest.split("-")):
        return None

    abi_variant = ""
    environment = rest.rsplit("-", 1)[-1]
    if environment.startswith("android") and environment != "android":
        abi_variant = environment[len("android"):]

    return TargetTriple(architecture=architecture, platform=rest, abi_variant=abi_variant)


def find_target(args: Sequence[str]) -> Optional[str]:
    """
    Find the requested build target in forwarded Cargo arguments.

    Both ``--target VALUE`` and ``--target=VALUE`` are recognized. When the
    flag is given more than once the last occurrence wins. Scanning stops at
    a bare ``--`` since anything after it belongs to the program Cargo runs.

    Args:
        args: Arguments forwarded to Cargo

    Returns:
        The raw target value, or None if no target was requested
    """
    target = None
    expecting_value = False

    for arg in args:
        if expecting_value:
            target = arg
            expecting_value = False
        elif arg == END_OF_OPTIONS:
            break
        elif arg == TARGET_FLAG:
            expecting_value = True
        elif arg.startswith(TARGET_FLAG + "="):
            target = arg[len(TARGET_FLAG) + 1:]

    return target


def android_target(args: Sequence[str]) -> Optional[TargetTriple]:
    """
    Classify the build target of a Cargo invocation.

    Args:
        args: Arguments forwarded to Cargo

    Returns:
        The parsed triple if the invocation targets Android, otherwise None
        (no target, a non-Android triple, or something that is not a triple)
    """
    value = find_target(args)
    if value is None:
        return None

    triple = parse_triple(value)
    if triple is None or not triple.is_android:
        return None
    return triple


__all__ = [
    "TARGET_FLAG",
    "NDK_CLANG_PREFIXES",
    "TargetTriple",
    "parse_triple",
    "find_target",
    "android_target",
]
