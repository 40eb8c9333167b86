"""
Environment overlay construction for Android cross-compilation.

Cargo and the ``cc`` crate pick target-specific tools from environment
variables. This module turns a resolved NDK toolchain into the set of
variables that redirect them to the NDK:

    CC_<triple>                        per-API clang wrapper
    CXX_<triple>                       per-API clang++ wrapper
    AR_<triple>                        llvm-ar
    RANLIB_<triple>, STRIP_<triple>    llvm-ranlib, llvm-strip (when present)
    CARGO_TARGET_<TRIPLE>_LINKER       per-API clang wrapper
    BINDGEN_EXTRA_CLANG_ARGS_<triple>  --sysroot=<ndk sysroot>

Usage:
    from cargo_android.cross.environment import EnvironmentBuilder

    overlay = EnvironmentBuilder(resolved).build(os.environ)
    env = overlay.apply(os.environ)
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from cargo_android.core.exceptions import MissingToolchainBinaryError
from cargo_android.cross.ndk import ResolvedToolchain

logger = logging.getLogger(__name__)

ENCODED_RUSTFLAGS_VAR = "CARGO_ENCODED_RUSTFLAGS"
RUSTFLAGS_VAR = "RUSTFLAGS"
RUSTFLAGS_SEPARATOR = "\x1f"

# Targets whose Rust standard library needs the clang builtins linked
# explicitly (rust-lang/rust#109717).
CLANG_BUILTINS_TARGETS = {
    "x86_64-linux-android": "clang_rt.builtins-x86_64-android",
}


class EnvironmentOverlay(Mapping[str, str]):
    """
    Immutable set of environment variables to apply on top of an inherited
    environment.
    """

    def __init__(self, variables: Optional[Mapping[str, str]] = None):
        self._variables = MappingProxyType(dict(variables or {}))

    def __getitem__(self, key: str) -> str:
        return self._variables[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"EnvironmentOverlay({dict(self._variables)!r})"

    def apply(self, environ: Mapping[str, str]) -> Dict[str, str]:
        """
        Apply overlay to a copy of environ.

        Keys not in the overlay are untouched, keys in the overlay are replaced.
        The input mapping is never modified.
        """
        env = dict(environ)
        env.update(self._variables)
        return env


class EnvironmentBuilder:
    """Build the environment overlay for a resolved Android toolchain."""

    def __init__(self, resolved: ResolvedToolchain):
        self.resolved = resolved

    def build(self, environ: Optional[Mapping[str, str]] = None) -> EnvironmentOverlay:
        """
        Build the overlay.

        Args:
            environ: Inherited environment. Only read for variables the
                overlay extends rather than replaces (rustflags).

        Returns:
            EnvironmentOverlay

        Raises:
            MissingToolchainBinaryError: If a required NDK binary is missing
        """
        if environ is None:
            environ = {}

        resolved = self.resolved
        toolchain = resolved.toolchain
        triple = resolved.target.triple

        clang = _require(resolved.clang)
        clangxx = _require(resolved.clangxx)
        ar = _require(toolchain.tool("llvm-ar"))

        variables = {
            f"CC_{triple}": str(clang),
            f"CXX_{triple}": str(clangxx),
            f"AR_{triple}": str(ar),
            f"CARGO_TARGET_{resolved.target.env_key}_LINKER": str(clang),
            f"BINDGEN_EXTRA_CLANG_ARGS_{triple}": f"--sysroot={toolchain.sysroot}",
        }

        for name, var in (("llvm-ranlib", "RANLIB"), ("llvm-strip", "STRIP")):
            tool = toolchain.tool(name)
            if tool.exists():
                variables[f"{var}_{triple}"] = str(tool)
            else:
                logger.debug(f"Optional tool not found, skipping {var}_{triple}: {tool}")

        builtins = CLANG_BUILTINS_TARGETS.get(triple)
        if builtins:
            variables[ENCODED_RUSTFLAGS_VAR] = self._rustflags_with_builtins(
                environ, builtins
            )

        for key, value in variables.items():
            logger.debug(f"{key}={value}")

        return EnvironmentOverlay(variables)

    def _rustflags_with_builtins(self, environ: Mapping[str, str], library: str) -> str:
        """
        Append the clang builtins library to the global rustflags.

        Global flags completely override CARGO_TARGET_<triple>_RUSTFLAGS, so
        the library has to be appended to the global flags instead.
        """
        runtime_dir = self._clang_runtime_dir()
        flags = existing_rustflags(environ)
        flags += ["-L", str(runtime_dir), "-l", f"static={library}"]
        return RUSTFLAGS_SEPARATOR.join(flags)

    def _clang_runtime_dir(self) -> Path:
        clang_lib_dir = self.resolved.toolchain.clang_lib_dir
        if not clang_lib_dir.is_dir():
            raise MissingToolchainBinaryError(clang_lib_dir)

        versions = [entry for entry in clang_lib_dir.iterdir() if entry.is_dir()]
        if not versions:
            raise MissingToolchainBinaryError(clang_lib_dir / "<version>")

        newest = max(versions, key=lambda entry: _version_key(entry.name))
        return _require(newest / "lib" / "linux")


def existing_rustflags(environ: Mapping[str, str]) -> List[str]:
    """
    Get the global rustflags Cargo would use from environ.

    CARGO_ENCODED_RUSTFLAGS takes precedence over RUSTFLAGS, matching Cargo.
    """
    encoded = environ.get(ENCODED_RUSTFLAGS_VAR)
    if encoded is not None:
        return [flag for flag in encoded.split(RUSTFLAGS_SEPARATOR) if flag]

    plain = environ.get(RUSTFLAGS_VAR)
    if plain is not None:
        return plain.split()

    return []


def _version_key(name: str):
    parts = []
    for part in name.split("."):
        parts.append((0, int(part), "") if part.isdigit() else (1, 0, part))
    return parts


def _require(path: Path) -> Path:
    if not path.exists():
        raise MissingToolchainBinaryError(path)
    return path


__all__ = [
    "ENCODED_RUSTFLAGS_VAR",
    "CLANG_BUILTINS_TARGETS",
    "EnvironmentOverlay",
    "EnvironmentBuilder",
    "existing_rustflags",
]
