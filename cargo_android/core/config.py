"""
Launcher settings read from the process environment.

cargo-android has no configuration files. Everything it consumes comes from
environment variables, captured once into an immutable Settings value.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from cargo_android.core.exceptions import InvalidApiLevelError

logger = logging.getLogger(__name__)

NDK_ROOT_VAR = "ANDROID_NDK_ROOT"
API_LEVEL_VAR = "ANDROID_API"
BUILD_TOOL_VAR = "CARGO"
LOG_LEVEL_VAR = "CARGO_ANDROID_LOG"

DEFAULT_BUILD_TOOL = "cargo"


@dataclass(frozen=True)
class Settings:
    """
    Environment-derived launcher settings.

    Attributes:
        ndk_root: Value of ANDROID_NDK_ROOT, if set and non-empty
        api_level: Raw value of ANDROID_API, if set (parsed lazily)
        build_tool: Build tool executable (CARGO or 'cargo')
        log_level: Raw value of CARGO_ANDROID_LOG, if set
    """

    ndk_root: Optional[Path] = None
    api_level: Optional[str] = None
    build_tool: str = DEFAULT_BUILD_TOOL
    log_level: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Capture settings from an environment mapping.

        Args:
            environ: Environment to read (uses os.environ if None)

        Returns:
            Settings instance
        """
        if environ is None:
            environ = os.environ

        ndk_root = environ.get(NDK_ROOT_VAR) or None
        build_tool = environ.get(BUILD_TOOL_VAR) or None
        if build_tool is None:
            logger.debug(f"{BUILD_TOOL_VAR} not set, using {DEFAULT_BUILD_TOOL!r}")
            build_tool = DEFAULT_BUILD_TOOL

        return cls(
            ndk_root=Path(ndk_root) if ndk_root else None,
            api_level=environ.get(API_LEVEL_VAR),
            build_tool=build_tool,
            log_level=environ.get(LOG_LEVEL_VAR) or None,
        )

    def requested_api_level(self) -> Optional[int]:
        """
        Parse the explicit API level request.

        Returns:
            The requested level, or None if ANDROID_API is unset

        Raises:
            InvalidApiLevelError: If ANDROID_API is not a positive integer
        """
        if self.api_level is None:
            return None
        return parse_api_level(self.api_level)


def parse_api_level(value: str) -> int:
    """
    Parse an Android API level.

    Args:
        value: Raw string such as '21'

    Returns:
        Positive integer API level

    Raises:
        InvalidApiLevelError: If value is not a positive decimal integer

    Example:
        >>> parse_api_level("34")
        34
    """
    text = value.strip()
    if not text.isdigit() or not text.isascii():
        raise InvalidApiLevelError(value)

    level = int(text)
    if level <= 0:
        raise InvalidApiLevelError(value)
    return level


def log_level_from_name(name: Optional[str], default: int = logging.WARNING) -> int:
    """
    Map a CARGO_ANDROID_LOG value to a logging level.

    Unknown names fall back to default.
    """
    if not name:
        return default

    level = logging.getLevelName(name.strip().upper())
    if isinstance(level, int):
        return level
    return default


__all__ = [
    "NDK_ROOT_VAR",
    "API_LEVEL_VAR",
    "BUILD_TOOL_VAR",
    "LOG_LEVEL_VAR",
    "DEFAULT_BUILD_TOOL",
    "Settings",
    "parse_api_level",
    "log_level_from_name",
]
