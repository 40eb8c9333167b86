"""
Env command: print the NDK environment overlay for a target.

Resolution goes through the same code path as the launcher, so the output
is exactly what ``cargo android`` would add to Cargo's environment.
"""

import dataclasses
import json
import logging
import os
import shlex
import sys
from typing import Mapping

import yaml

from cargo_android.core.config import Settings
from cargo_android.launcher import derive_overlay

logger = logging.getLogger(__name__)


def format_overlay(overlay: Mapping[str, str], fmt: str) -> str:
    """
    Render an overlay.

    Args:
        overlay: Environment variables to render
        fmt: 'yaml', 'json' or 'shell'

    Returns:
        Rendered text ending with a newline (empty for an empty shell overlay)
    """
    variables = dict(sorted(overlay.items()))

    if fmt == "json":
        return json.dumps(variables, indent=2) + "\n"
    elif fmt == "shell":
        return "".join(
            f"export {key}={shlex.quote(value)}\n" for key, value in variables.items()
        )
    elif fmt == "yaml":
        return yaml.safe_dump(variables, default_flow_style=False, sort_keys=True)

    raise ValueError(f"Unknown output format: {fmt}")


def run(args) -> int:
    """
    Run env command.

    Args:
        args: Parsed arguments (target, api, ndk_root, format)

    Returns:
        Exit code (0 for success)
    """
    settings = Settings.from_environ(os.environ)
    if args.ndk_root is not None:
        settings = dataclasses.replace(settings, ndk_root=args.ndk_root)
    if args.api is not None:
        settings = dataclasses.replace(settings, api_level=args.api)

    overlay = derive_overlay(["--target", args.target], settings, os.environ)
    if not overlay:
        logger.warning(f"{args.target} is not an Android target, nothing to set")

    sys.stdout.write(format_overlay(overlay, args.format))
    return 0
