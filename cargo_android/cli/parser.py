"""
cargo-android command-line entry points.

Two console scripts are provided:

    cargo-android      Cargo external subcommand (``cargo android build ...``).
                       All arguments are forwarded to Cargo untouched, so it
                       has no options of its own; logging is controlled with
                       CARGO_ANDROID_LOG.
    cargo-android-env  Resolve and print the NDK environment overlay for a
                       target without running Cargo. Uses argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cargo_android.core.config import log_level_from_name
from cargo_android.core.exceptions import CargoAndroidError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("cargo-android")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

VERBOSE_FORMAT = "%(levelname)s [%(name)s] %(message)s"
DEFAULT_FORMAT = "cargo-android: %(message)s"


def configure_logging(level: int):
    """
    Configure logging on stderr.

    Debug output uses a verbose format with logger names; everything else
    is prefixed with the program name so it stands out from Cargo's output.
    """
    logging.basicConfig(
        level=level,
        format=VERBOSE_FORMAT if level <= logging.DEBUG else DEFAULT_FORMAT,
        stream=sys.stderr,
        force=True,  # Reconfigure if already configured
    )


class EnvCLI:
    """cargo-android-env command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="cargo-android-env",
            description="Print the Android NDK environment cargo-android would use",
            epilog="ANDROID_NDK_ROOT and ANDROID_API are read from the environment "
            "unless overridden",
        )
        parser.add_argument(
            "--version", action="version", version=f"cargo-android {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--target",
            required=True,
            metavar="TRIPLE",
            help="Rust target triple (e.g., aarch64-linux-android)",
        )
        parser.add_argument(
            "--api",
            metavar="LEVEL",
            help="Android API level (default: ANDROID_API or highest supported)",
        )
        parser.add_argument(
            "--ndk-root",
            type=Path,
            metavar="PATH",
            help="Android NDK root (default: ANDROID_NDK_ROOT)",
        )
        parser.add_argument(
            "--format",
            choices=["yaml", "shell", "json"],
            default="yaml",
            metavar="FORMAT",
            help="Output format (yaml|shell|json) [default: yaml]",
        )
        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)
        self._configure_logging(parsed_args)

        from cargo_android.cli.commands import env

        try:
            return env.run(parsed_args)
        except CargoAndroidError as e:
            logger.error(str(e))
            return e.exit_code

    def _configure_logging(self, args):
        if args.verbose:
            level = logging.DEBUG
        elif args.quiet:
            level = logging.ERROR
        else:
            level = logging.INFO
        configure_logging(level)


def run_launcher(args: Optional[List[str]] = None, environ=None) -> int:
    """
    Run the Cargo launcher.

    Args:
        args: Wrapper arguments without the program name (sys.argv[1:] if None)
        environ: Inherited environment (os.environ if None)

    Returns:
        Exit code to terminate with
    """
    from cargo_android.launcher import Launcher

    if args is None:
        args = sys.argv[1:]

    try:
        launcher = Launcher(environ=environ)
        configure_logging(log_level_from_name(launcher.settings.log_level))
        return launcher.run(args)
    except CargoAndroidError as e:
        logger.error(str(e))
        return e.exit_code
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 130  # Standard exit code for SIGINT


def main():
    """Main entry point for cargo-android."""
    sys.exit(run_launcher())


def env_main():
    """Main entry point for cargo-android-env."""
    cli = EnvCLI()
    sys.exit(cli.run())


__all__ = [
    "EnvCLI",
    "configure_logging",
    "run_launcher",
    "main",
    "env_main",
]


if __name__ == "__main__":
    main()
