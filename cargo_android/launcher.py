"""
Cargo launcher.

This module implements the ``cargo android`` pipeline:

    parse target -> resolve NDK toolchain -> build overlay -> spawn Cargo

Non-Android builds skip straight to spawning with the inherited environment.
All failures before the spawn raise a CargoAndroidError subclass, so Cargo is
never started with a partially configured environment.

Usage:
    from cargo_android.launcher import Launcher

    exit_code = Launcher().run(["android", "build", "--target", "aarch64-linux-android"])
"""

import logging
import os
import signal
import subprocess
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from cargo_android.core.config import Settings
from cargo_android.core.exceptions import ChildSpawnError, MissingNdkRootError
from cargo_android.core.platform import HostInfo
from cargo_android.cross.environment import EnvironmentBuilder, EnvironmentOverlay
from cargo_android.cross.ndk import NdkToolchainResolver
from cargo_android.cross.targets import android_target

logger = logging.getLogger(__name__)

SUBCOMMAND = "android"

# Delivered by the terminal to the whole foreground process group, so Cargo
# already receives them.
_GROUP_SIGNALS = ("SIGINT", "SIGQUIT")
# Sent to the launcher alone; relayed to Cargo.
_FORWARDED_SIGNALS = ("SIGTERM", "SIGHUP")


@dataclass(frozen=True)
class LaunchPlan:
    """
    Everything needed to spawn the build tool.

    Attributes:
        command: Build tool executable followed by forwarded arguments
        env: Complete child environment
        overlay: Variables added on top of the inherited environment (empty
            for passthrough builds)
    """

    command: List[str]
    env: Dict[str, str]
    overlay: EnvironmentOverlay

    @property
    def is_passthrough(self) -> bool:
        return len(self.overlay) == 0


def strip_subcommand(args: Sequence[str]) -> List[str]:
    """
    Remove the leading ``android`` subcommand marker.

    Cargo runs external subcommands as ``cargo-android android <args>``. When
    the launcher is invoked directly without the marker, args are forwarded
    unchanged.
    """
    args = list(args)
    if args and args[0] == SUBCOMMAND:
        return args[1:]
    return args


def derive_overlay(
    args: Sequence[str],
    settings: Settings,
    environ: Mapping[str, str],
    host: Optional[HostInfo] = None,
) -> EnvironmentOverlay:
    """
    Compute the environment overlay for a Cargo invocation.

    Args:
        args: Arguments forwarded to Cargo
        settings: Launcher settings
        environ: Inherited environment
        host: Host to resolve the NDK prebuilt for (detected if None)

    Returns:
        EnvironmentOverlay, empty for non-Android builds

    Raises:
        ResolutionError: If the NDK toolchain cannot be resolved
    """
    target = android_target(args)
    if target is None:
        logger.debug("No Android target requested, passing through")
        return EnvironmentOverlay()

    if settings.ndk_root is None:
        raise MissingNdkRootError(target.triple)

    resolver = NdkToolchainResolver(settings.ndk_root, host=host)
    resolved = resolver.resolve(target, settings.requested_api_level())
    return EnvironmentBuilder(resolved).build(environ)


def exit_code_from_returncode(returncode: int) -> int:
    """
    Convert a Popen return code to a process exit code.

    Children killed by a signal report 128 + signal number, as shells do.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


class Launcher:
    """Run Cargo with an Android NDK environment overlay when needed."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        environ: Optional[Mapping[str, str]] = None,
        host: Optional[HostInfo] = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        """
        Initialize launcher.

        Args:
            settings: Launcher settings (read from environ if None)
            environ: Inherited environment (os.environ if None)
            host: Host override for NDK prebuilt selection
            popen: Process factory, replaceable in tests
        """
        self.environ = dict(os.environ if environ is None else environ)
        self.settings = settings or Settings.from_environ(self.environ)
        self.host = host
        self.popen = popen

    def prepare(self, args: Sequence[str]) -> LaunchPlan:
        """
        Build the launch plan for the wrapper's own arguments.

        Args:
            args: Arguments after the program name, including the
                ``android`` marker when invoked by Cargo

        Raises:
            ResolutionError: If the NDK toolchain cannot be resolved
        """
        forwarded = strip_subcommand(args)
        overlay = derive_overlay(forwarded, self.settings, self.environ, self.host)
        env = overlay.apply(self.environ)
        return LaunchPlan(
            command=[self.settings.build_tool] + forwarded, env=env, overlay=overlay
        )

    def spawn(self, plan: LaunchPlan) -> int:
        """
        Spawn the build tool and wait for it.

        The child shares the launcher's stdio and process group.

        Returns:
            Child exit code (128 + signal number if it was killed by a signal)

        Raises:
            ChildSpawnError: If the build tool cannot be started
        """
        logger.info(f"Running: {' '.join(plan.command)}")
        try:
            child = self.popen(plan.command, env=plan.env)
        except OSError as e:
            raise ChildSpawnError(plan.command, e) from e

        with _relay_signals(child):
            returncode = child.wait()

        logger.debug(f"{plan.command[0]} exited with {returncode}")
        return exit_code_from_returncode(returncode)

    def run(self, args: Sequence[str]) -> int:
        """
        Prepare and spawn.

        Returns:
            Exit code to terminate the launcher with
        """
        return self.spawn(self.prepare(args))


class _relay_signals:
    """
    Context manager that keeps the launcher alive while its child runs.

    Group signals are ignored by the launcher (the child gets its own copy
    from the terminal), other termination signals are relayed to the child.
    """

    def __init__(self, child: subprocess.Popen):
        self.child = child
        self.previous = {}

    def _forward(self, signum, frame):
        if self.child.poll() is None:
            self.child.send_signal(signum)

    def _ignore(self, signum, frame):
        pass

    def __enter__(self):
        if threading.current_thread() is not threading.main_thread():
            return self

        handlers = dict.fromkeys(_GROUP_SIGNALS, self._ignore)
        handlers.update(dict.fromkeys(_FORWARDED_SIGNALS, self._forward))

        for name, handler in handlers.items():
            # Not every signal exists on Windows
            signum = getattr(signal, name, None)
            if signum is None:
                continue
            self.previous[signum] = signal.signal(signum, handler)
        return self

    def __exit__(self, exc_type, exc, tb):
        for signum, handler in self.previous.items():
            # None means the handler was installed outside Python
            signal.signal(signum, signal.SIG_DFL if handler is None else handler)
        self.previous.clear()
        return False


__all__ = [
    "SUBCOMMAND",
    "LaunchPlan",
    "strip_subcommand",
    "derive_overlay",
    "exit_code_from_returncode",
    "Launcher",
]
