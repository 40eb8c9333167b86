"""
Tests for the Cargo launcher pipeline.
"""

import os
import signal
import sys
import pytest
from unittest.mock import patch

from cargo_android.core.config import Settings
from cargo_android.core.exceptions import (
    ChildSpawnError,
    InvalidApiLevelError,
    MissingNdkRootError,
)
from cargo_android.launcher import (
    LaunchPlan,
    Launcher,
    derive_overlay,
    exit_code_from_returncode,
    strip_subcommand,
)

INHERITED = {"PATH": "/usr/bin:/bin", "HOME": "/home/user", "CARGO": "/usr/bin/cargo"}


class FakeProcess:
    """Stand-in for subprocess.Popen that records how it was started."""

    def __init__(self, returncode=0):
        self.returncode = returncode
        self.calls = []
        self.signals = []

    def __call__(self, command, env=None):
        self.calls.append((list(command), dict(env)))
        return self

    def wait(self):
        return self.returncode

    def poll(self):
        return None

    def send_signal(self, signum):
        self.signals.append(signum)


def make_launcher(environ=None, returncode=0, host=None):
    process = FakeProcess(returncode)
    launcher = Launcher(environ=environ or INHERITED, host=host, popen=process)
    return launcher, process


class TestStripSubcommand:
    """Tests for strip_subcommand()."""

    def test_strips_marker(self):
        assert strip_subcommand(["android", "build", "--release"]) == ["build", "--release"]

    def test_only_leading_marker(self):
        assert strip_subcommand(["android", "run", "android"]) == ["run", "android"]

    def test_without_marker(self):
        assert strip_subcommand(["build"]) == ["build"]

    def test_empty(self):
        assert strip_subcommand([]) == []


class TestExitCodeFromReturncode:
    """Tests for exit_code_from_returncode()."""

    def test_normal_exit(self):
        assert exit_code_from_returncode(0) == 0
        assert exit_code_from_returncode(101) == 101

    def test_signal(self):
        assert exit_code_from_returncode(-2) == 130
        assert exit_code_from_returncode(-9) == 137


class TestPassthrough:
    """Non-Android builds leave arguments and environment untouched."""

    @pytest.mark.parametrize(
        "args",
        [
            ["android", "build", "--release"],
            ["android", "build", "--target", "x86_64-unknown-linux-gnu"],
            ["android", "build", "--target=wasm32-unknown-unknown"],
            ["android", "build", "--target", "custom.json"],
        ],
    )
    def test_environment_identical(self, args):
        launcher, process = make_launcher()

        assert launcher.run(args) == 0

        command, env = process.calls[0]
        assert command == ["/usr/bin/cargo"] + args[1:]
        assert env == INHERITED

    def test_ndk_root_not_consulted(self):
        """Scenario C: non-Android target with ANDROID_NDK_ROOT unset."""
        launcher, process = make_launcher()

        with patch("cargo_android.launcher.NdkToolchainResolver") as mock_resolver:
            launcher.run(["android", "build", "--target", "x86_64-unknown-linux-gnu"])

        mock_resolver.assert_not_called()
        assert process.calls[0][1] == INHERITED

    def test_invalid_api_ignored_for_passthrough(self):
        launcher, process = make_launcher({**INHERITED, "ANDROID_API": "bogus"})

        assert launcher.run(["android", "build"]) == 0

    def test_plan_is_passthrough(self):
        launcher, _ = make_launcher()
        plan = launcher.prepare(["android", "test"])

        assert isinstance(plan, LaunchPlan)
        assert plan.is_passthrough
        assert plan.command == ["/usr/bin/cargo", "test"]

    def test_default_build_tool(self):
        launcher, process = make_launcher({"PATH": "/usr/bin"})
        launcher.run(["android", "check"])

        assert process.calls[0][0] == ["cargo", "check"]


class TestAndroidBuild:
    """Android builds get the NDK overlay."""

    def test_scenario_a(self, mock_ndk, mock_ndk_bin, linux_host):
        """Default API level is the highest available, exit code mirrored."""
        environ = {**INHERITED, "ANDROID_NDK_ROOT": str(mock_ndk)}
        launcher, process = make_launcher(environ, returncode=0, host=linux_host)
        args = ["android", "build", "--target", "aarch64-linux-android", "--release"]

        assert launcher.run(args) == 0

        command, env = process.calls[0]
        assert command == [
            "/usr/bin/cargo",
            "build",
            "--target",
            "aarch64-linux-android",
            "--release",
        ]
        assert env["CC_aarch64-linux-android"].endswith("aarch64-linux-android34-clang")
        assert env["CARGO_TARGET_AARCH64_LINUX_ANDROID_LINKER"] == str(
            mock_ndk_bin / "aarch64-linux-android34-clang"
        )
        for key, value in environ.items():
            assert env[key] == value

    def test_child_exit_code_mirrored(self, mock_ndk, linux_host):
        environ = {**INHERITED, "ANDROID_NDK_ROOT": str(mock_ndk)}
        launcher, _ = make_launcher(environ, returncode=101, host=linux_host)

        assert launcher.run(["android", "build", "--target", "aarch64-linux-android"]) == 101

    def test_scenario_b(self, mock_ndk, linux_host):
        """ANDROID_API below the supported range fails before spawning."""
        environ = {**INHERITED, "ANDROID_NDK_ROOT": str(mock_ndk), "ANDROID_API": "19"}
        launcher, process = make_launcher(environ, host=linux_host)

        with pytest.raises(InvalidApiLevelError, match="21..34"):
            launcher.run(["android", "build", "--target", "aarch64-linux-android"])

        assert process.calls == []

    def test_scenario_d(self):
        """Missing ANDROID_NDK_ROOT fails before touching the filesystem."""
        launcher, process = make_launcher({**INHERITED, "ANDROID_API": "bogus"})

        with patch("cargo_android.launcher.NdkToolchainResolver") as mock_resolver:
            with pytest.raises(MissingNdkRootError):
                launcher.run(["android", "build", "--target", "armv7-linux-androideabi"])

        mock_resolver.assert_not_called()
        assert process.calls == []

    def test_explicit_api(self, mock_ndk, linux_host):
        environ = {**INHERITED, "ANDROID_NDK_ROOT": str(mock_ndk), "ANDROID_API": "23"}
        launcher, _ = make_launcher(environ, host=linux_host)
        plan = launcher.prepare(["android", "build", "--target=i686-linux-android"])

        assert plan.env["CC_i686-linux-android"].endswith("i686-linux-android23-clang")

    def test_overlay_deterministic(self, mock_ndk, linux_host):
        settings = Settings(ndk_root=mock_ndk)
        args = ["build", "--target", "armv7-linux-androideabi"]

        first = derive_overlay(args, settings, INHERITED, linux_host)
        second = derive_overlay(args, settings, INHERITED, linux_host)

        assert dict(first) == dict(second)

    def test_inherited_environ_not_mutated(self, mock_ndk, linux_host):
        environ = {**INHERITED, "ANDROID_NDK_ROOT": str(mock_ndk)}
        snapshot = dict(environ)
        launcher, _ = make_launcher(environ, host=linux_host)

        launcher.run(["android", "build", "--target", "aarch64-linux-android"])

        assert environ == snapshot


class TestSpawn:
    """Tests for spawning the build tool."""

    def test_spawn_failure(self, tmp_path):
        missing = str(tmp_path / "no-such-cargo")
        launcher = Launcher(environ={"CARGO": missing, "PATH": os.environ.get("PATH", "")})

        with pytest.raises(ChildSpawnError) as exc_info:
            launcher.run(["android", "build"])

        assert exc_info.value.exit_code == 127
        assert exc_info.value.command == [missing, "build"]

    def test_real_child_exit_code(self):
        launcher = Launcher(environ={**os.environ, "CARGO": sys.executable})

        assert launcher.run(["android", "-c", "import sys; sys.exit(7)"]) == 7

    def test_real_child_inherits_environment(self, tmp_path):
        launcher = Launcher(environ={**os.environ, "CARGO": sys.executable})
        out = tmp_path / "env.txt"
        script = f"import os; open({str(out)!r}, 'w').write(os.environ.get('HOME', ''))"

        assert launcher.run(["android", "-c", script]) == 0
        assert out.read_text() == os.environ.get("HOME", "")

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
    def test_real_child_killed_by_signal(self):
        launcher = Launcher(environ={**os.environ, "CARGO": sys.executable})
        script = "import os, signal; os.kill(os.getpid(), signal.SIGTERM)"

        assert launcher.run(["android", "-c", script]) == 128 + signal.SIGTERM

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
    def test_signal_handlers_restored(self):
        launcher, _ = make_launcher()
        before = signal.getsignal(signal.SIGINT)

        launcher.run(["android", "build"])

        assert signal.getsignal(signal.SIGINT) is before

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
    def test_sigterm_forwarded_to_child(self):
        class SelfSignalingProcess(FakeProcess):
            def wait(self):
                os.kill(os.getpid(), signal.SIGTERM)
                return -signal.SIGTERM

        process = SelfSignalingProcess()
        launcher = Launcher(environ=INHERITED, popen=process)

        assert launcher.run(["android", "build"]) == 128 + signal.SIGTERM
        assert process.signals == [signal.SIGTERM]
