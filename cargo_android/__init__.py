"""
cargo-android: run Cargo with an Android NDK toolchain.

``cargo android build --target aarch64-linux-android`` resolves the NDK's
clang wrappers for the target, points Cargo and the ``cc`` crate at them
through environment variables and then runs ``cargo build`` unchanged.
Builds for any other target are passed straight through.
"""

from cargo_android.launcher import Launcher, LaunchPlan

__all__ = ["Launcher", "LaunchPlan"]
