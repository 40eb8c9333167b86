"""
cargo-android CLI module.

This module provides the command-line interfaces for cargo-android.
"""

from .parser import EnvCLI, main, env_main, run_launcher

__all__ = ["EnvCLI", "main", "env_main", "run_launcher"]
