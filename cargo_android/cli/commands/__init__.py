"""
cargo-android-env command implementations.
"""
