"""
Entry point for running the launcher as a module.

Usage: python -m cargo_android.cli android [cargo arguments]
"""

from .parser import main

if __name__ == "__main__":
    main()
