"""
Entry point for running the launcher as a module.

Usage: python -m cargo_android android [cargo arguments]
"""

from cargo_android.cli.parser import main

if __name__ == "__main__":
    main()
