"""
Entry point for running c7-mirror as a module.

Usage:
    python -m src export
    python -m src report
    python -m src list
"""

from .cli import main

if __name__ == "__main__":
    exit(main())
