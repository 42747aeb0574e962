"""Entry point for running handsfreectl as a module.

Usage:
    python -m handsfreectl [options] COMMAND
"""

from handsfreectl.entrypoints.cli import main

if __name__ == "__main__":
    main()
