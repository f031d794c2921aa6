"""
Main entry point for the DevSnapshot CLI when run as a module.

This allows the CLI to be executed using:
    python -m devsnap.cli

or the equivalent ``devsnap`` console script.
"""

from . import main

if __name__ == '__main__':
    main()
