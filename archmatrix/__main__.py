"""
Entry point for running archmatrix as a module.

Usage:
    python -m archmatrix [command] [options]
"""

from archmatrix.cli import main

if __name__ == "__main__":
    main()
