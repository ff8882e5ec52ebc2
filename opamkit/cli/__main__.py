"""
Entry point for running the opamkit CLI as a module.

Usage: python -m opamkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
