"""
Entry point for running opamkit as a module.

Usage: python -m opamkit [command] [options]
"""

from opamkit.cli.parser import main

if __name__ == "__main__":
    main()
