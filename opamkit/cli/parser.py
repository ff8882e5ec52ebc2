"""
opamkit CLI argument parser.

This module implements the command-line interface for opamkit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

try:
    from importlib.metadata import version

    __version__ = version("opamkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """opamkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="opamkit",
            description="opamkit - provision opam and OCaml on CI runners",
            epilog='Use "opamkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"opamkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./opamkit.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_provision_command(subparsers)
        self._add_info_command(subparsers)

        return parser

    def _add_provision_command(self, subparsers):
        """Add 'provision' subcommand."""
        parser = subparsers.add_parser(
            "provision",
            help="Install opam and an OCaml toolchain",
            description="Install opam and the requested OCaml version on this runner",
        )
        parser.add_argument(
            "--ocaml-version",
            metavar="VERSION",
            help="OCaml version to install (e.g., 4.10.0)",
        )
        parser.add_argument(
            "--opam-repository",
            metavar="URL",
            help="opam repository URL (default depends on the platform)",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="PATH",
            help="Directory of the opam root cache",
        )
        parser.add_argument(
            "--no-cache",
            action="store_true",
            help="Neither restore nor save the opam root cache",
        )
        parser.add_argument(
            "--tool-cache-dir",
            type=Path,
            metavar="PATH",
            help="Tool cache directory (default: $RUNNER_TOOL_CACHE)",
        )
        parser.add_argument(
            "--script-dir",
            type=Path,
            metavar="PATH",
            help="Directory holding the install scripts",
        )
        parser.add_argument(
            "--interactive",
            action="store_true",
            help="Let opam prompt for confirmation",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail on platforms without an acquisition strategy",
        )

    def _add_info_command(self, subparsers):
        """Add 'info' subcommand."""
        parser = subparsers.add_parser(
            "info",
            help="Show platform, cache key and bootstrap artifact",
            description="Show what a provisioning run on this runner would use",
        )
        parser.add_argument(
            "--ocaml-version",
            metavar="VERSION",
            help="OCaml version used for the cache key",
        )
        parser.add_argument(
            "--opam-repository",
            metavar="URL",
            help="opam repository URL used for the cache key",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "provision": "opamkit.cli.commands.provision",
            "info": "opamkit.cli.commands.info",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
