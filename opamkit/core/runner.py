"""
External command execution.

Every package-manager call and install script goes through a CommandRunner.
The non-interactive setting is part of the runner's configuration and is
applied to each child process environment (OPAMYES=1), so nothing depends on
the state of the opamkit process environment.
"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Union

from opamkit.core.exceptions import CommandError

logger = logging.getLogger(__name__)

Argument = Union[str, Path]

NON_INTERACTIVE_ENV = {"OPAMYES": "1"}


@dataclass
class CommandResult:
    """Result of a finished external command."""

    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(ABC):
    """Capability to run an external command."""

    @abstractmethod
    def run(
        self, argv: Sequence[Argument], cwd: Optional[Path] = None
    ) -> CommandResult:
        """
        Run a command to completion.

        Args:
            argv: Program and arguments
            cwd: Working directory

        Returns:
            CommandResult of a successful run

        Raises:
            CommandError: If the command exits non-zero
        """
        pass


class SubprocessRunner(CommandRunner):
    """
    Run commands with subprocess, streaming output to the job log.

    Attributes:
        non_interactive: Force package managers into non-interactive mode
        capture_output: Capture stdout/stderr instead of inheriting them
        env: Extra environment variables for every child process
    """

    def __init__(
        self,
        non_interactive: bool = True,
        capture_output: bool = False,
        env: Optional[Mapping[str, str]] = None,
    ):
        self.non_interactive = non_interactive
        self.capture_output = capture_output
        self.env = dict(env or {})

    def child_env(self) -> Dict[str, str]:
        """Environment passed to child processes."""
        env = dict(os.environ)
        env.update(self.env)
        if self.non_interactive:
            env.update(NON_INTERACTIVE_ENV)
        return env

    def run(
        self, argv: Sequence[Argument], cwd: Optional[Path] = None
    ) -> CommandResult:
        args = [str(a) for a in argv]
        logger.info(f"[command] {' '.join(args)}")

        try:
            completed = subprocess.run(
                args,
                cwd=str(cwd) if cwd else None,
                env=self.child_env(),
                capture_output=self.capture_output,
                text=True,
            )
        except FileNotFoundError as e:
            raise CommandError(args, 127, str(e)) from e

        result = CommandResult(
            argv=args,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if not result.ok:
            raise CommandError(args, result.returncode, result.stderr)
        return result


__all__ = [
    "CommandResult",
    "CommandRunner",
    "SubprocessRunner",
    "NON_INTERACTIVE_ENV",
]
