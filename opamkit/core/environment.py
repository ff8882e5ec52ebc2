"""
Job environment updates for later CI steps.

CI runners pick up search-path additions and exported variables from files
named by GITHUB_PATH and GITHUB_ENV. Outside a runner those files are absent
and only the current process search path is updated.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, MutableMapping, Optional, Union

logger = logging.getLogger(__name__)


class JobEnvironment:
    """
    Search path and variable exports for the running job.

    Attributes:
        environ: Process environment to update (os.environ by default)
        path_file: File collecting search-path additions for later steps
        env_file: File collecting exported variables for later steps
    """

    def __init__(
        self,
        environ: Optional[MutableMapping[str, str]] = None,
        path_file: Optional[Path] = None,
        env_file: Optional[Path] = None,
    ):
        self.environ = os.environ if environ is None else environ
        if path_file is None and self.environ.get("GITHUB_PATH"):
            path_file = Path(self.environ["GITHUB_PATH"])
        if env_file is None and self.environ.get("GITHUB_ENV"):
            env_file = Path(self.environ["GITHUB_ENV"])
        self.path_file = path_file
        self.env_file = env_file

    def add_path(self, path: Union[str, Path]):
        """Prepend a directory to the search path of this and later steps."""
        entry = str(path)
        current = self.environ.get("PATH", "")
        self.environ["PATH"] = entry + os.pathsep + current if current else entry

        if self.path_file:
            with open(self.path_file, "a", encoding="utf-8") as f:
                f.write(f"{entry}\n")
        logger.debug(f"Added to PATH: {entry}")

    def export_variable(self, name: str, value: str):
        """
        Export a variable to later job steps.

        The current process environment is left untouched.
        """
        if not self.env_file:
            logger.debug(f"No job environment file, not exporting {name}")
            return

        with open(self.env_file, "a", encoding="utf-8") as f:
            if "\n" in value:
                delimiter = f"ghadelimiter_{name}"
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                f.write(f"{name}={value}\n")
        logger.debug(f"Exported {name} for later steps")

    def export_variables(self, variables: Mapping[str, str]):
        for name, value in variables.items():
            self.export_variable(name, value)
