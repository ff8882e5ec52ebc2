"""
Acquisition Strategy Interface.

An acquisition strategy installs opam and an OCaml toolchain on one
platform. Strategies are linear: every step runs once and the first failure
aborts the run.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from opamkit.caching.backend import CacheBackend
from opamkit.core.directory import get_script_dir
from opamkit.core.environment import JobEnvironment
from opamkit.core.platform import PlatformDescriptor
from opamkit.core.runner import CommandRunner, SubprocessRunner
from opamkit.core.tool_cache import ToolCache

UPSTREAM_REPOSITORY = "https://github.com/ocaml/opam-repository.git"
UNIX_INSTALL_SCRIPT = "install-ocaml-unix.sh"
WINDOWS_INSTALL_SCRIPT = "install-ocaml-windows.cmd"


class ProvisionOutcome(enum.Enum):
    """Terminal state of a provisioning run."""

    COLD_INITIALIZED = "cold-initialized"
    WARM_UPGRADED = "warm-upgraded"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ProvisionRequest:
    """
    What to provision.

    Attributes:
        ocaml_version: OCaml version to install through opam
        repository: opam repository URL; None selects the platform default
    """

    ocaml_version: str
    repository: Optional[str] = None

    def resolve_repository(self, default: str) -> str:
        return self.repository or default


@dataclass
class ProvisionResult:
    """Outcome of a provisioning run."""

    outcome: ProvisionOutcome
    platform: PlatformDescriptor
    strategy: Optional[str] = None
    cache_key: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class ProvisionContext:
    """
    Collaborators shared by all strategies.

    Attributes:
        platform: Host platform
        runner: Runs external commands (default: a SubprocessRunner following
            non_interactive)
        tool_cache: Downloads and caches bootstrap binaries
        environment: Search path and exported variables of the job
        cache: opam root cache backend; None disables caching
        script_dir: Directory holding the install scripts
        non_interactive: Run package managers without prompting
    """

    platform: PlatformDescriptor
    runner: Optional[CommandRunner] = None
    tool_cache: ToolCache = field(default_factory=ToolCache)
    environment: JobEnvironment = field(default_factory=JobEnvironment)
    cache: Optional[CacheBackend] = None
    script_dir: Path = field(default_factory=get_script_dir)
    non_interactive: bool = True

    def __post_init__(self):
        if self.runner is None:
            self.runner = SubprocessRunner(non_interactive=self.non_interactive)

    def script(self, name: str) -> Path:
        return self.script_dir / name


class AcquisitionStrategy(ABC):
    """
    Abstract base class for acquisition strategies.

    Attributes:
        context: Shared collaborators
    """

    name: str = ""

    def __init__(self, context: ProvisionContext):
        self.context = context

    @abstractmethod
    def acquire(self, request: ProvisionRequest) -> ProvisionResult:
        """
        Install opam and the requested OCaml version.

        Args:
            request: Version and repository to provision

        Returns:
            ProvisionResult describing the terminal state

        Raises:
            DownloadError: If a bootstrap download fails
            CommandError: If an external command fails
            CacheSaveError: If saving the cache fails for a reason other
                than a concurrent save of the same key
        """
        pass

    def _result(
        self, outcome: ProvisionOutcome, cache_key: Optional[str] = None
    ) -> ProvisionResult:
        return ProvisionResult(
            outcome=outcome,
            platform=self.context.platform,
            strategy=self.name,
            cache_key=cache_key,
        )
