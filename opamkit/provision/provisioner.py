"""
Provisioning entry point.

Selects the acquisition strategy for the host platform and runs it:

    from opamkit.provision.provisioner import provision

    result = provision("4.10.0")
    print(result.outcome.value)   # 'cold-initialized' or 'warm-upgraded'
"""

import logging
from typing import Dict, Optional, Type

from opamkit.caching.backend import LocalCacheBackend
from opamkit.core.platform import PlatformKind, identify_platform
from opamkit.core.runner import NON_INTERACTIVE_ENV, SubprocessRunner
from opamkit.core.tool_cache import ToolCache
from opamkit.provision.strategies import (
    DarwinStrategy,
    LinuxStrategy,
    UnsupportedStrategy,
    WindowsStrategy,
)
from opamkit.provision.strategy import (
    AcquisitionStrategy,
    ProvisionContext,
    ProvisionRequest,
    ProvisionResult,
)

logger = logging.getLogger(__name__)

STRATEGIES: Dict[PlatformKind, Type[AcquisitionStrategy]] = {
    PlatformKind.WINDOWS: WindowsStrategy,
    PlatformKind.LINUX: LinuxStrategy,
    PlatformKind.DARWIN: DarwinStrategy,
    PlatformKind.UNSUPPORTED: UnsupportedStrategy,
}


def default_context(non_interactive: bool = True) -> ProvisionContext:
    """Context for the host platform with the default collaborators."""
    platform = identify_platform()
    return ProvisionContext(
        platform=platform,
        runner=SubprocessRunner(non_interactive=non_interactive),
        tool_cache=ToolCache(arch=platform.arch),
        cache=LocalCacheBackend(),
        non_interactive=non_interactive,
    )


def select_strategy(context: ProvisionContext) -> AcquisitionStrategy:
    """Instantiate the strategy for the context's platform."""
    strategy_cls = STRATEGIES[context.platform.kind]
    return strategy_cls(context)


def provision(
    ocaml_version: str,
    repository: Optional[str] = None,
    *,
    context: Optional[ProvisionContext] = None,
    strict: bool = False,
) -> ProvisionResult:
    """
    Provision opam and an OCaml toolchain on the host.

    Args:
        ocaml_version: OCaml version to install
        repository: opam repository URL; None selects the platform default
        context: Collaborators to use (default: host platform, subprocess
            runner, local cache)
        strict: Raise UnsupportedPlatformError instead of returning it

    Returns:
        ProvisionResult of the selected strategy. On an unsupported platform
        no action is taken and the result carries the error.

    Raises:
        DownloadError: If a bootstrap download fails
        CommandError: If an external command fails
        CacheSaveError: If the opam root cannot be cached
        UnsupportedPlatformError: If strict and the platform is unsupported
    """
    if context is None:
        context = default_context()

    request = ProvisionRequest(ocaml_version=ocaml_version, repository=repository)
    strategy = select_strategy(context)

    logger.info(
        f"Provisioning OCaml {ocaml_version} on {context.platform} "
        f"with the {strategy.name} strategy"
    )

    if context.non_interactive:
        context.environment.export_variables(NON_INTERACTIVE_ENV)

    result = strategy.acquire(request)

    if result.error is not None and strict:
        raise result.error

    logger.info(f"Provisioning finished: {result.outcome.value}")
    return result
