"""
Provision command.

Installs opam and an OCaml toolchain on the current runner.
"""

import logging

from opamkit.cli.utils import print_error, print_summary, settings_from_args
from opamkit.core.exceptions import ConfigError, OpamKitError
from opamkit.provision.provisioner import provision

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run provision command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        settings = settings_from_args(args)
    except ConfigError as e:
        print_error("Invalid configuration", str(e))
        return 1

    if getattr(args, "no_cache", False):
        settings.cache.enabled = False
    if getattr(args, "cache_dir", None):
        settings.cache.directory = str(args.cache_dir)
    if getattr(args, "tool_cache_dir", None):
        settings.tool_cache_dir = str(args.tool_cache_dir)
    if getattr(args, "script_dir", None):
        settings.script_dir = str(args.script_dir)
    if getattr(args, "interactive", False):
        settings.non_interactive = False
    if getattr(args, "strict", False):
        settings.strict = True

    try:
        context = settings.create_context()
        result = provision(
            settings.ocaml_version,
            settings.opam_repository,
            context=context,
            strict=settings.strict,
        )
    except OpamKitError as e:
        logger.debug("Provisioning failed", exc_info=True)
        print_error("Provisioning failed", str(e))
        return 1

    details = {
        "Platform": str(result.platform),
        "OCaml version": settings.ocaml_version,
        "Outcome": result.outcome.value,
    }
    if result.cache_key:
        details["Cache key"] = result.cache_key
    print_summary("opam provisioning", details)

    return 0
