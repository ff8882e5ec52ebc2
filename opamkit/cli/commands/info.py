"""
Info command.

Shows the facts a provisioning run derives on this runner without running
anything: platform, selected strategy, cache key, bootstrap artifact and
whether that artifact is already in the tool cache.
"""

from pathlib import Path

from opamkit.caching.keys import build_cache_key
from opamkit.cli.utils import print_error, print_summary, settings_from_args
from opamkit.core.exceptions import ConfigError
from opamkit.core.platform import PlatformKind, identify_platform
from opamkit.core.tool_cache import ToolCache
from opamkit.provision.artifacts import resolve_artifact
from opamkit.provision.strategies.linux import OPAM_BOOTSTRAP_VERSION
from opamkit.provision.strategies.windows import MINGW_REPOSITORY
from opamkit.provision.strategy import UPSTREAM_REPOSITORY


def run(args) -> int:
    """
    Run info command.

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

    platform = identify_platform()
    default_repository = (
        MINGW_REPOSITORY if platform.kind is PlatformKind.WINDOWS else UPSTREAM_REPOSITORY
    )
    repository = settings.opam_repository or default_repository

    details = {
        "OS": platform.os,
        "Architecture": platform.arch,
        "Release": platform.release,
        "Strategy": platform.kind.value,
        "OCaml version": settings.ocaml_version,
        "opam repository": repository,
    }

    if platform.kind is PlatformKind.LINUX:
        artifact = resolve_artifact(OPAM_BOOTSTRAP_VERSION, platform)
        details["Cache key"] = build_cache_key(
            platform, settings.ocaml_version, repository
        )
        details["opam binary"] = artifact.filename
        details["Download URL"] = artifact.download_url

        tool_cache_dir = settings.tool_cache_dir
        tool_cache = ToolCache(
            root=Path(tool_cache_dir) if tool_cache_dir else None, arch=platform.arch
        )
        cached = tool_cache.find("opam", OPAM_BOOTSTRAP_VERSION)
        details["Cached opam"] = str(cached) if cached else "not cached"

    print_summary("opamkit platform info", details)
    return 0
