"""
Directory locations used by opamkit.

Global cache (~/.opamkit/ or %USERPROFILE%\\.opamkit\\):
    - cache/  : Local opam root cache entries
    - tools/  : Tool cache (downloaded bootstrap binaries) when the runner
                does not provide RUNNER_TOOL_CACHE
    - tmp/    : Download staging area when RUNNER_TEMP is not set

The opam root itself is addressed as '~/.opam', the path the cache backend
snapshots.
"""

import os
from pathlib import Path

from opamkit.core.exceptions import ConfigError

OPAM_ROOT = "~/.opam"


def get_global_cache_dir() -> Path:
    """
    Get the platform-specific global cache directory path.

    Returns:
        Path: ~/.opamkit on Linux/macOS, %USERPROFILE%\\.opamkit on Windows

    Raises:
        ConfigError: If USERPROFILE is not set on Windows
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise ConfigError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global cache directory."
            )
        return Path(user_profile) / ".opamkit"
    return Path.home() / ".opamkit"


def get_tool_cache_dir() -> Path:
    """Tool cache root: RUNNER_TOOL_CACHE on CI runners, else the global cache."""
    runner_cache = os.environ.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)
    return get_global_cache_dir() / "tools"


def get_temp_dir() -> Path:
    """Staging directory for downloads: RUNNER_TEMP on CI runners."""
    runner_temp = os.environ.get("RUNNER_TEMP")
    if runner_temp:
        return Path(runner_temp)
    return get_global_cache_dir() / "tmp"


def get_opam_cache_dir() -> Path:
    """Default directory of the local opam root cache backend."""
    return get_global_cache_dir() / "cache"


def get_script_dir() -> Path:
    """Directory holding the bundled install scripts."""
    return Path(__file__).resolve().parent.parent / "scripts"


__all__ = [
    "OPAM_ROOT",
    "get_global_cache_dir",
    "get_tool_cache_dir",
    "get_temp_dir",
    "get_opam_cache_dir",
    "get_script_dir",
]
