"""
Core functionality for opamkit.

This package contains the foundational modules that the provisioning
strategies depend on.
"""

from .directory import (
    OPAM_ROOT,
    get_global_cache_dir,
    get_tool_cache_dir,
    get_temp_dir,
    get_opam_cache_dir,
    get_script_dir,
)

from .platform import (
    PlatformKind,
    PlatformDescriptor,
    identify_platform,
    clear_platform_cache,
)

from .runner import (
    CommandResult,
    CommandRunner,
    SubprocessRunner,
)

from .environment import JobEnvironment

from .tool_cache import ToolCache

from .exceptions import (
    OpamKitError,
    ConfigError,
    DownloadError,
    ToolCacheError,
    CommandError,
    UnsupportedPlatformError,
    CacheError,
    CacheReserveError,
    CacheSaveError,
    CacheRestoreError,
)

__all__ = [
    "OPAM_ROOT",
    "get_global_cache_dir",
    "get_tool_cache_dir",
    "get_temp_dir",
    "get_opam_cache_dir",
    "get_script_dir",
    "PlatformKind",
    "PlatformDescriptor",
    "identify_platform",
    "clear_platform_cache",
    "CommandResult",
    "CommandRunner",
    "SubprocessRunner",
    "JobEnvironment",
    "ToolCache",
    "OpamKitError",
    "ConfigError",
    "DownloadError",
    "ToolCacheError",
    "CommandError",
    "UnsupportedPlatformError",
    "CacheError",
    "CacheReserveError",
    "CacheSaveError",
    "CacheRestoreError",
]
