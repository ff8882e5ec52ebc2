"""
Centralized exception hierarchy for opamkit.

Every failure a provisioning run can surface derives from OpamKitError so the
CLI can report it uniformly. The only error that is recovered locally is
CacheReserveError (another run already saved the same cache key).
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class OpamKitError(Exception):
    """Base exception for all opamkit errors."""

    pass


class ConfigError(OpamKitError):
    """Raised when configuration cannot be loaded or is invalid."""

    pass


# ============================================================================
# Acquisition Exceptions
# ============================================================================


class DownloadError(OpamKitError):
    """
    Raised when a bootstrap artifact or installer cannot be fetched.

    Attributes:
        version: Version of the artifact that was being downloaded, if known
    """

    def __init__(self, message: str, version: Optional[str] = None):
        self.version = version
        super().__init__(message)


class ToolCacheError(OpamKitError):
    """Raised when a downloaded tool cannot be stored in the tool cache."""

    pass


class CommandError(OpamKitError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed with exit code {returncode}: {' '.join(self.argv)}"
        if stderr:
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


class UnsupportedPlatformError(OpamKitError):
    """Raised (or returned) when no acquisition strategy handles the host."""

    def __init__(self, platform):
        self.platform = platform
        super().__init__(f"Unsupported platform: {platform}")


# ============================================================================
# Cache Exceptions
# ============================================================================


class CacheError(OpamKitError):
    """Base exception for cache backend errors."""

    pass


class CacheReserveError(CacheError):
    """Raised when another run has already reserved or created a cache key."""

    def __init__(self, key: str, reason: str = "already reserved"):
        self.key = key
        super().__init__(f"Unable to reserve cache entry {key}: {reason}")


class CacheSaveError(CacheError):
    """Raised when a cache entry cannot be written."""

    pass


class CacheRestoreError(CacheError):
    """Raised when an existing cache entry cannot be restored."""

    pass
