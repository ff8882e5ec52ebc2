"""
Platform identification for opamkit.

This module resolves the facts about the build runner that select an
acquisition strategy, name the opam bootstrap binary and key the opam root
cache: operating system, CPU architecture and OS release.

Names follow the CI runner conventions ('win32', 'linux', 'darwin' and
'x64', 'ia32', 'arm64', 'arm') so that cache keys stay stable across the
runners that share them.

Usage:
    from opamkit.core.platform import identify_platform, PlatformKind

    info = identify_platform()
    if info.kind is PlatformKind.LINUX:
        print(f"Linux runner, kernel {info.release}")
"""

import enum
import functools
import platform
import sys
from dataclasses import dataclass


class PlatformKind(enum.Enum):
    """Closed set of platforms an acquisition strategy exists for."""

    WINDOWS = "windows"
    LINUX = "linux"
    DARWIN = "darwin"
    UNSUPPORTED = "unsupported"


_KIND_BY_OS = {
    "win32": PlatformKind.WINDOWS,
    "linux": PlatformKind.LINUX,
    "darwin": PlatformKind.DARWIN,
}


@dataclass(frozen=True)
class PlatformDescriptor:
    """
    Immutable description of the host platform.

    Attributes:
        os: Operating system ('win32', 'linux', 'darwin', or the raw name)
        arch: CPU architecture ('x64', 'ia32', 'arm64', 'arm', or the raw name)
        release: OS release string (kernel release on Linux and macOS)
    """

    os: str
    arch: str
    release: str

    @property
    def kind(self) -> PlatformKind:
        """Platform variant used for strategy dispatch."""
        return _KIND_BY_OS.get(self.os, PlatformKind.UNSUPPORTED)

    def __str__(self) -> str:
        return f"{self.os}-{self.arch} ({self.release})"


@functools.lru_cache(maxsize=1)
def identify_platform() -> PlatformDescriptor:
    """
    Identify the current platform.

    Detection runs once per process; later calls return the same descriptor.

    Returns:
        PlatformDescriptor for the host

    Example:
        >>> info = identify_platform()
        >>> print(info.os, info.arch)
        linux x64
    """
    return PlatformDescriptor(
        os=_detect_os(), arch=_detect_architecture(), release=platform.release()
    )


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        'win32', 'linux', 'darwin', or the raw sys.platform value
    """
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform in ("win32", "cygwin"):
        return "win32"
    return sys.platform


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'ia32', 'arm64', 'arm', or the raw name
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("i386", "i686", "x86"):
        return "ia32"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def clear_platform_cache():
    """
    Clear the platform identification cache.

    Forces the next call to identify_platform() to detect again. Intended for
    tests that patch the platform module.
    """
    identify_platform.cache_clear()


__all__ = [
    "PlatformKind",
    "PlatformDescriptor",
    "identify_platform",
    "clear_platform_cache",
]
