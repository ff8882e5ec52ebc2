"""
Cache key derivation for the opam root cache.

The key is an opaque identity: backends store and compare it, nothing parses
it back.
"""

from opamkit.core.platform import PlatformDescriptor


def build_cache_key(platform: PlatformDescriptor, version: str, repository: str) -> str:
    """
    Build the cache key for a provisioned opam root.

    Args:
        platform: Host platform descriptor
        version: Requested OCaml version
        repository: Resolved opam repository URL

    Returns:
        '{os}-{arch}-{release}-{version}-{repository}'

    Example:
        >>> info = PlatformDescriptor("linux", "x64", "5.15.0-1036-azure")
        >>> build_cache_key(info, "4.10.0", "https://github.com/ocaml/opam-repository.git")
        'linux-x64-5.15.0-1036-azure-4.10.0-https://github.com/ocaml/opam-repository.git'
    """
    return f"{platform.os}-{platform.arch}-{platform.release}-{version}-{repository}"
