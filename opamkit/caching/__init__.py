"""
Caching of the provisioned opam root between CI runs.
"""

from .keys import build_cache_key
from .backend import CacheBackend, LocalCacheBackend

__all__ = [
    "build_cache_key",
    "CacheBackend",
    "LocalCacheBackend",
]
