"""
Mock implementations for testing opamkit components.

This package provides fakes of external collaborators (commands, caches,
downloads) to enable isolated, deterministic testing.
"""

from .provisioning import FakeRunner, FakeToolCache, InMemoryCache

__all__ = [
    "FakeRunner",
    "FakeToolCache",
    "InMemoryCache",
]
