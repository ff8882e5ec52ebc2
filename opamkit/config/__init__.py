"""
Configuration loading for opamkit.
"""

from .settings import (
    CacheSettings,
    ProvisionSettings,
    load_settings,
    DEFAULT_CONFIG_FILE,
    DEFAULT_OCAML_VERSION,
)

__all__ = [
    "CacheSettings",
    "ProvisionSettings",
    "load_settings",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_OCAML_VERSION",
]
