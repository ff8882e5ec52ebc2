"""
opam and OCaml provisioning.

This package holds the per-platform acquisition strategies and the entry
point that dispatches to them.
"""

from .artifacts import (
    ArtifactReference,
    resolve_artifact,
    resolve_download_url,
    resolve_filename,
)
from .strategy import (
    AcquisitionStrategy,
    ProvisionContext,
    ProvisionOutcome,
    ProvisionRequest,
    ProvisionResult,
)
from .provisioner import default_context, provision, select_strategy

__all__ = [
    "ArtifactReference",
    "resolve_artifact",
    "resolve_download_url",
    "resolve_filename",
    "AcquisitionStrategy",
    "ProvisionContext",
    "ProvisionOutcome",
    "ProvisionRequest",
    "ProvisionResult",
    "default_context",
    "provision",
    "select_strategy",
]
