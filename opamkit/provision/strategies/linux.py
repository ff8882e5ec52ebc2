"""
Linux acquisition strategy.

Downloads the opam release binary, installs the system packages opam needs
and then either restores a cached opam root (update + upgrade) or
initializes a fresh one and saves it for later runs.
"""

import logging
import os

from opamkit.caching.keys import build_cache_key
from opamkit.core.directory import OPAM_ROOT
from opamkit.core.exceptions import CacheReserveError, DownloadError
from opamkit.provision.artifacts import resolve_artifact
from opamkit.provision.strategy import (
    AcquisitionStrategy,
    ProvisionOutcome,
    ProvisionRequest,
    ProvisionResult,
    UNIX_INSTALL_SCRIPT,
    UPSTREAM_REPOSITORY,
)

logger = logging.getLogger(__name__)

OPAM_BOOTSTRAP_VERSION = "2.0.7"

SYSTEM_PACKAGES = [
    "bubblewrap",
    "ocaml-native-compilers",
    "ocaml-compiler-libs",
    "musl-tools",
]

CACHED_PATHS = [OPAM_ROOT]


class LinuxStrategy(AcquisitionStrategy):
    """Strategy for Linux runners, with opam root caching."""

    name = "linux"

    def acquire(self, request: ProvisionRequest) -> ProvisionResult:
        ctx = self.context
        repository = request.resolve_repository(UPSTREAM_REPOSITORY)
        artifact = resolve_artifact(OPAM_BOOTSTRAP_VERSION, ctx.platform)

        try:
            download_path = ctx.tool_cache.download_tool(artifact.download_url)
        except DownloadError as e:
            logger.debug(f"Download of {artifact.download_url} failed: {e}")
            raise DownloadError(
                f"Failed to download version {OPAM_BOOTSTRAP_VERSION}: {e}",
                version=OPAM_BOOTSTRAP_VERSION,
            ) from e

        os.chmod(download_path, 0o755)
        tool_dir = ctx.tool_cache.cache_file(
            download_path, "opam", "opam", OPAM_BOOTSTRAP_VERSION
        )
        ctx.environment.add_path(tool_dir)
        opam = str(tool_dir / "opam")

        ctx.runner.run(["sudo", "apt-get", "-y", "install", *SYSTEM_PACKAGES])

        key = build_cache_key(ctx.platform, request.ocaml_version, repository)
        restored_key = ctx.cache.restore(CACHED_PATHS, key) if ctx.cache else None

        if restored_key is not None:
            logger.info(f"Restoring cache from key {key}")
            ctx.runner.run([opam, "update", "-y"])
            ctx.runner.run([opam, "upgrade", "-y"])
            return self._result(ProvisionOutcome.WARM_UPGRADED, key)

        logger.warning(f"Cache miss for entry {key}")
        ctx.runner.run([opam, "init", "-yav", repository])
        ctx.runner.run([ctx.script(UNIX_INSTALL_SCRIPT), request.ocaml_version])
        ctx.runner.run([opam, "install", "-y", "depext"])

        if ctx.cache is not None:
            try:
                ctx.cache.save(CACHED_PATHS, key)
            except CacheReserveError:
                logger.info(
                    f"Cache entry {key} has already been created by another workflow"
                )

        return self._result(ProvisionOutcome.COLD_INITIALIZED, key)
