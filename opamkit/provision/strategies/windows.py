"""
Windows acquisition strategy.

opam is installed inside Cygwin by the bundled install script. Nothing is
cached between runs; every run downloads the Cygwin installer again.
"""

import logging

from opamkit.core.exceptions import DownloadError
from opamkit.provision.strategy import (
    AcquisitionStrategy,
    ProvisionOutcome,
    ProvisionRequest,
    ProvisionResult,
    WINDOWS_INSTALL_SCRIPT,
)

logger = logging.getLogger(__name__)

CYGWIN_SETUP_URL = "https://cygwin.com/setup-x86_64.exe"
CYGWIN_SETUP_NAME = "setup-x86_64.exe"
CYGWIN_TOOL_VERSION = "1.0"

MINGW_REPOSITORY = "https://github.com/fdopen/opam-repository-mingw.git#opam2"

CYGWIN_PATHS = ["c:\\cygwin\\bin", "c:\\cygwin\\wrapperbin"]


class WindowsStrategy(AcquisitionStrategy):
    """Strategy for Windows runners."""

    name = "windows"

    def acquire(self, request: ProvisionRequest) -> ProvisionResult:
        ctx = self.context
        repository = request.resolve_repository(MINGW_REPOSITORY)

        try:
            download_path = ctx.tool_cache.download_tool(CYGWIN_SETUP_URL)
        except DownloadError as e:
            logger.debug(f"Download of {CYGWIN_SETUP_URL} failed: {e}")
            raise DownloadError(
                f"Failed to download cygwin {CYGWIN_TOOL_VERSION}: {e}",
                version=CYGWIN_TOOL_VERSION,
            ) from e

        tool_dir = ctx.tool_cache.cache_file(
            download_path, CYGWIN_SETUP_NAME, "cygwin", CYGWIN_TOOL_VERSION
        )

        ctx.runner.run(
            [
                ctx.script(WINDOWS_INSTALL_SCRIPT),
                ctx.script_dir,
                tool_dir,
                request.ocaml_version,
                repository,
            ]
        )

        for path in CYGWIN_PATHS:
            ctx.environment.add_path(path)

        return self._result(ProvisionOutcome.COLD_INITIALIZED)
