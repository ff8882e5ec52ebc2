"""
Tool cache for downloaded bootstrap binaries.

Mirrors the layout CI runners use for their hosted tool cache so that a
binary cached by one step is found by later steps:

    <root>/<tool>/<version>/<arch>/<file>
    <root>/<tool>/<version>/<arch>.complete

Copies into the cache are serialised across processes with a file lock per
tool version.

Usage:
    from opamkit.core.tool_cache import ToolCache

    tool_cache = ToolCache()
    downloaded = tool_cache.download_tool(url)
    tool_dir = tool_cache.cache_file(downloaded, "opam", "opam", "2.0.7")
"""

import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from opamkit.core.directory import get_temp_dir, get_tool_cache_dir
from opamkit.core.download import download_file
from opamkit.core.exceptions import ToolCacheError

logger = logging.getLogger(__name__)


class ToolCache:
    """
    Download tools and keep them in a versioned tool cache.

    Attributes:
        root: Root directory of the tool cache
        temp_dir: Directory downloads are staged in
        arch: Architecture segment of cached tool paths
    """

    def __init__(
        self,
        root: Optional[Path] = None,
        temp_dir: Optional[Path] = None,
        arch: str = "x64",
        lock_timeout: int = 60,
    ):
        self.root = Path(root) if root else get_tool_cache_dir()
        self.temp_dir = Path(temp_dir) if temp_dir else get_temp_dir()
        self.arch = arch
        self.lock_timeout = lock_timeout

    def download_tool(self, url: str, destination: Optional[Path] = None) -> Path:
        """
        Download a tool into the staging directory.

        Args:
            url: URL to download
            destination: Optional explicit destination file

        Returns:
            Path to the downloaded file

        Raises:
            DownloadError: If the download fails
        """
        if destination is None:
            destination = self.temp_dir / str(uuid.uuid4())
        return download_file(url, Path(destination))

    def tool_dir(self, tool: str, version: str) -> Path:
        """Directory a tool version is cached in."""
        return self.root / tool / version / self.arch

    def find(self, tool: str, version: str) -> Optional[Path]:
        """
        Find a completely cached tool version.

        Returns:
            Cached tool directory, or None if not cached
        """
        tool_dir = self.tool_dir(tool, version)
        marker = tool_dir.with_name(f"{self.arch}.complete")
        if tool_dir.is_dir() and marker.exists():
            return tool_dir
        return None

    def cache_file(
        self, source: Path, dest_name: str, tool: str, version: str
    ) -> Path:
        """
        Copy a single file into the tool cache.

        Args:
            source: File to cache
            dest_name: File name inside the cached tool directory
            tool: Tool name
            version: Tool version

        Returns:
            Cached tool directory containing dest_name

        Raises:
            ToolCacheError: If the source is missing or the copy fails
        """
        source = Path(source)
        if not source.is_file():
            raise ToolCacheError(f"Source file not found: {source}")

        tool_dir = self.tool_dir(tool, version)
        marker = tool_dir.with_name(f"{self.arch}.complete")
        lock_path = tool_dir.with_name(f"{self.arch}.lock")

        logger.debug(f"Caching {source} as {tool} {version} in {tool_dir}")

        try:
            tool_dir.parent.mkdir(parents=True, exist_ok=True)
            with FileLock(lock_path, timeout=self.lock_timeout):
                marker.unlink(missing_ok=True)
                if tool_dir.exists():
                    shutil.rmtree(tool_dir)
                tool_dir.mkdir(parents=True)
                shutil.copy2(source, tool_dir / dest_name)
                marker.touch()
        except Timeout as e:
            raise ToolCacheError(
                f"Could not lock {tool} {version} within {self.lock_timeout} seconds"
            ) from e
        except OSError as e:
            raise ToolCacheError(f"Failed to cache {tool} {version}: {e}") from e

        logger.info(f"Cached {tool} {version} at {tool_dir}")
        return tool_dir
