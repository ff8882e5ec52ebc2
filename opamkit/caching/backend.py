"""
Cache backends for the provisioned opam root.

A backend stores snapshots of a fixed list of paths under an opaque key.
Provisioning only ever calls restore() and save(); storage, eviction and
sharing between runners belong to the backend.

LocalCacheBackend keeps entries in a directory, which suits self-hosted
runners and runners with a persistent or mounted cache volume:

    <root>/<sha256(key)>.tar.gz   : Snapshot of the cached paths
    <root>/<sha256(key)>.json     : Key and path list of the entry
    <root>/<sha256(key)>.lock     : Held while an entry is being written

Links inside the cached paths must be relative and stay inside the archive
tree. Absolute or escaping links are refused when saving, so an entry that
could not be restored safely is never written.

Usage:
    from opamkit.caching.backend import LocalCacheBackend

    cache = LocalCacheBackend(Path("/mnt/cache/opam"))
    if cache.restore(["~/.opam"], key) is None:
        ...  # provision from scratch
        cache.save(["~/.opam"], key)
"""

import hashlib
import json
import logging
import os
import posixpath
import shutil
import sys
import tarfile
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

from filelock import FileLock, Timeout

from opamkit.core.directory import get_opam_cache_dir
from opamkit.core.exceptions import (
    CacheReserveError,
    CacheRestoreError,
    CacheSaveError,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class CacheBackend(ABC):
    """Capability to restore and save path snapshots under an opaque key."""

    @abstractmethod
    def restore(self, paths: Sequence[PathLike], key: str) -> Optional[str]:
        """
        Restore the entry stored under key into paths.

        Args:
            paths: Paths the entry was saved from ('~' is expanded)
            key: Cache key

        Returns:
            The key of the restored entry, or None on a cache miss

        Raises:
            CacheRestoreError: If an existing entry cannot be restored
        """
        pass

    @abstractmethod
    def save(self, paths: Sequence[PathLike], key: str) -> None:
        """
        Save paths under key.

        Args:
            paths: Paths to snapshot ('~' is expanded)
            key: Cache key

        Raises:
            CacheReserveError: If the key is already taken by another run
            CacheSaveError: For any other failure
        """
        pass


def _expand(paths: Sequence[PathLike]) -> List[Path]:
    return [Path(os.path.expandvars(str(p))).expanduser() for p in paths]


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def _link_escapes(member: tarfile.TarInfo) -> bool:
    """Whether a link member points outside the archive tree."""
    if posixpath.isabs(member.linkname) or os.path.isabs(member.linkname):
        return True
    if member.issym():
        target = posixpath.join(posixpath.dirname(member.name), member.linkname)
    else:
        # hard link targets are archive member names
        target = member.linkname
    target = posixpath.normpath(target)
    return target == ".." or target.startswith("../")


def _check_link(member: tarfile.TarInfo) -> tarfile.TarInfo:
    if (member.issym() or member.islnk()) and _link_escapes(member):
        raise CacheSaveError(
            f"Cannot cache link '{member.name}' -> '{member.linkname}': "
            "absolute or escaping links cannot be restored"
        )
    return member


class LocalCacheBackend(CacheBackend):
    """
    Directory-backed cache of gzip-compressed tar snapshots.

    Attributes:
        root: Directory holding cache entries
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root else get_opam_cache_dir()

    def _entry_id(self, key: str) -> str:
        return hashlib.sha256(key.encode("utf-8")).hexdigest()

    def archive_path(self, key: str) -> Path:
        return self.root / f"{self._entry_id(key)}.tar.gz"

    def manifest_path(self, key: str) -> Path:
        return self.root / f"{self._entry_id(key)}.json"

    def lock_path(self, key: str) -> Path:
        return self.root / f"{self._entry_id(key)}.lock"

    def has_entry(self, key: str) -> bool:
        return self.archive_path(key).exists()

    def restore(self, paths: Sequence[PathLike], key: str) -> Optional[str]:
        archive = self.archive_path(key)
        if not archive.exists():
            logger.debug(f"No cache entry for key {key}")
            return None

        targets = _expand(paths)
        logger.info(f"Restoring cache entry {archive.name}")

        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(dir=self.root) as staging:
                staging_dir = Path(staging)
                self._extract(archive, staging_dir)
                for index, target in enumerate(targets):
                    self._place(staging_dir / str(index), target)
        except (OSError, tarfile.TarError) as e:
            raise CacheRestoreError(f"Failed to restore cache entry {key}: {e}") from e

        return key

    def _extract(self, archive: Path, destination: Path):
        destination_root = destination.resolve()
        with tarfile.open(archive, "r:gz") as tar:
            for member in tar.getmembers():
                member_path = (destination / member.name).resolve()
                if not _is_within(member_path, destination_root):
                    raise CacheRestoreError(
                        f"Cache entry member '{member.name}' escapes the extraction "
                        "directory, refusing to restore"
                    )
                if (member.issym() or member.islnk()) and _link_escapes(member):
                    raise CacheRestoreError(
                        f"Cache entry member '{member.name}' links outside the "
                        f"extraction directory ('{member.linkname}'), refusing to restore"
                    )
            if sys.version_info >= (3, 12):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)

    def _place(self, source: Path, target: Path):
        if source.is_dir():
            shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
        elif source.exists():
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
        else:
            logger.warning(f"Cache entry has no content for {target}")

    def save(self, paths: Sequence[PathLike], key: str) -> None:
        sources = _expand(paths)
        missing = [str(p) for p in sources if not p.exists()]
        if missing:
            raise CacheSaveError(
                f"Cannot save cache entry {key}, paths not found: {', '.join(missing)}"
            )

        self.root.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self.lock_path(key), timeout=0)
        try:
            lock.acquire()
        except Timeout as e:
            raise CacheReserveError(key, "another run is saving it") from e

        try:
            if self.has_entry(key):
                raise CacheReserveError(key, "entry already exists")
            self._write_entry(sources, key)
        finally:
            lock.release()

        logger.info(f"Saved cache entry for key {key}")

    def _write_entry(self, sources: List[Path], key: str):
        archive = self.archive_path(key)
        fd, temp_name = tempfile.mkstemp(
            dir=self.root, prefix=f".{archive.name}.", suffix=".tmp"
        )
        os.close(fd)
        temp_path = Path(temp_name)

        try:
            with tarfile.open(temp_path, "w:gz") as tar:
                for index, source in enumerate(sources):
                    tar.add(source, arcname=str(index), filter=_check_link)
            temp_path.replace(archive)

            manifest = {
                "key": key,
                "paths": [str(p) for p in sources],
                "created": datetime.now().isoformat(),
                "size_bytes": archive.stat().st_size,
            }
            self.manifest_path(key).write_text(
                json.dumps(manifest, indent=2), encoding="utf-8"
            )
        except (OSError, tarfile.TarError) as e:
            temp_path.unlink(missing_ok=True)
            raise CacheSaveError(f"Failed to save cache entry {key}: {e}") from e
        except CacheSaveError:
            temp_path.unlink(missing_ok=True)
            raise


__all__ = [
    "CacheBackend",
    "LocalCacheBackend",
]
