"""
Network download for bootstrap artifacts.

Provides a streaming HTTP(S) download with:
- TLS verification and redirect following
- Timeout handling
- Bounded retries with exponential backoff
- Optional SHA256 verification while streaming

Provisioning strategies never retry on their own; the retries here cover
transient network failures of a single fetch.
"""

import hashlib
import logging
import time
from pathlib import Path
from typing import Optional

import requests
from requests.exceptions import RequestException

from opamkit.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file
        expected_sha256: Expected SHA256 hash (verified during download)
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If download fails after retries or the checksum differs
        ValueError: If URL or destination is empty

    Example:
        >>> download_file(
        ...     "https://github.com/ocaml/opam/releases/download/2.0.7/opam-2.0.7-x86_64-linux",
        ...     Path("/tmp/opam"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    for attempt in range(max_retries):
        try:
            return _stream_to_file(url, destination, expected_sha256, timeout)
        except RequestException as e:
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download of {url} failed after {max_retries} attempts: {e}"
                ) from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    raise DownloadError(f"Download of {url} failed for unknown reason")


def _stream_to_file(
    url: str, destination: Path, expected_sha256: Optional[str], timeout: int
) -> Path:
    """
    Perform a single streaming download attempt.

    Raises:
        DownloadError: If checksum doesn't match
        RequestException: If HTTP request fails
    """
    logger.info(f"Downloading from {url}")

    response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
    response.raise_for_status()

    hasher = hashlib.sha256() if expected_sha256 else None

    try:
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
                    if hasher:
                        hasher.update(chunk)
    except OSError as e:
        raise DownloadError(f"Failed to write {destination}: {e}") from e

    if hasher:
        actual = hasher.hexdigest()
        if actual.lower() != expected_sha256.lower():
            destination.unlink()
            raise DownloadError(
                f"Checksum mismatch for {destination.name}: "
                f"expected {expected_sha256}, got {actual}"
            )
        logger.info("Checksum verified successfully")

    logger.info(f"Download complete: {destination}")
    return destination
