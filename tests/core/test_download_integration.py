"""
Integration tests for downloading opam release binaries.

These tests hit github.com and only run with --integration.
"""

import os

import pytest

from opamkit.core.download import download_file
from opamkit.core.exceptions import DownloadError
from opamkit.core.platform import PlatformDescriptor
from opamkit.provision.artifacts import resolve_artifact
from opamkit.provision.strategies.linux import OPAM_BOOTSTRAP_VERSION

LINUX_X64 = PlatformDescriptor("linux", "x64", "5.15.0")


@pytest.mark.integration
def test_download_opam_release_binary(temp_dir):
    """Test the Linux bootstrap binary resolves to a downloadable ELF file."""
    artifact = resolve_artifact(OPAM_BOOTSTRAP_VERSION, LINUX_X64)

    path = download_file(artifact.download_url, temp_dir / artifact.filename, timeout=60)

    assert os.path.getsize(path) > 1024 * 1024
    with open(path, "rb") as f:
        assert f.read(4) == b"\x7fELF"


@pytest.mark.integration
def test_missing_release_asset(temp_dir):
    """Test a release asset that does not exist is reported as DownloadError."""
    url = resolve_artifact("0.0.0", LINUX_X64).download_url

    with pytest.raises(DownloadError):
        download_file(url, temp_dir / "opam", max_retries=1)
