"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import hashlib
from unittest.mock import patch

import pytest
import responses
from requests.exceptions import ConnectionError

from opamkit.core.download import download_file
from opamkit.core.exceptions import DownloadError

URL = "https://github.com/ocaml/opam/releases/download/2.0.7/opam-2.0.7-x86_64-linux"


class TestDownloadFile:
    """Tests for download_file()."""

    @responses.activate
    def test_download_success(self, temp_dir):
        """Test a successful download writes the body."""
        responses.add(responses.GET, URL, body=b"opam binary", status=200)
        dest = temp_dir / "opam"

        result = download_file(URL, dest)

        assert result == dest
        assert dest.read_bytes() == b"opam binary"

    @responses.activate
    def test_creates_parent_directory(self, temp_dir):
        """Test missing destination directories are created."""
        responses.add(responses.GET, URL, body=b"data", status=200)
        dest = temp_dir / "nested" / "dir" / "opam"

        download_file(URL, dest)

        assert dest.exists()

    @responses.activate
    def test_checksum_verified(self, temp_dir):
        """Test a matching checksum is accepted."""
        body = b"verified content"
        responses.add(responses.GET, URL, body=body, status=200)

        result = download_file(
            URL, temp_dir / "opam", expected_sha256=hashlib.sha256(body).hexdigest()
        )

        assert result.read_bytes() == body

    @responses.activate
    def test_checksum_mismatch(self, temp_dir):
        """Test a mismatching checksum raises and removes the file."""
        responses.add(responses.GET, URL, body=b"tampered", status=200)
        dest = temp_dir / "opam"

        with pytest.raises(DownloadError, match="Checksum mismatch"):
            download_file(URL, dest, expected_sha256="0" * 64)

        assert not dest.exists()

    @responses.activate
    @patch("opamkit.core.download.time.sleep")
    def test_http_error_after_retries(self, mock_sleep, temp_dir):
        """Test HTTP errors are retried and then reported as DownloadError."""
        responses.add(responses.GET, URL, status=404)

        with pytest.raises(DownloadError, match="after 3 attempts"):
            download_file(URL, temp_dir / "opam", max_retries=3)

        assert len(responses.calls) == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]

    @responses.activate
    @patch("opamkit.core.download.time.sleep")
    def test_retry_then_success(self, mock_sleep, temp_dir):
        """Test a transient connection error is retried."""
        responses.add(responses.GET, URL, body=ConnectionError("connection reset"))
        responses.add(responses.GET, URL, body=b"second try", status=200)

        result = download_file(URL, temp_dir / "opam")

        assert result.read_bytes() == b"second try"
        assert mock_sleep.call_count == 1

    def test_empty_url(self, temp_dir):
        """Test an empty URL is rejected."""
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", temp_dir / "opam")
