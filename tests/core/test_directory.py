"""
Unit tests for directory locations.
"""

from unittest.mock import patch

import pytest

from opamkit.core.directory import (
    get_global_cache_dir,
    get_opam_cache_dir,
    get_script_dir,
    get_temp_dir,
    get_tool_cache_dir,
)
from opamkit.core.exceptions import ConfigError


class TestGlobalCacheDir:
    def test_unix(self, isolated_home):
        with patch("opamkit.core.directory.os.name", "posix"):
            assert get_global_cache_dir() == isolated_home / ".opamkit"

    def test_windows(self, monkeypatch, temp_dir):
        monkeypatch.setenv("USERPROFILE", str(temp_dir))
        with patch("opamkit.core.directory.os.name", "nt"):
            assert get_global_cache_dir() == temp_dir / ".opamkit"

    def test_windows_without_userprofile(self, monkeypatch):
        monkeypatch.delenv("USERPROFILE", raising=False)
        with patch("opamkit.core.directory.os.name", "nt"):
            with pytest.raises(ConfigError, match="USERPROFILE"):
                get_global_cache_dir()


class TestRunnerDirectories:
    def test_runner_variables(self, monkeypatch, temp_dir):
        monkeypatch.setenv("RUNNER_TOOL_CACHE", str(temp_dir / "tools"))
        monkeypatch.setenv("RUNNER_TEMP", str(temp_dir / "tmp"))

        assert get_tool_cache_dir() == temp_dir / "tools"
        assert get_temp_dir() == temp_dir / "tmp"

    def test_fallbacks(self, monkeypatch, isolated_home):
        monkeypatch.delenv("RUNNER_TOOL_CACHE", raising=False)
        monkeypatch.delenv("RUNNER_TEMP", raising=False)

        assert get_tool_cache_dir() == isolated_home / ".opamkit" / "tools"
        assert get_temp_dir() == isolated_home / ".opamkit" / "tmp"
        assert get_opam_cache_dir() == isolated_home / ".opamkit" / "cache"


def test_script_dir_ships_install_scripts():
    script_dir = get_script_dir()

    assert (script_dir / "install-ocaml-unix.sh").is_file()
    assert (script_dir / "install-ocaml-windows.cmd").is_file()
