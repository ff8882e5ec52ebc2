"""
Unit tests for provisioning settings.
"""

from pathlib import Path

import pytest

from opamkit.caching.backend import LocalCacheBackend
from opamkit.config.settings import (
    DEFAULT_OCAML_VERSION,
    CacheSettings,
    ProvisionSettings,
    load_settings,
)
from opamkit.core.exceptions import ConfigError
from opamkit.core.platform import PlatformDescriptor


@pytest.fixture(autouse=True)
def clean_workdir(temp_dir, monkeypatch):
    """Run every test in an empty directory without action inputs."""
    monkeypatch.chdir(temp_dir)
    monkeypatch.delenv("INPUT_OCAML-VERSION", raising=False)
    monkeypatch.delenv("INPUT_OPAM-REPOSITORY", raising=False)


def write_config(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_defaults(self):
        settings = load_settings(environ={})

        assert settings.ocaml_version == DEFAULT_OCAML_VERSION
        assert settings.opam_repository is None
        assert settings.cache.enabled is True
        assert settings.non_interactive is True
        assert settings.strict is False

    def test_default_file_picked_up(self, temp_dir):
        """Test ./opamkit.yaml is read when present."""
        write_config(temp_dir / "opamkit.yaml", "ocaml_version: '4.14.1'\n")

        assert load_settings(environ={}).ocaml_version == "4.14.1"

    def test_yaml_values(self, temp_dir):
        config = write_config(
            temp_dir / "custom.yaml",
            """
ocaml_version: "4.12.0"
opam_repository: https://github.com/example/opam-repository.git
cache:
  enabled: false
  directory: /mnt/cache/opam
tool_cache_dir: /opt/hostedtoolcache
non_interactive: false
strict: true
""",
        )

        settings = load_settings(config, environ={})

        assert settings.ocaml_version == "4.12.0"
        assert settings.opam_repository == "https://github.com/example/opam-repository.git"
        assert settings.cache == CacheSettings(enabled=False, directory="/mnt/cache/opam")
        assert settings.tool_cache_dir == "/opt/hostedtoolcache"
        assert settings.non_interactive is False
        assert settings.strict is True

    def test_action_inputs_override_yaml(self, temp_dir):
        config = write_config(temp_dir / "c.yaml", "ocaml_version: '4.12.0'\n")

        settings = load_settings(
            config,
            environ={
                "INPUT_OCAML-VERSION": "4.11.1",
                "INPUT_OPAM-REPOSITORY": "https://example.com/repo.git",
            },
        )

        assert settings.ocaml_version == "4.11.1"
        assert settings.opam_repository == "https://example.com/repo.git"

    def test_blank_action_input_ignored(self):
        settings = load_settings(environ={"INPUT_OCAML-VERSION": "  "})
        assert settings.ocaml_version == DEFAULT_OCAML_VERSION

    def test_overrides_win(self):
        settings = load_settings(
            environ={"INPUT_OCAML-VERSION": "4.11.1"},
            overrides={"ocaml_version": "4.13.0", "opam_repository": None},
        )

        assert settings.ocaml_version == "4.13.0"
        assert settings.opam_repository is None

    def test_unknown_override(self):
        with pytest.raises(ConfigError, match="Unknown setting"):
            load_settings(environ={}, overrides={"colour": "blue"})

    def test_missing_explicit_file(self, temp_dir):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(temp_dir / "missing.yaml", environ={})

    def test_invalid_yaml(self, temp_dir):
        config = write_config(temp_dir / "bad.yaml", "ocaml_version: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(config, environ={})

    def test_not_a_mapping(self, temp_dir):
        config = write_config(temp_dir / "list.yaml", "- 4.10.0\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_settings(config, environ={})

    def test_bad_boolean(self, temp_dir):
        config = write_config(temp_dir / "b.yaml", "cache:\n  enabled: sometimes\n")

        with pytest.raises(ConfigError, match="cache.enabled must be true or false"):
            load_settings(config, environ={})

    def test_empty_version(self, temp_dir):
        config = write_config(temp_dir / "v.yaml", "ocaml_version: ''\n")

        with pytest.raises(ConfigError, match="must not be empty"):
            load_settings(config, environ={})

    @pytest.mark.parametrize("value", ["4.10", "4", "4.14"])
    def test_unquoted_version_rejected(self, temp_dir, value):
        """Test numeric YAML versions are refused instead of truncated."""
        config = write_config(temp_dir / "n.yaml", f"ocaml_version: {value}\n")

        with pytest.raises(ConfigError, match="quote the version"):
            load_settings(config, environ={})

    def test_quoted_version_kept(self, temp_dir):
        config = write_config(temp_dir / "q.yaml", "ocaml_version: \"4.10\"\n")

        assert load_settings(config, environ={}).ocaml_version == "4.10"

    def test_empty_file(self, temp_dir):
        config = write_config(temp_dir / "empty.yaml", "")
        assert load_settings(config, environ={}).ocaml_version == DEFAULT_OCAML_VERSION


class TestCreateContext:
    """Tests for ProvisionSettings.create_context()."""

    def test_context_from_settings(self, temp_dir):
        info = PlatformDescriptor("linux", "arm64", "6.1.0")
        settings = ProvisionSettings(
            cache=CacheSettings(enabled=True, directory=str(temp_dir / "cache")),
            tool_cache_dir=str(temp_dir / "tools"),
            script_dir=str(temp_dir / "scripts"),
            non_interactive=False,
        )

        context = settings.create_context(info)

        assert context.platform == info
        assert isinstance(context.cache, LocalCacheBackend)
        assert context.cache.root == temp_dir / "cache"
        assert context.tool_cache.root == temp_dir / "tools"
        assert context.tool_cache.arch == "arm64"
        assert context.script_dir == temp_dir / "scripts"
        assert context.non_interactive is False
        assert context.runner.non_interactive is False

    def test_cache_disabled(self, temp_dir):
        settings = ProvisionSettings(
            cache=CacheSettings(enabled=False),
            tool_cache_dir=str(temp_dir / "tools"),
        )

        context = settings.create_context(PlatformDescriptor("linux", "x64", "6.1.0"))

        assert context.cache is None
