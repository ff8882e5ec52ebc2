"""Settings for a provisioning run.

Settings are layered, later layers overriding earlier ones:

1. Built-in defaults
2. opamkit.yaml
3. Action inputs from the environment (INPUT_OCAML-VERSION, INPUT_OPAM-REPOSITORY)
4. Explicit overrides (command-line flags)

Example opamkit.yaml:

    ocaml_version: "4.10.0"
    opam_repository: https://github.com/ocaml/opam-repository.git
    cache:
      enabled: true
      directory: /mnt/cache/opam
    tool_cache_dir: /opt/hostedtoolcache
    non_interactive: true
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from opamkit.caching.backend import LocalCacheBackend
from opamkit.core.directory import get_script_dir
from opamkit.core.environment import JobEnvironment
from opamkit.core.exceptions import ConfigError
from opamkit.core.platform import PlatformDescriptor, identify_platform
from opamkit.core.runner import SubprocessRunner
from opamkit.core.tool_cache import ToolCache
from opamkit.provision.strategy import ProvisionContext

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "opamkit.yaml"
DEFAULT_OCAML_VERSION = "4.10.0"

ACTION_INPUTS = {
    "INPUT_OCAML-VERSION": "ocaml_version",
    "INPUT_OPAM-REPOSITORY": "opam_repository",
}


@dataclass
class CacheSettings:
    """opam root cache configuration."""

    enabled: bool = True
    directory: Optional[str] = None


@dataclass
class ProvisionSettings:
    """Complete settings of a provisioning run."""

    ocaml_version: str = DEFAULT_OCAML_VERSION
    opam_repository: Optional[str] = None
    cache: CacheSettings = field(default_factory=CacheSettings)
    tool_cache_dir: Optional[str] = None
    script_dir: Optional[str] = None
    non_interactive: bool = True
    strict: bool = False

    def create_context(
        self, platform: Optional[PlatformDescriptor] = None
    ) -> ProvisionContext:
        """
        Build the provisioning context these settings describe.

        Args:
            platform: Platform to provision for (default: host platform)
        """
        platform = platform or identify_platform()

        cache = None
        if self.cache.enabled:
            cache_dir = Path(self.cache.directory) if self.cache.directory else None
            cache = LocalCacheBackend(cache_dir)

        tool_cache_dir = Path(self.tool_cache_dir) if self.tool_cache_dir else None
        script_dir = Path(self.script_dir) if self.script_dir else get_script_dir()

        return ProvisionContext(
            platform=platform,
            runner=SubprocessRunner(non_interactive=self.non_interactive),
            tool_cache=ToolCache(root=tool_cache_dir, arch=platform.arch),
            environment=JobEnvironment(),
            cache=cache,
            script_dir=script_dir,
            non_interactive=self.non_interactive,
        )


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ProvisionSettings:
    """
    Load settings from all layers.

    Args:
        config_path: YAML file to read. When None, ./opamkit.yaml is read if
            it exists.
        environ: Environment to read action inputs from (default: os.environ)
        overrides: Explicit values; None values are ignored

    Returns:
        Merged settings

    Raises:
        ConfigError: If an explicit config file is missing or any layer is invalid
    """
    if config_path is None:
        data = _read_yaml(Path(DEFAULT_CONFIG_FILE), required=False)
    else:
        data = _read_yaml(Path(config_path), required=True)

    settings = _parse_settings(data)

    environ = os.environ if environ is None else environ
    for variable, name in ACTION_INPUTS.items():
        value = environ.get(variable, "").strip()
        if value:
            logger.debug(f"Using action input {variable}")
            setattr(settings, name, value)

    for name, value in (overrides or {}).items():
        if value is None:
            continue
        if not hasattr(settings, name):
            raise ConfigError(f"Unknown setting: {name}")
        setattr(settings, name, value)

    if not settings.ocaml_version:
        raise ConfigError("ocaml_version must not be empty")

    return settings


def _read_yaml(config_path: Path, required: bool) -> dict:
    """Read a YAML mapping; a missing optional file yields an empty mapping."""
    if not config_path.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_path}")
        logger.debug(f"Config file not found (optional): {config_path}")
        return {}

    logger.debug(f"Loading configuration from {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")
    return data


def _parse_settings(data: dict) -> ProvisionSettings:
    """Parse and validate the YAML layer."""
    settings = ProvisionSettings()

    if "ocaml_version" in data:
        settings.ocaml_version = _parse_version(data["ocaml_version"])
    if data.get("opam_repository"):
        settings.opam_repository = str(data["opam_repository"])

    cache_data = data.get("cache", {})
    if cache_data is None:
        cache_data = {}
    if not isinstance(cache_data, dict):
        raise ConfigError("cache must be a mapping")
    settings.cache = CacheSettings(
        enabled=_parse_bool(cache_data.get("enabled", True), "cache.enabled"),
        directory=cache_data.get("directory"),
    )

    settings.tool_cache_dir = data.get("tool_cache_dir")
    settings.script_dir = data.get("script_dir")
    settings.non_interactive = _parse_bool(
        data.get("non_interactive", True), "non_interactive"
    )
    settings.strict = _parse_bool(data.get("strict", False), "strict")

    return settings


def _parse_version(value: Any) -> str:
    # Unquoted YAML versions load as numbers: 4.10 becomes 4.1
    if not isinstance(value, str):
        raise ConfigError(
            f"ocaml_version must be a string, got {value!r}; "
            "quote the version (ocaml_version: \"4.10.0\")"
        )
    return value


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{name} must be true or false, got {value!r}")
