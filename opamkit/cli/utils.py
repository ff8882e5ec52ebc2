"""
Shared utilities for CLI commands.
"""

import sys
from typing import Any, Dict, Optional

from opamkit.config.settings import ProvisionSettings, load_settings


def settings_from_args(args) -> ProvisionSettings:
    """
    Load settings with the version and repository flags applied.

    Raises:
        ConfigError: If the configuration is invalid
    """
    overrides = {
        "ocaml_version": getattr(args, "ocaml_version", None),
        "opam_repository": getattr(args, "opam_repository", None),
    }
    return load_settings(getattr(args, "config", None), overrides=overrides)


def format_summary(title: str, details: Dict[str, Any], width: int = 70) -> str:
    """
    Format a boxed key-value summary.

    Args:
        title: Summary title
        details: Key-value pairs to display
        width: Width of the box rule

    Returns:
        Formatted summary string
    """
    lines = ["=" * width, title, "=" * width]
    for key, value in details.items():
        lines.append(f"{key}: {value}")
    lines.append("")
    return "\n".join(lines)


def print_summary(title: str, details: Dict[str, Any]):
    print(format_summary(title, details))


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)
