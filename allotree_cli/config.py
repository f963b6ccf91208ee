"""
CLI Configuration

Configuration management for the allotree CLI.
Supports environment variables (and a .env file) and JSON configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv


# Environment variable prefix
ENV_PREFIX = "ALLOTREE_"

VARIANT_CHOICES = ("auto", "plain", "referral")
LEAF_ORDER_CHOICES = ("index", "hash")


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Distribution defaults
    default_variant: str = "auto"  # generate treats "auto" as "plain"
    leaf_order: str = "index"

    # Output
    json_indent: int | None = 2

    def validate(self) -> None:
        if self.default_variant not in VARIANT_CHOICES:
            raise ValueError(
                f"default_variant must be one of {VARIANT_CHOICES}, got {self.default_variant!r}"
            )
        if self.leaf_order not in LEAF_ORDER_CHOICES:
            raise ValueError(
                f"leaf_order must be one of {LEAF_ORDER_CHOICES}, got {self.leaf_order!r}"
            )
        if self.json_indent is not None and self.json_indent < 0:
            raise ValueError(f"json_indent must be >= 0, got {self.json_indent}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _parse_indent(raw: str) -> int | None:
    if raw.strip().lower() in ("", "none", "null"):
        return None
    return int(raw)


def apply_env_overrides(config: CLIConfig) -> CLIConfig:
    """Override config fields from ALLOTREE_* environment variables."""
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    if os.getenv(f"{ENV_PREFIX}VARIANT"):
        config.default_variant = os.getenv(f"{ENV_PREFIX}VARIANT", "auto").lower()
    if os.getenv(f"{ENV_PREFIX}LEAF_ORDER"):
        config.leaf_order = os.getenv(f"{ENV_PREFIX}LEAF_ORDER", "index").lower()
    if os.getenv(f"{ENV_PREFIX}JSON_INDENT") is not None:
        config.json_indent = _parse_indent(os.getenv(f"{ENV_PREFIX}JSON_INDENT", "2"))
    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")

    config = CLIConfig()
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_variant = data.get("default_variant", config.default_variant)
    config.leaf_order = data.get("leaf_order", config.leaf_order)
    config.json_indent = data.get("json_indent", config.json_indent)
    return config


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "allotree.json",
        Path.cwd() / ".allotree.json",
        Path.home() / ".config" / "allotree" / "config.json",
    ]


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. A .env file in the
    working directory is loaded first and never overrides variables that
    are already set.

    Args:
        config_path: Optional path to config file; if given it must exist

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If config_path is given and missing
        ValueError: If a setting is out of range
    """
    load_dotenv()

    config = CLIConfig()
    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    config = apply_env_overrides(config)
    config.validate()
    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(CLIConfig().to_dict(), indent=2) + "\n"
