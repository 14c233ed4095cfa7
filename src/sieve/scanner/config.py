# SPDX-License-Identifier: MIT
"""
Scanner configuration loader for Sieve.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from sieve.core.exceptions import SieveConfigError
from sieve.core.redaction import DEFAULT_PLACEHOLDER

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".sieve.yml", ".sieve.yaml")

DEFAULT_EXCLUDE_GLOBS = [
    "**/.git/**",
    "**/.svn/**",
    "**/.hg/**",
    "**/.venv/**",
    "**/venv/**",
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/.pytest_cache/**",
    "**/__pycache__/**",
]

LIST_KEYS = ("include_globs", "exclude_globs", "ignore_files")


def load_scanner_config(config_path: Optional[str] = None, repo_root: str = ".") -> Dict[str, Any]:
    """
    Load scanner configuration following the search order.

    Args:
        config_path: Explicit config path from the --config CLI flag
        repo_root: Scan root searched for .sieve.yml/.sieve.yaml

    Returns:
        Dictionary containing scanner configuration

    Raises:
        SieveConfigError: If the config file is malformed or an explicitly
            provided config is missing
    """
    # 1. Explicit --config
    if config_path:
        config_abs_path = Path(config_path).resolve()
        if not config_abs_path.exists():
            raise SieveConfigError(
                f"Specified config file not found: {config_abs_path}",
                config_path=str(config_abs_path),
            )
        return _load_or_raise(config_abs_path)

    # 2. .sieve.yml or .sieve.yaml at the scan root
    repo_path = Path(repo_root).resolve()
    if repo_path.is_file():
        repo_path = repo_path.parent
    for config_name in CONFIG_FILENAMES:
        config_file = repo_path / config_name
        if config_file.exists():
            return _load_or_raise(config_file)

    # 3. Built-in defaults
    logger.debug("Using default scanner config")
    return get_default_scanner_config()


def _load_or_raise(config_file: Path) -> Dict[str, Any]:
    try:
        config = _load_yaml_config(config_file)
    except SieveConfigError:
        raise
    except (OSError, yaml.YAMLError, ValueError) as e:
        raise SieveConfigError(
            f"Failed to parse config file: {e}",
            config_path=str(config_file),
        )
    logger.info("Loaded config: %s", config_file)
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    """Load and validate YAML config file."""
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")

    for key in LIST_KEYS:
        if key in config and not isinstance(config[key], list):
            raise SieveConfigError(
                f"'{key}' must be a list",
                config_path=str(config_path),
                section=key,
            )

    return _apply_scanner_defaults(config)


def _apply_scanner_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply default values to scanner configuration."""
    defaults = get_default_scanner_config()
    for key, value in defaults.items():
        if key not in config:
            config[key] = value
    return config


def get_default_scanner_config() -> Dict[str, Any]:
    """
    Get the default scanner configuration.

    Returns:
        Dictionary with default scanner settings
    """
    return {
        "include_globs": ["**/*"],
        "exclude_globs": list(DEFAULT_EXCLUDE_GLOBS),
        "max_file_bytes": 1_000_000,
        "include_hidden": False,
        "respect_ignore_files": True,
        "ignore_files": [".gitignore", ".sieveignore"],
        "placeholder": DEFAULT_PLACEHOLDER,
        "baseline_path": ".sieve.baseline.json",
        "cache_path": ".sieve_cache.json",
    }


def create_default_config_template() -> str:
    """
    Create a minimal .sieve.yml template with commented examples.

    Returns:
        YAML string with default configuration template
    """
    return """# Sieve Scanner Configuration
# This file configures how sieve walks your repository

# File patterns to include (default: scan everything)
include_globs:
  - "**/*"

# File patterns to exclude
exclude_globs:
  - "**/.git/**"
  - "**/.svn/**"
  - "**/.hg/**"
  - "**/.venv/**"
  - "**/venv/**"
  - "**/node_modules/**"
  - "**/dist/**"
  - "**/build/**"
  - "**/.pytest_cache/**"
  - "**/__pycache__/**"
  # Add project-specific paths to exclude:
  # - "docs/**"

# Files larger than this are skipped
max_file_bytes: 1000000

# Scan dotfiles such as .env (check --full always does)
include_hidden: false

# Honour ignore files found at the scan root
respect_ignore_files: true
ignore_files:
  - ".gitignore"
  - ".sieveignore"

# Text written over a secret by check --repair / --fix
placeholder: "REDACTED_SECRET"

# Where accepted fingerprints and the last findings are stored
baseline_path: ".sieve.baseline.json"
cache_path: ".sieve_cache.json"
"""
