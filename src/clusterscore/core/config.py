"""3-layer configuration system for ClusterScore.

Loads and merges configuration from:
1. Default settings (built-in)
2. Project config (clusterscore.yaml)
3. CLI parameters (override)
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigurationError

CONFIG_FILENAME = "clusterscore.yaml"

DEFAULT_CONFIG: dict = {
    "store": {
        "backend": "files",
        "path": ".clusterscore",
    },
    "kubernetes": {
        "api_server": "https://kubernetes.default.svc",
        "token_env": "KUBE_TOKEN",
        "verify_ssl": True,
        "timeout_seconds": 30,
    },
    "specs": {
        "dir": "specs",
    },
    "logging": {
        "level": "INFO",
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def load_project_config(config_path: Path) -> dict:
    """Load a clusterscore.yaml file. A missing file yields an empty config."""
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        data = yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read config {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {config_path} must be a mapping")
    return data


def get_effective_config(
    project_path: Path,
    config_file: Optional[Path] = None,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration.

    Relative ``store.path`` and ``specs.dir`` values resolve against
    ``project_path``.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    project_config = load_project_config(config_file or project_path / CONFIG_FILENAME)
    if project_config:
        config = deep_merge(config, project_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    for section, key in (("store", "path"), ("specs", "dir")):
        value = Path(config[section][key])
        if not value.is_absolute():
            config[section][key] = str(project_path / value)

    config["_project_path"] = str(project_path)
    return config
