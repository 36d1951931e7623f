"""
Configuration Loading Utilities.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from elemental.backend.schemas import AppSettings

DEFAULT_CONFIG_PATH = "configs/default_config.yaml"
CONFIG_ENV_VAR = "ELEMENTAL_CONFIG"


class ConfigError(ValueError):
    """Raised when a configuration is present but unusable."""


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration dictionary.

    Returns:
        Default configuration
    """
    return {
        "backend": {
            "host": "localhost",
            "port": 3000,
        },
        "devserver": {
            "host": "localhost",
            "port": 5178,
            "plugins": ["sveltekit"],
            "build_dir": "frontend/build",
            "proxy": [
                {
                    "context": "/api",
                    "target": "http://localhost:3000",
                    "change_origin": True,
                },
            ],
        },
        "theme": {
            "content": ["./frontend/src/**/*.{html,js,svelte,ts}"],
        },
    }


def resolve_config_path(config_path: Optional[str] = None) -> Path:
    """Explicit path first, then ``$ELEMENTAL_CONFIG``, then the bundled default."""
    if config_path:
        return Path(config_path)
    return Path(os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If config file is not valid YAML or not a mapping
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r") as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration root must be a mapping: {config_path}")

    # Missing sections fall back to defaults
    defaults = get_default_config()
    for section, values in defaults.items():
        if section not in config or config[section] is None:
            config[section] = copy.deepcopy(values)

    return config


def save_config(config: Dict[str, Any], config_path: str) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        config_path: Output path
    """
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def parse_settings(config: Dict[str, Any]) -> AppSettings:
    """Validate a configuration dictionary into :class:`AppSettings`."""
    try:
        return AppSettings.model_validate(config)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def load_settings(config_path: Optional[str] = None) -> AppSettings:
    """Load and validate the configuration in one step."""
    return parse_settings(load_config(str(resolve_config_path(config_path))))
