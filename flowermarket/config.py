"""Configuration loader for the flower market

Configurable values come from config/config.yaml, or from the file named
by the FLOWERMARKET_CONFIG environment variable (a .env file is honored).

Configuration is validated at load time using Pydantic.
Typos and invalid values fail fast with clear error messages.

Usage:
    from flowermarket.config import load_config, get, get_validated_config

    # Load and validate (call once at startup)
    load_config("config/config.yaml")

    # Get values by dot-path
    strict = get("registry.strict_reads")

    # Or use the typed config object (preferred)
    config = get_validated_config()
    strict = config.registry.strict_reads
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .config_schema import AppConfig, load_validated_config, validate_config_dict


logger = logging.getLogger(__name__)


CONFIG_ENV_VAR: str = "FLOWERMARKET_CONFIG"

# Global config instances
_config: dict[str, Any] | None = None
_validated_config: AppConfig | None = None
_MISSING = object()

# Default config path
DEFAULT_CONFIG_PATH: Path = Path(__file__).parent.parent / "config" / "config.yaml"


def resolve_config_path(config_path: str | None = None) -> Path:
    """Pick the config file: explicit argument, then env var, then default."""
    if config_path:
        return Path(config_path)
    load_dotenv()
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    return DEFAULT_CONFIG_PATH


def load_config(config_path: str | None = None) -> dict[str, Any]:
    """Load and validate configuration from YAML file.

    When no path is given and neither FLOWERMARKET_CONFIG nor the bundled
    config/config.yaml is present (e.g. an installed wheel), the schema
    defaults are used.

    Returns:
        Configuration dictionary (raw, for dot-path access).

    Raises:
        FileNotFoundError: If an explicitly named config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    global _config, _validated_config

    path = resolve_config_path(config_path)

    if path is DEFAULT_CONFIG_PATH and not path.exists():
        logger.info("No config file at %s, using defaults", path)
        _validated_config = AppConfig()
        _config = {}
        return _config

    _validated_config = load_validated_config(path)

    with open(path) as f:
        loaded: Any = yaml.safe_load(f)
        if not isinstance(loaded, dict):
            loaded = {}
        _config = loaded

    return _config


def get_config() -> dict[str, Any]:
    """Get the loaded configuration dict. Loads default if not already loaded."""
    global _config
    if _config is None:
        load_config()
    if _config is None:
        raise RuntimeError("Config failed to load. Call load_config() first.")
    return _config


def get_validated_config() -> AppConfig:
    """Get the validated configuration object.

    Loads default config if not already loaded.
    """
    global _validated_config
    if _validated_config is None:
        load_config()
    if _validated_config is None:
        raise RuntimeError("Validated config failed to load. Call load_config() first.")
    return _validated_config


def get(key: str, default: Any = None) -> Any:
    """Get a config value by dot-separated key path.

    Only keys present in the loaded file are found; schema defaults are
    reachable through get_validated_config().

    Examples:
        get("registry.strict_reads")
        get("market.methods.buy.description")
    """
    config: dict[str, Any] = get_config()
    value: Any = config
    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default
    return value


def set_config_value(key: str, value: Any) -> None:
    """Set a config value by dot-separated key path and re-validate.

    Used for runtime overrides (tests, embedding applications).

    Raises:
        pydantic.ValidationError: If the override makes the config invalid.
            The previous config is kept in that case.
    """
    global _config, _validated_config

    if _config is None:
        load_config()
    if _config is None:
        raise RuntimeError("Config failed to load. Call load_config() first.")

    keys = key.split(".")
    target = _config
    for k in keys[:-1]:
        if k not in target:
            target[k] = {}
        target = target[k]

    previous = target.get(keys[-1], _MISSING)
    target[keys[-1]] = value
    try:
        _validated_config = validate_config_dict(_config)
    except Exception:
        if previous is _MISSING:
            del target[keys[-1]]
        else:
            target[keys[-1]] = previous
        raise


def reset_config() -> None:
    """Forget any loaded config so the next access reloads it."""
    global _config, _validated_config
    _config = None
    _validated_config = None


def setup_logging(config: AppConfig | None = None) -> None:
    """Apply the configured log level and format to the root logger."""
    cfg = (config or get_validated_config()).logging
    logging.basicConfig(level=cfg.level, format=cfg.format)
