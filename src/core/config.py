"""
Configuration Management

Single source of truth for dashboard parameters.
Loads from YAML config file with validation and environment overrides.
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from src.core.errors import ConfigError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent

REQUIRED_SECTIONS = ["data", "map", "filters", "links", "runtime"]

ENV_PREFIX = "RENTALMAP_"


def _coerce_env(current: Any, value: str) -> Any:
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes", "on")
    if isinstance(current, (int, float)):
        return float(value) if "." in value else int(value)
    return value


def apply_env_overrides(config: dict[str, Any], environ: Optional[dict] = None) -> dict[str, Any]:
    """
    Apply RENTALMAP_<SECTION>_<KEY> environment overrides in place.

    Example: RENTALMAP_MAP_ZOOM=12 -> config["map"]["zoom"] = 12
    """
    environ = os.environ if environ is None else environ
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        parts = key[len(ENV_PREFIX):].lower().split("_")
        if len(parts) < 2:
            continue
        section = parts[0]
        subkey = "_".join(parts[1:])
        if section in config and isinstance(config[section], dict):
            try:
                config[section][subkey] = _coerce_env(config[section].get(subkey), value)
            except ValueError:
                logger.warning("Ignoring %s: %r is not numeric", key, value)
                continue
    return config


def load_config(config_path: Optional[str] = None) -> dict[str, Any]:
    """
    Load configuration from YAML file.
    
    Args:
        config_path: Path to config YAML file. Defaults to config/default.yaml
    
    Returns:
        Config dictionary with all parameters
    
    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If the file is empty or required sections are missing
    """
    if config_path is None:
        config_path = PROJECT_ROOT / "config" / "default.yaml"
    else:
        config_path = Path(config_path)
    
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)
    
    if not isinstance(config, dict):
        raise ConfigError(f"Config file is empty or invalid: {config_path}")
    
    missing = [k for k in REQUIRED_SECTIONS if k not in config]
    if missing:
        raise ConfigError(f"Config missing required keys: {missing}")
    
    return apply_env_overrides(config)


def get_config_value(config: dict, *keys: str, default: Any = None) -> Any:
    """
    Get nested config value.
    
    Example:
        get_config_value(config, "map", "zoom") -> config["map"]["zoom"]
    """
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


def load_client_config(path: Optional[str] = None) -> dict[str, str]:
    """
    Load the client JSON (map client id + API access token).

    Missing or unreadable files give an empty dict; the dashboard then runs
    without the last-updated lookup.
    """
    p = Path(path) if path else PROJECT_ROOT / "config" / "client.json"
    if not p.exists():
        return {}
    try:
        obj = json.loads(p.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not read client config %s: %s", p, e)
        return {}
    if not isinstance(obj, dict):
        return {}
    return {
        "map_client_id": str(obj.get("map_client_id") or obj.get("clientId") or ""),
        "access_token": str(obj.get("access_token") or obj.get("token") or ""),
    }
