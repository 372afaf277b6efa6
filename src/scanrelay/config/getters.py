"""Configuration getter functions."""

import os
from pathlib import Path
from typing import Any

from .env_loader import load_global_config, load_local_config


def get_config(key: str, base_dir: Path | None = None, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. Local .scanrelay/.env file
    3. Global config file
    4. Default value

    Args:
        key: Configuration key
        base_dir: Directory holding the local .scanrelay folder (default: cwd)
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    # 1. Check environment variable
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    # 2. Check local .env file
    local_config = load_local_config(base_dir)
    if key in local_config:
        return local_config[key]

    # 3. Check global config
    global_config = load_global_config()
    if key in global_config:
        return global_config[key]

    # 4. Return default
    return default


def get_bool(key: str, base_dir: Path | None = None, default: bool = False) -> bool:
    """Read a flag; "1", "true", "yes" and "on" count as enabled."""
    value = get_config(key, base_dir)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def get_int(key: str, base_dir: Path | None = None, default: int = 0, minimum: int = 0) -> int:
    """Read an integer, falling back to ``default`` when unparsable."""
    value = get_config(key, base_dir)
    try:
        return max(minimum, int(value))
    except (TypeError, ValueError):
        return default


def get_float(
    key: str, base_dir: Path | None = None, default: float = 0.0, minimum: float = 0.0
) -> float:
    """Read a float, falling back to ``default`` when unparsable."""
    value = get_config(key, base_dir)
    try:
        return max(minimum, float(value))
    except (TypeError, ValueError):
        return default


def get_config_source(key: str, base_dir: Path | None = None) -> str:
    """Name the layer ``get_config`` would take ``key`` from."""
    if os.environ.get(key):
        return "env"
    if key in load_local_config(base_dir):
        return "local"
    if key in load_global_config():
        return "global"
    return "default"
