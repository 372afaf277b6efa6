"""Environment variable and configuration file loading."""

from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR_NAME = ".scanrelay"


def get_global_config_dir() -> Path:
    """Return the per-user ~/.scanrelay directory."""
    return Path.home() / CONFIG_DIR_NAME


def get_local_env_path(base_dir: Path | None = None) -> Path:
    """Return the .env path for a working directory (default: cwd)."""
    return (base_dir or Path.cwd()) / CONFIG_DIR_NAME / ".env"


def load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from .env file."""
    env_vars = {}
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    # Remove quotes if present
                    value = value.strip().strip("\"'")
                    env_vars[key.strip()] = value
    return env_vars


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ~/.scanrelay/config.yml."""
    config_path = get_global_config_dir() / "config.yml"
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        return data if isinstance(data, dict) else {}
    return {}


def load_local_config(base_dir: Path | None = None) -> dict[str, str]:
    """Load directory-local configuration from .scanrelay/.env."""
    return load_env_file(get_local_env_path(base_dir))
