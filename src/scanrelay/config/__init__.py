"""
Configuration management for ScanRelay.

Supports multiple configuration sources in order of priority:
1. Environment variables (highest priority)
2. Local .env file (./.scanrelay/.env)
3. Global config file (~/.scanrelay/config.yml)
4. Default values (lowest priority)
"""

from .env_loader import (
    get_global_config_dir,
    get_local_env_path,
    load_env_file,
    load_global_config,
    load_local_config,
)
from .getters import get_bool, get_config, get_config_source, get_float, get_int
from .settings import ENV_KEYS, Settings, load_settings
from .templates import ENV_TEMPLATE, create_global_config, create_local_env_template

__all__ = [
    # env_loader
    "get_global_config_dir",
    "get_local_env_path",
    "load_env_file",
    "load_global_config",
    "load_local_config",
    # getters
    "get_bool",
    "get_config",
    "get_config_source",
    "get_float",
    "get_int",
    # settings
    "ENV_KEYS",
    "Settings",
    "load_settings",
    # templates
    "ENV_TEMPLATE",
    "create_global_config",
    "create_local_env_template",
]
