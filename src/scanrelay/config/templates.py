"""Configuration file templates for local and global settings."""

from pathlib import Path

import yaml

from .env_loader import get_global_config_dir, get_local_env_path

ENV_TEMPLATE = """# ScanRelay configuration
# Uncomment and fill in your values

# Base URL of the sqlmap API server (sqlmapapi.py -s)
# SCANRELAY_API_URL=http://localhost:8775

# Job database location
# SCANRELAY_DB_PATH=~/.scanrelay/scanrelay.db

# Worker tuning
# SCANRELAY_CONCURRENCY=2
# SCANRELAY_POLL_INTERVAL=5
# SCANRELAY_MAX_POLLS=1000
# SCANRELAY_REQUEST_TIMEOUT=30
# SCANRELAY_MAX_ATTEMPTS=1
# SCANRELAY_IDLE_INTERVAL=1

# Verbose logging
# SCANRELAY_VERBOSE=false
"""


def create_local_env_template(base_dir: Path | None = None) -> Path:
    """Create ./.scanrelay/.env with commented defaults unless it exists."""
    env_path = get_local_env_path(base_dir)
    env_path.parent.mkdir(parents=True, exist_ok=True)
    if not env_path.exists():
        env_path.write_text(ENV_TEMPLATE)
    return env_path


def create_global_config(defaults: dict | None = None) -> Path:
    """Create ~/.scanrelay/config.yml if it doesn't exist."""
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    config_path = config_dir / "config.yml"
    if not config_path.exists():
        default_config = defaults or {
            "SCANRELAY_API_URL": "http://localhost:8775",
            "SCANRELAY_CONCURRENCY": 2,
            "SCANRELAY_POLL_INTERVAL": 5.0,
        }
        with open(config_path, "w") as f:
            yaml.dump(default_config, f, default_flow_style=False)

    return config_path
