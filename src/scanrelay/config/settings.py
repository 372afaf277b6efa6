"""Resolved runtime settings."""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from scanrelay.modules.orchestrator import DEFAULT_MAX_POLLS, DEFAULT_POLL_INTERVAL
from scanrelay.modules.sqlmapapi import DEFAULT_API_URL

from .env_loader import get_global_config_dir
from .getters import get_bool, get_config, get_float, get_int

ENV_KEYS = (
    "SCANRELAY_API_URL",
    "SCANRELAY_DB_PATH",
    "SCANRELAY_CONCURRENCY",
    "SCANRELAY_POLL_INTERVAL",
    "SCANRELAY_MAX_POLLS",
    "SCANRELAY_REQUEST_TIMEOUT",
    "SCANRELAY_MAX_ATTEMPTS",
    "SCANRELAY_IDLE_INTERVAL",
    "SCANRELAY_VERBOSE",
)


@dataclass
class Settings:
    """Effective configuration for clients, workers and the job store."""

    api_url: str = DEFAULT_API_URL
    db_path: Path = Path.home() / ".scanrelay" / "scanrelay.db"
    concurrency: int = 2
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_polls: int = DEFAULT_MAX_POLLS
    request_timeout: float = 30.0
    max_attempts: int = 1
    idle_interval: float = 1.0
    verbose: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["db_path"] = str(self.db_path)
        return data


def load_settings(base_dir: Path | None = None) -> Settings:
    """Resolve settings from env, local .env, global YAML and defaults."""
    defaults = Settings(db_path=get_global_config_dir() / "scanrelay.db")
    db_path = get_config("SCANRELAY_DB_PATH", base_dir)
    return Settings(
        api_url=str(get_config("SCANRELAY_API_URL", base_dir, default=defaults.api_url)),
        db_path=Path(db_path).expanduser() if db_path else defaults.db_path,
        concurrency=get_int(
            "SCANRELAY_CONCURRENCY", base_dir, default=defaults.concurrency, minimum=1
        ),
        poll_interval=get_float(
            "SCANRELAY_POLL_INTERVAL", base_dir, default=defaults.poll_interval
        ),
        max_polls=get_int("SCANRELAY_MAX_POLLS", base_dir, default=defaults.max_polls, minimum=1),
        request_timeout=get_float(
            "SCANRELAY_REQUEST_TIMEOUT", base_dir, default=defaults.request_timeout, minimum=0.1
        ),
        max_attempts=get_int(
            "SCANRELAY_MAX_ATTEMPTS", base_dir, default=defaults.max_attempts, minimum=1
        ),
        idle_interval=get_float(
            "SCANRELAY_IDLE_INTERVAL", base_dir, default=defaults.idle_interval
        ),
        verbose=get_bool("SCANRELAY_VERBOSE", base_dir, default=defaults.verbose),
    )
