"""Database initialization for ScanRelay."""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from scanrelay.db.models import Base


def create_db_engine(db_path: Path) -> Engine:
    """Return an engine for the SQLite job database."""
    return create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False, "timeout": 30},
    )


def init_db(db_path: Path) -> None:
    """Initialize the SQLite database with all tables."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    Base.metadata.create_all(engine)
    engine.dispose()
