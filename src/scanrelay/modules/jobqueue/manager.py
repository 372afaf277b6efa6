"""Main JobStore class."""

from pathlib import Path

from sqlalchemy.orm import sessionmaker

from scanrelay.db.init import create_db_engine, init_db

from .lifecycle_mixin import LifecycleMixin
from .query_mixin import QueryMixin
from .submit_mixin import SubmitMixin


class JobStore(SubmitMixin, LifecycleMixin, QueryMixin):
    """SQLite-backed job records shared by submitters, workers and queries."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        init_db(self.db_path)
        self.engine = create_db_engine(db_path)
        session_factory = sessionmaker(bind=self.engine)
        self.session = session_factory()

    def close(self) -> None:
        self.session.close()
        self.engine.dispose()

    def rollback(self) -> None:
        """Discard a transaction left broken by a failed write."""
        self.session.rollback()
