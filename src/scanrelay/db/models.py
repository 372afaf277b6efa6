"""Database models for ScanRelay using SQLAlchemy."""

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base


def _utc_now() -> datetime:
    return datetime.now(UTC)


Base = declarative_base()


class ScanJobRecord(Base):
    """Queue-side record of one scan job."""

    __tablename__ = "scan_jobs"

    id = Column(Integer, primary_key=True)
    job_id = Column(String, nullable=False, unique=True, index=True)

    target = Column(String, nullable=False)
    config = Column(Text, nullable=False)  # JSON of ScanConfiguration.to_dict()
    job_metadata = Column("metadata", Text, default="{}")

    status = Column(String, default="queued", index=True)
    progress = Column(Float, default=0.0)
    task_id = Column(String, nullable=True)
    result = Column(Text, nullable=True)  # JSON of ScanResult.to_dict()
    error = Column(Text, nullable=True)  # JSON of ErrorInfo.to_dict()

    priority = Column(Integer, default=1)
    attempt = Column(Integer, default=0)
    max_attempts = Column(Integer, default=1)
    cancel_requested = Column(Boolean, default=False)

    created_at = Column(DateTime(timezone=True), default=_utc_now)
    started_at = Column(DateTime(timezone=True), nullable=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now)
