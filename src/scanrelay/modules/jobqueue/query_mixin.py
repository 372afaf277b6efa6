"""Read-side queries for JobStore."""

from typing import Any

from sqlalchemy import func

from scanrelay.db.models import ScanJobRecord
from scanrelay.errors import NotFoundError
from scanrelay.modules.orchestrator import JobStatus, ScanJob

from .records import record_summary, record_to_job

QUEUE_STATE_NAMES = ("waiting", "active", "completed", "failed", "cancelled")


def statuses_for_state(state: str) -> list[str]:
    """Map a queue state or job status name to job status values."""
    name = state.strip().lower()
    if name in {status.value for status in JobStatus}:
        return [name]
    matches = [status.value for status in JobStatus if status.queue_state == name]
    if not matches:
        valid = ", ".join(QUEUE_STATE_NAMES)
        raise ValueError(f"Unknown job state: {state}. Valid states: {valid}")
    return matches


class QueryMixin:
    """Provide lookups, listings and queue statistics."""

    def find_record(self, job_id: str) -> ScanJobRecord | None:
        self.session.expire_all()
        return self.session.query(ScanJobRecord).filter_by(job_id=job_id).first()

    def get_record(self, job_id: str) -> ScanJobRecord:
        record = self.find_record(job_id)
        if record is None:
            raise NotFoundError(job_id)
        return record

    def get_job(self, job_id: str) -> ScanJob:
        return record_to_job(self.get_record(job_id))

    def list_jobs(self, state: str | None = None, limit: int = 10) -> list[dict[str, Any]]:
        """Return recent jobs, newest first, optionally filtered by state."""
        self.session.expire_all()
        query = self.session.query(ScanJobRecord)
        if state:
            query = query.filter(ScanJobRecord.status.in_(statuses_for_state(state)))
        records = (
            query.order_by(ScanJobRecord.created_at.desc(), ScanJobRecord.id.desc())
            .limit(max(1, limit))
            .all()
        )
        return [record_summary(record) for record in records]

    def stats(self) -> dict[str, int]:
        """Count jobs per queue state."""
        self.session.expire_all()
        rows = (
            self.session.query(ScanJobRecord.status, func.count(ScanJobRecord.id))
            .group_by(ScanJobRecord.status)
            .all()
        )
        counts = dict.fromkeys(QUEUE_STATE_NAMES, 0)
        for status, count in rows:
            counts[JobStatus(status).queue_state] += count
        counts["total"] = sum(counts.values())
        return counts
