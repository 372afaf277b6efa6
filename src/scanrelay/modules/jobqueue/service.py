"""Queue-facing query surface: submit, status, result, cancel, list, stats."""

import logging
from dataclasses import dataclass
from typing import Any

from scanrelay.errors import NotFoundError
from scanrelay.modules.options import ScanConfiguration
from scanrelay.modules.orchestrator import JobStatus

from .manager import JobStore
from .records import record_error, record_result

logger = logging.getLogger(__name__)

NOT_FOUND = "not_found"


@dataclass
class JobView:
    """What a caller sees about one job."""

    job_id: str
    status: str
    progress: float = 0.0
    task_id: str | None = None
    message: str | None = None
    data: dict[str, Any] | None = None
    error: dict[str, Any] | str | None = None

    @property
    def found(self) -> bool:
        return self.status != NOT_FOUND

    def to_dict(self) -> dict[str, Any]:
        payload = {
            "job_id": self.job_id,
            "status": self.status,
            "progress": self.progress,
            "task_id": self.task_id,
            "message": self.message,
            "data": self.data,
            "error": self.error,
        }
        return {key: value for key, value in payload.items() if value is not None}


def not_found_view(job_id: str) -> JobView:
    return JobView(job_id=job_id, status=NOT_FOUND, error="Job not found")


class JobQueryService:
    """Read-only job views plus submit and cancel, never raising for unknown ids."""

    def __init__(self, store: JobStore):
        self.store = store

    def submit(
        self,
        config: ScanConfiguration,
        metadata: dict[str, Any] | None = None,
        priority: int = 1,
        max_attempts: int = 1,
    ) -> JobView:
        job_id = self.store.submit(
            config, metadata=metadata, priority=priority, max_attempts=max_attempts
        )
        return JobView(
            job_id=job_id,
            status=JobStatus.QUEUED.queue_state,
            message="Scan task queued successfully",
        )

    def get_status(self, job_id: str) -> JobView:
        try:
            record = self.store.get_record(job_id)
        except NotFoundError:
            return not_found_view(job_id)
        status = JobStatus(record.status)
        error = record_error(record)
        result = record_result(record)
        return JobView(
            job_id=job_id,
            status=status.queue_state,
            progress=record.progress or 0.0,
            task_id=record.task_id,
            data=result.to_dict() if result else None,
            error=error.to_dict() if error else None,
        )

    def get_result(self, job_id: str) -> JobView:
        """Return the result only once the job completed."""
        try:
            record = self.store.get_record(job_id)
        except NotFoundError:
            return not_found_view(job_id)
        status = JobStatus(record.status)
        if status != JobStatus.TERMINATED:
            error = record_error(record)
            return JobView(
                job_id=job_id,
                status=status.queue_state,
                progress=record.progress or 0.0,
                message="Scan is not completed yet",
                error=error.to_dict() if error else None,
            )
        result = record_result(record)
        return JobView(
            job_id=job_id,
            status=status.queue_state,
            progress=record.progress or 0.0,
            task_id=record.task_id,
            data=result.to_dict() if result else None,
        )

    def cancel(self, job_id: str) -> JobView:
        try:
            status = self.store.request_cancel(job_id)
        except NotFoundError:
            return not_found_view(job_id)
        if status == JobStatus.CANCELLED:
            message = "Scan task cancelled successfully"
        elif status.is_terminal:
            message = f"Scan already {status.queue_state}"
        else:
            message = "Cancellation requested; the scan stops at its next status check"
        return JobView(job_id=job_id, status=status.queue_state, message=message)

    def list_jobs(self, state: str | None = None, limit: int = 10) -> list[dict[str, Any]]:
        return self.store.list_jobs(state=state, limit=limit)

    def stats(self) -> dict[str, int]:
        return self.store.stats()
