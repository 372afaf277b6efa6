"""Job, outcome and status models for scan orchestration."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from scanrelay.errors import ErrorInfo
from scanrelay.modules.options import ScanConfiguration
from scanrelay.modules.sqlmapapi import ScanResult


def _utc_now() -> datetime:
    return datetime.now(UTC)


class JobStatus(StrEnum):
    """Lifecycle states of a scan job attempt."""

    QUEUED = "queued"
    CONFIGURING = "configuring"
    STARTING = "starting"
    RUNNING = "running"
    TERMINATED = "terminated"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def queue_state(self) -> str:
        """Name of this status as seen through the queue-facing surface."""
        return QUEUE_STATES[self]


TERMINAL_STATUSES = frozenset({JobStatus.TERMINATED, JobStatus.FAILED, JobStatus.CANCELLED})
ACTIVE_STATUSES = frozenset({JobStatus.CONFIGURING, JobStatus.STARTING, JobStatus.RUNNING})

QUEUE_STATES = {
    JobStatus.QUEUED: "waiting",
    JobStatus.CONFIGURING: "active",
    JobStatus.STARTING: "active",
    JobStatus.RUNNING: "active",
    JobStatus.TERMINATED: "completed",
    JobStatus.FAILED: "failed",
    JobStatus.CANCELLED: "cancelled",
}


@dataclass
class ScanJob:
    """One scan request as owned by a worker for a single attempt."""

    job_id: str
    config: ScanConfiguration
    task_id: str | None = None
    status: JobStatus = JobStatus.QUEUED
    progress: float = 0.0
    result: ScanResult | None = None
    error: ErrorInfo | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    attempt: int = 1
    created_at: datetime = field(default_factory=_utc_now)
    started_at: datetime | None = None
    finished_at: datetime | None = None


@dataclass
class ScanOutcome:
    """Value returned by the orchestrator when a job reaches a terminal state."""

    job_id: str
    status: JobStatus
    progress: float
    task_id: str | None = None
    result: ScanResult | None = None
    error: ErrorInfo | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": self.job_id,
            "task_id": self.task_id,
            "status": self.status.value,
            "progress": self.progress,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error.to_dict() if self.error else None,
            "metadata": dict(self.metadata),
        }
