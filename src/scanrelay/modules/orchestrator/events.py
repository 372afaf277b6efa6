"""Events emitted by the orchestrator for logging and progress display."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from .models import JobStatus

logger = logging.getLogger(__name__)

TASK_CREATED = "task_created"
STATUS_CHANGED = "status_changed"
PROGRESS = "progress"
COMPLETED = "completed"
CANCELLED = "cancelled"
FAILED = "failed"
CLEANUP_FAILED = "cleanup_failed"


@dataclass
class ScanEvent:
    """A single observable step in a job's lifecycle."""

    kind: str
    job_id: str
    status: JobStatus
    progress: float
    task_id: str | None = None
    message: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


EventListener = Callable[[ScanEvent], None]


def log_event(event: ScanEvent) -> None:
    """Default listener that writes events to the module logger."""
    if event.kind in (FAILED, CLEANUP_FAILED):
        level = logging.WARNING
    elif event.kind == PROGRESS:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logger.log(
        level,
        "[job_id=%s task_id=%s] %s status=%s progress=%.1f %s",
        event.job_id,
        event.task_id or "-",
        event.kind,
        event.status.value,
        event.progress,
        event.message,
    )
