"""Scan job orchestration: lifecycle state machine, polling and cleanup."""

from .base import JobTracker, MemoryJobTracker
from .events import EventListener, ScanEvent, log_event
from .models import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    JobStatus,
    ScanJob,
    ScanOutcome,
)
from .orchestrator import (
    DEFAULT_MAX_POLLS,
    DEFAULT_POLL_INTERVAL,
    ScanOrchestrator,
    running_progress,
)

__all__ = [
    "ACTIVE_STATUSES",
    "DEFAULT_MAX_POLLS",
    "DEFAULT_POLL_INTERVAL",
    "EventListener",
    "JobStatus",
    "JobTracker",
    "MemoryJobTracker",
    "ScanEvent",
    "ScanJob",
    "ScanOrchestrator",
    "ScanOutcome",
    "TERMINAL_STATUSES",
    "log_event",
    "running_progress",
]
