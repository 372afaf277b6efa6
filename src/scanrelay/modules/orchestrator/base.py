"""The orchestrator's view of the job record it owns."""

import asyncio
from abc import ABC, abstractmethod

from .models import ScanJob


class JobTracker(ABC):
    """Persists job state changes and answers cancellation checks."""

    @abstractmethod
    async def record_task_id(self, job: ScanJob) -> None:
        """Persist ``job.task_id`` right after the remote task was created."""

    @abstractmethod
    async def publish(self, job: ScanJob) -> None:
        """Persist the job's current status and progress."""

    @abstractmethod
    async def cancel_requested(self, job: ScanJob) -> bool:
        """Return True when the caller asked for this job to be cancelled."""


class MemoryJobTracker(JobTracker):
    """Tracker keeping state in memory; used when no job store is involved."""

    def __init__(self, cancel_event: asyncio.Event | None = None):
        self.cancel_event = cancel_event or asyncio.Event()
        self.task_ids: list[str] = []
        self.published: list[tuple[str, float]] = []

    def cancel(self) -> None:
        self.cancel_event.set()

    async def record_task_id(self, job: ScanJob) -> None:
        if job.task_id:
            self.task_ids.append(job.task_id)

    async def publish(self, job: ScanJob) -> None:
        self.published.append((job.status.value, job.progress))

    async def cancel_requested(self, job: ScanJob) -> bool:
        return self.cancel_event.is_set()

    @property
    def progress_history(self) -> list[float]:
        return [progress for _, progress in self.published]
