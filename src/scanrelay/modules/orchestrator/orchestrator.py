"""Drive one scan job through the remote task lifecycle."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime

from scanrelay.errors import (
    CleanupError,
    ConfigurationError,
    ErrorInfo,
    PollTimeoutError,
    StartError,
)
from scanrelay.modules.options import build_option_payload
from scanrelay.modules.sqlmapapi import RemoteScanClient

from . import events
from .base import JobTracker, MemoryJobTracker
from .events import EventListener, ScanEvent, log_event
from .models import JobStatus, ScanJob, ScanOutcome

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_MAX_POLLS = 1000

PROGRESS_TASK_CREATED = 10.0
PROGRESS_CONFIGURED = 20.0
PROGRESS_STARTED = 30.0
PROGRESS_RUNNING_CAP = 95.0
PROGRESS_PER_TICK = 0.1
PROGRESS_DONE = 100.0

Sleeper = Callable[[float], Awaitable[object]]


def running_progress(tick: int) -> float:
    """Heuristic progress for a running scan at a given poll tick."""
    return min(PROGRESS_STARTED + tick * PROGRESS_PER_TICK, PROGRESS_RUNNING_CAP)


class ScanOrchestrator:
    """State machine owning a job from dequeue to a terminal state.

    Queued -> Configuring -> Starting -> Running -> Terminated | Failed | Cancelled.
    Failures are re-raised after best-effort cleanup; retries belong to the
    queue layer and start a fresh attempt.
    """

    def __init__(
        self,
        client: RemoteScanClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_polls: int = DEFAULT_MAX_POLLS,
        listeners: Iterable[EventListener] | None = None,
        sleep: Sleeper | None = None,
    ):
        if max_polls < 1:
            raise ValueError("max_polls must be at least 1")
        self.client = client
        self.poll_interval = max(0.0, poll_interval)
        self.max_polls = max_polls
        self._listeners: list[EventListener] = list(listeners) if listeners else [log_event]
        self._sleep = sleep or asyncio.sleep

    @property
    def timeout_seconds(self) -> float:
        """Hard ceiling of one attempt's monitoring phase."""
        return self.poll_interval * self.max_polls

    def add_listener(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    async def run(self, job: ScanJob, tracker: JobTracker | None = None) -> ScanOutcome:
        """Run one attempt of ``job`` and return its terminal outcome."""
        tracker = tracker or MemoryJobTracker()
        if job.status.is_terminal:
            raise ValueError(f"Job {job.job_id} is already {job.status.value}")
        job.started_at = job.started_at or datetime.now(UTC)
        logger.info("Processing scan job %s for target: %s", job.job_id, job.config.target)

        if await tracker.cancel_requested(job):
            logger.info("Job %s was cancelled before it started", job.job_id)
            return await self._cancel(job, tracker)

        try:
            await self._acquire_task(job, tracker)
            await self._configure(job, tracker)
            await self._start(job, tracker)
            outcome = await self._monitor(job, tracker)
        except Exception as exc:
            await self._fail(job, exc)
            raise

        if outcome is None:
            return await self._cancel(job, tracker)
        return outcome

    async def _acquire_task(self, job: ScanJob, tracker: JobTracker) -> None:
        await self._update(job, tracker, status=JobStatus.CONFIGURING)
        if job.task_id:
            logger.info("Job %s resumes remote task %s", job.job_id, job.task_id)
            return
        job.task_id = await self.client.create_task()
        await tracker.record_task_id(job)
        self._emit(events.TASK_CREATED, job, f"created remote task {job.task_id}")
        await self._update(job, tracker, progress=PROGRESS_TASK_CREATED)

    async def _configure(self, job: ScanJob, tracker: JobTracker) -> None:
        options = build_option_payload(job.config)
        ack = await self.client.set_options(job.task_id, options)
        if not ack.success:
            raise ConfigurationError(
                f"Failed to set options: {ack.message or 'Unknown error'}",
                task_id=job.task_id,
            )
        await self._update(job, tracker, progress=PROGRESS_CONFIGURED)

    async def _start(self, job: ScanJob, tracker: JobTracker) -> None:
        await self._update(job, tracker, status=JobStatus.STARTING)
        ack = await self.client.start(job.task_id)
        if not ack.success:
            raise StartError(
                f"Failed to start scan: {ack.message or 'Unknown error'}",
                task_id=job.task_id,
            )
        await self._update(job, tracker, status=JobStatus.RUNNING, progress=PROGRESS_STARTED)

    async def _monitor(self, job: ScanJob, tracker: JobTracker) -> ScanOutcome | None:
        """Poll until terminated. Returns None when cancellation was observed."""
        task_id = job.task_id
        for tick in range(self.max_polls):
            if await tracker.cancel_requested(job):
                logger.info("Cancellation observed for job %s at tick %d", job.job_id, tick)
                return None

            status = await self.client.poll_status(task_id)
            if status.is_terminated:
                return await self._collect(job, tracker)
            if status.is_running:
                await self._update(job, tracker, progress=running_progress(tick))
            else:
                logger.debug("Task %s reported status %r", task_id, status.status)

            await self._sleep(self.poll_interval)

        raise PollTimeoutError(
            f"Scan {task_id} exceeded maximum monitoring time "
            f"({self.max_polls} polls every {self.poll_interval:g}s)"
        )

    async def _collect(self, job: ScanJob, tracker: JobTracker) -> ScanOutcome:
        result = await self.client.fetch_result(job.task_id)
        result.log = await self.client.fetch_log(job.task_id)
        job.result = result
        job.finished_at = datetime.now(UTC)
        await self._update(job, tracker, status=JobStatus.TERMINATED, progress=PROGRESS_DONE)
        self._emit(events.COMPLETED, job, f"{len(result.log)} log lines")
        logger.info("Scan completed for task %s", job.task_id)
        return self._outcome(job)

    async def _cancel(self, job: ScanJob, tracker: JobTracker) -> ScanOutcome:
        await self.cleanup(job)
        job.finished_at = datetime.now(UTC)
        await self._update(job, tracker, status=JobStatus.CANCELLED)
        self._emit(events.CANCELLED, job, "cancelled by request")
        return self._outcome(job)

    async def _fail(self, job: ScanJob, exc: Exception) -> None:
        logger.error("Scan job %s failed: %s", job.job_id, exc)
        job.status = JobStatus.FAILED
        job.error = ErrorInfo.from_exception(exc)
        job.finished_at = datetime.now(UTC)
        self._emit(events.FAILED, job, str(exc))
        if job.task_id:
            await self.cleanup(job)

    async def cleanup(self, job: ScanJob) -> list[CleanupError]:
        """Stop, kill and delete the remote task, collecting failures."""
        if not job.task_id:
            return []
        failures: list[CleanupError] = []
        steps = (
            ("stop", self.client.stop),
            ("kill", self.client.kill),
            ("delete", self.client.delete_task),
        )
        for step, call in steps:
            try:
                await call(job.task_id)
            except Exception as exc:
                failure = CleanupError(job.task_id, step, exc)
                logger.warning("Failed to cleanup task %s: %s", job.task_id, failure)
                self._emit(events.CLEANUP_FAILED, job, str(failure))
                failures.append(failure)
        return failures

    async def _update(
        self,
        job: ScanJob,
        tracker: JobTracker,
        status: JobStatus | None = None,
        progress: float | None = None,
    ) -> None:
        """Apply a status change and/or a progress increase, then publish once."""
        changed_status = status is not None and status != job.status
        raised_progress = progress is not None and progress > job.progress
        if not (changed_status or raised_progress):
            return
        if changed_status:
            job.status = status
        if raised_progress:
            job.progress = progress
        await tracker.publish(job)
        self._emit(events.STATUS_CHANGED if changed_status else events.PROGRESS, job)

    def _outcome(self, job: ScanJob) -> ScanOutcome:
        return ScanOutcome(
            job_id=job.job_id,
            status=job.status,
            progress=job.progress,
            task_id=job.task_id,
            result=job.result,
            error=job.error,
            metadata=dict(job.metadata),
        )

    def _emit(self, kind: str, job: ScanJob, message: str = "") -> None:
        event = ScanEvent(
            kind=kind,
            job_id=job.job_id,
            status=job.status,
            progress=job.progress,
            task_id=job.task_id,
            message=message,
        )
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.warning("Event listener failed for job %s", job.job_id, exc_info=True)
