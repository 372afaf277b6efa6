"""Bounded asyncio worker pool drawing jobs from the JobStore."""

import asyncio
import logging

from scanrelay.errors import ErrorInfo
from scanrelay.modules.orchestrator import ScanJob, ScanOrchestrator, ScanOutcome

from .manager import JobStore
from .tracker import StoreJobTracker

logger = logging.getLogger(__name__)


class ScanWorkerPool:
    """Run up to ``concurrency`` jobs at once, one job per worker.

    The pool is the queue layer: it records outcomes and decides whether a
    failed attempt is retried.
    """

    def __init__(
        self,
        store: JobStore,
        orchestrator: ScanOrchestrator,
        concurrency: int = 2,
        idle_interval: float = 1.0,
    ):
        self.store = store
        self.orchestrator = orchestrator
        self.concurrency = max(1, concurrency)
        self.idle_interval = max(0.0, idle_interval)
        self.completed = 0
        self.failed = 0
        self.retried = 0
        self._stopping = asyncio.Event()

    def stop(self) -> None:
        """Let workers exit after their current job."""
        self._stopping.set()

    async def run(self, stop_when_idle: bool = False) -> int:
        """Start the workers and wait for them; returns jobs finished."""
        self._stopping.clear()
        recovered = self.store.recover_stalled()
        if recovered:
            logger.warning("Recovered %d stalled job(s)", len(recovered))
        logger.info("Starting %d scan worker(s)", self.concurrency)

        workers = [
            asyncio.create_task(self._worker(index, stop_when_idle), name=f"scan-worker-{index}")
            for index in range(self.concurrency)
        ]
        try:
            results = await asyncio.gather(*workers, return_exceptions=True)
        finally:
            for worker in workers:
                worker.cancel()
        for worker, result in zip(workers, results):
            if isinstance(result, Exception):
                logger.error("%s stopped: %s", worker.get_name(), result)
        return self.completed + self.failed

    async def drain(self) -> int:
        """Process queued jobs until none are left."""
        return await self.run(stop_when_idle=True)

    async def _worker(self, index: int, stop_when_idle: bool) -> None:
        while not self._stopping.is_set():
            try:
                job = self.store.claim_next()
            except Exception as exc:
                logger.error("Worker %d could not claim a job: %s", index, exc)
                self.store.rollback()
                if stop_when_idle:
                    return
                await self._wait_idle()
                continue
            if job is None:
                if stop_when_idle:
                    return
                await self._wait_idle()
                continue
            logger.debug("Worker %d claimed job %s (attempt %d)", index, job.job_id, job.attempt)
            await self.process(job)

    async def _wait_idle(self) -> None:
        try:
            await asyncio.wait_for(self._stopping.wait(), timeout=self.idle_interval)
        except TimeoutError:
            pass

    async def process(self, job: ScanJob) -> ScanOutcome | None:
        """Run one claimed job and record what happened to it.

        A store error while recording is logged and left for stall recovery,
        so the worker keeps going.
        """
        try:
            outcome = await self.orchestrator.run(job, StoreJobTracker(self.store))
        except Exception as exc:
            error = ErrorInfo.from_exception(exc)
            try:
                if error.retryable and self.store.can_retry(job.job_id):
                    logger.warning(
                        "Scan job %s attempt %d failed, retrying: %s", job.job_id, job.attempt, exc
                    )
                    self.store.requeue(job.job_id, error)
                    self.retried += 1
                else:
                    logger.error("Scan job %s failed: %s", job.job_id, exc)
                    self.store.fail(job.job_id, error)
                    self.failed += 1
            except Exception as store_exc:
                logger.error("Could not record failure of scan job %s: %s", job.job_id, store_exc)
                self.store.rollback()
            return None

        try:
            self.store.complete(outcome)
        except Exception as exc:
            logger.error("Could not record outcome of scan job %s: %s", job.job_id, exc)
            self.store.rollback()
            return None
        self.completed += 1
        logger.info("Scan job %s finished: %s", job.job_id, outcome.status.value)
        return outcome
