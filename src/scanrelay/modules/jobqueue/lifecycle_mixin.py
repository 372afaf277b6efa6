"""Worker-side state transitions for JobStore."""

import logging
from datetime import UTC, datetime

from scanrelay.db.models import ScanJobRecord
from scanrelay.errors import ErrorInfo
from scanrelay.modules.orchestrator import ACTIVE_STATUSES, JobStatus, ScanJob, ScanOutcome

from .records import dumps, record_to_job

logger = logging.getLogger(__name__)

_CLAIM_BATCH = 5


class LifecycleMixin:
    """Provide claim, progress and outcome recording for the owning worker."""

    def claim_next(self) -> ScanJob | None:
        """Take the next queued job, lowest priority number first, then oldest."""
        candidates = (
            self.session.query(ScanJobRecord.job_id)
            .filter_by(status=JobStatus.QUEUED.value)
            .order_by(
                ScanJobRecord.priority.asc(),
                ScanJobRecord.created_at.asc(),
                ScanJobRecord.id.asc(),
            )
            .limit(_CLAIM_BATCH)
            .all()
        )
        for (job_id,) in candidates:
            claimed = (
                self.session.query(ScanJobRecord)
                .filter_by(job_id=job_id, status=JobStatus.QUEUED.value)
                .update(
                    {
                        ScanJobRecord.status: JobStatus.CONFIGURING.value,
                        ScanJobRecord.started_at: datetime.now(UTC),
                        ScanJobRecord.attempt: ScanJobRecord.attempt + 1,
                    },
                    synchronize_session=False,
                )
            )
            self.session.commit()
            if claimed:
                return record_to_job(self.get_record(job_id))
        return None

    def save_task_id(self, job_id: str, task_id: str) -> None:
        record = self.get_record(job_id)
        record.task_id = task_id
        self.session.commit()

    def publish_state(self, job: ScanJob) -> None:
        """Persist status and progress reported by the orchestrator.

        Terminal states are written only by ``complete`` and ``fail``, together
        with the result or error, so a record never ends up terminal without one.
        """
        if job.status.is_terminal:
            return
        record = self.get_record(job.job_id)
        record.status = job.status.value
        record.progress = max(record.progress or 0.0, job.progress)
        self.session.commit()

    def is_cancel_requested(self, job_id: str) -> bool:
        self.session.expire_all()
        flag = (
            self.session.query(ScanJobRecord.cancel_requested).filter_by(job_id=job_id).scalar()
        )
        return bool(flag)

    def complete(self, outcome: ScanOutcome) -> None:
        """Record a Terminated or Cancelled outcome."""
        record = self.get_record(outcome.job_id)
        record.status = outcome.status.value
        record.progress = outcome.progress
        record.task_id = outcome.task_id
        record.result = dumps(outcome.result.to_dict()) if outcome.result else None
        record.error = None
        record.finished_at = datetime.now(UTC)
        self.session.commit()

    def fail(self, job_id: str, error: ErrorInfo) -> None:
        record = self.get_record(job_id)
        record.status = JobStatus.FAILED.value
        record.error = dumps(error.to_dict())
        record.finished_at = datetime.now(UTC)
        self.session.commit()

    def requeue(self, job_id: str, error: ErrorInfo | None = None) -> None:
        """Queue a fresh attempt. The previous remote task is not reused."""
        record = self.get_record(job_id)
        record.status = JobStatus.QUEUED.value
        record.task_id = None
        record.progress = 0.0
        record.started_at = None
        record.finished_at = None
        if error is not None:
            record.error = dumps(error.to_dict())
        self.session.commit()
        logger.info("Requeued scan job %s for attempt %d", job_id, (record.attempt or 0) + 1)

    def can_retry(self, job_id: str) -> bool:
        record = self.get_record(job_id)
        return (record.attempt or 0) < (record.max_attempts or 1) and not record.cancel_requested

    def recover_stalled(self) -> list[str]:
        """Put active jobs left behind by a dead worker back in the queue.

        The remote task id is kept so the redelivered job resumes that task.
        Assumes a single worker process per database.
        """
        stalled = (
            self.session.query(ScanJobRecord)
            .filter(ScanJobRecord.status.in_([status.value for status in ACTIVE_STATUSES]))
            .all()
        )
        recovered: list[str] = []
        for record in stalled:
            logger.warning("Scan job %s stalled in %s, requeueing", record.job_id, record.status)
            record.status = JobStatus.QUEUED.value
            record.started_at = None
            recovered.append(record.job_id)
        if recovered:
            self.session.commit()
        return recovered
