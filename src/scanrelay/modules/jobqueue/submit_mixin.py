"""Job submission and cancellation requests for JobStore."""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from scanrelay.db.models import ScanJobRecord
from scanrelay.modules.options import ScanConfiguration
from scanrelay.modules.orchestrator import JobStatus

from .records import dumps

logger = logging.getLogger(__name__)


class SubmitMixin:
    """Provide enqueue and cancel operations."""

    def submit(
        self,
        config: ScanConfiguration,
        metadata: dict[str, Any] | None = None,
        priority: int = 1,
        max_attempts: int = 1,
    ) -> str:
        """Queue a scan and return its job id."""
        job_id = str(uuid.uuid4())
        job_metadata = {
            "request_id": f"req_{int(datetime.now(UTC).timestamp() * 1000)}",
            "timestamp": datetime.now(UTC).isoformat(),
        }
        job_metadata.update(metadata or {})
        record = ScanJobRecord(
            job_id=job_id,
            target=config.target,
            config=dumps(config.to_dict()),
            job_metadata=dumps(job_metadata),
            status=JobStatus.QUEUED.value,
            progress=0.0,
            priority=priority,
            attempt=0,
            max_attempts=max(1, max_attempts),
            cancel_requested=False,
        )
        self.session.add(record)
        self.session.commit()
        logger.info("Queued scan job %s for target: %s", job_id, config.target)
        return job_id

    def request_cancel(self, job_id: str) -> JobStatus:
        """Flag a job for cancellation and return its resulting status.

        Queued jobs are cancelled immediately. Active jobs keep running until
        their worker observes the flag at the next poll tick.
        """
        record = self.get_record(job_id)
        status = JobStatus(record.status)
        if status.is_terminal:
            return status

        record.cancel_requested = True
        if status == JobStatus.QUEUED:
            record.status = JobStatus.CANCELLED.value
            record.finished_at = datetime.now(UTC)
            status = JobStatus.CANCELLED
        self.session.commit()
        logger.info("Cancellation requested for scan job %s (%s)", job_id, status.value)
        return status
