"""JobTracker backed by the JobStore."""

from scanrelay.modules.orchestrator import JobTracker, ScanJob


class StoreJobTracker(JobTracker):
    """Write orchestrator state into the job's own store record."""

    def __init__(self, store):
        self.store = store

    async def record_task_id(self, job: ScanJob) -> None:
        self.store.save_task_id(job.job_id, job.task_id)

    async def publish(self, job: ScanJob) -> None:
        self.store.publish_state(job)

    async def cancel_requested(self, job: ScanJob) -> bool:
        return self.store.is_cancel_requested(job.job_id)
