"""Local job store, worker pool and query surface."""

from .manager import JobStore
from .pool import ScanWorkerPool
from .query_mixin import QUEUE_STATE_NAMES, statuses_for_state
from .service import NOT_FOUND, JobQueryService, JobView
from .tracker import StoreJobTracker

__all__ = [
    "JobQueryService",
    "JobStore",
    "JobView",
    "NOT_FOUND",
    "QUEUE_STATE_NAMES",
    "ScanWorkerPool",
    "StoreJobTracker",
    "statuses_for_state",
]
