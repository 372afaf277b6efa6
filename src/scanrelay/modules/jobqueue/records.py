"""Conversions between database records and orchestration models."""

import json
from typing import Any

from scanrelay.db.models import ScanJobRecord
from scanrelay.errors import ErrorInfo
from scanrelay.modules.options import ScanConfiguration
from scanrelay.modules.orchestrator import JobStatus, ScanJob
from scanrelay.modules.sqlmapapi import ScanResult


def dumps(value: Any) -> str:
    return json.dumps(value, default=str)


def loads(raw: str | None, default: Any = None) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return default


def record_error(record: ScanJobRecord) -> ErrorInfo | None:
    payload = loads(record.error)
    if not isinstance(payload, dict):
        return None
    return ErrorInfo(
        kind=str(payload.get("kind", "error")),
        message=str(payload.get("message", "")),
        retryable=bool(payload.get("retryable", False)),
    )


def record_result(record: ScanJobRecord) -> ScanResult | None:
    payload = loads(record.result)
    if not isinstance(payload, dict):
        return None
    return ScanResult.from_dict(payload)


def record_to_job(record: ScanJobRecord) -> ScanJob:
    """Build the in-memory job a worker hands to the orchestrator."""
    return ScanJob(
        job_id=record.job_id,
        config=ScanConfiguration.from_dict(loads(record.config, {})),
        task_id=record.task_id,
        status=JobStatus(record.status),
        progress=record.progress or 0.0,
        result=record_result(record),
        error=record_error(record),
        metadata=loads(record.job_metadata, {}),
        attempt=record.attempt or 1,
        created_at=record.created_at,
        started_at=record.started_at,
        finished_at=record.finished_at,
    )


def record_summary(record: ScanJobRecord) -> dict[str, Any]:
    """Compact listing entry for a job."""
    status = JobStatus(record.status)
    return {
        "id": record.job_id,
        "target": record.target,
        "status": status.value,
        "state": status.queue_state,
        "progress": record.progress or 0.0,
        "task_id": record.task_id,
        "attempt": record.attempt or 0,
        "priority": record.priority,
        "created_at": str(record.created_at) if record.created_at else None,
        "started_at": str(record.started_at) if record.started_at else None,
        "finished_at": str(record.finished_at) if record.finished_at else None,
    }
