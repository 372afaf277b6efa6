"""Data models for the remote scanning service."""

from dataclasses import dataclass, field
from typing import Any

RUNNING = "running"
TERMINATED = "terminated"


@dataclass
class RemoteAck:
    """Acknowledgement returned by option and start calls."""

    success: bool
    message: str = ""


@dataclass
class RemoteStatus:
    """One status poll. The service only distinguishes running and terminated."""

    status: str
    return_code: int | None = None

    @property
    def is_running(self) -> bool:
        return self.status == RUNNING

    @property
    def is_terminated(self) -> bool:
        return self.status == TERMINATED


@dataclass
class ScanResult:
    """Findings and log collected from a terminated task."""

    data: Any = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    log: list[str] = field(default_factory=list)

    @property
    def has_findings(self) -> bool:
        return bool(self.data)

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "errors": list(self.errors), "log": list(self.log)}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ScanResult":
        return cls(
            data=payload.get("data", []),
            errors=list(payload.get("errors") or []),
            log=list(payload.get("log") or []),
        )
