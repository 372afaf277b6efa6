"""Contract the orchestrator depends on for remote task control."""

from abc import ABC, abstractmethod
from typing import Any

from .models import RemoteAck, RemoteStatus, ScanResult


class RemoteScanClient(ABC):
    """Control-plane calls of a task-oriented remote scanning service.

    Implementations raise ``TransportError`` when the service cannot be
    reached and ``ApplicationError`` when it explicitly reports a failure.
    """

    @abstractmethod
    async def create_task(self) -> str:
        """Create a remote task and return its id."""

    @abstractmethod
    async def set_options(self, task_id: str, options: dict[str, Any]) -> RemoteAck:
        """Apply a flat option map to a task."""

    @abstractmethod
    async def start(self, task_id: str) -> RemoteAck:
        """Start scanning with the options already set."""

    @abstractmethod
    async def poll_status(self, task_id: str) -> RemoteStatus:
        """Return the current task status."""

    @abstractmethod
    async def fetch_result(self, task_id: str) -> ScanResult:
        """Return the findings of a terminated task."""

    @abstractmethod
    async def fetch_log(self, task_id: str) -> list[str]:
        """Return the task log as ordered lines."""

    @abstractmethod
    async def stop(self, task_id: str) -> None:
        """Ask the task to stop."""

    @abstractmethod
    async def kill(self, task_id: str) -> None:
        """Kill the task's scanning process."""

    @abstractmethod
    async def delete_task(self, task_id: str) -> None:
        """Remove the task from the remote service."""
