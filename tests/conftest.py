"""Test configuration and fixtures for ScanRelay."""

import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from scanrelay.errors import TransportError
from scanrelay.modules.jobqueue import JobStore
from scanrelay.modules.options import ScanConfiguration
from scanrelay.modules.orchestrator import ScanJob
from scanrelay.modules.sqlmapapi import RemoteAck, RemoteScanClient, RemoteStatus, ScanResult


class FakeRemoteScanClient(RemoteScanClient):
    """Scripted remote service recording every call it receives."""

    def __init__(
        self,
        statuses: list[str] | None = None,
        default_status: str = "terminated",
        task_ids: list[str] | None = None,
    ):
        self.calls: list[tuple[str, ...]] = []
        self.statuses = list(statuses or [])
        self.default_status = default_status
        self.task_ids = list(task_ids or ["task-1"])
        self.options: dict[str, Any] | None = None
        self.result = ScanResult(data=[{"type": 1, "value": "finding"}], errors=[])
        self.log = ["[INFO] testing connection", "[INFO] done"]
        self.option_ack = RemoteAck(success=True, message="ok")
        self.start_ack = RemoteAck(success=True, message="started")
        self.fail_on: dict[str, Exception] = {}

    def _record(self, name: str, *args: str) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise self.fail_on[name]

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def create_task(self) -> str:
        self._record("create_task")
        return self.task_ids.pop(0) if len(self.task_ids) > 1 else self.task_ids[0]

    async def set_options(self, task_id: str, options: dict[str, Any]) -> RemoteAck:
        self._record("set_options", task_id)
        self.options = dict(options)
        return self.option_ack

    async def start(self, task_id: str) -> RemoteAck:
        self._record("start", task_id)
        return self.start_ack

    async def poll_status(self, task_id: str) -> RemoteStatus:
        self._record("poll_status", task_id)
        status = self.statuses.pop(0) if self.statuses else self.default_status
        return RemoteStatus(status=status)

    async def fetch_result(self, task_id: str) -> ScanResult:
        self._record("fetch_result", task_id)
        return ScanResult(data=self.result.data, errors=list(self.result.errors))

    async def fetch_log(self, task_id: str) -> list[str]:
        self._record("fetch_log", task_id)
        return list(self.log)

    async def stop(self, task_id: str) -> None:
        self._record("stop", task_id)

    async def kill(self, task_id: str) -> None:
        self._record("kill", task_id)

    async def delete_task(self, task_id: str) -> None:
        self._record("delete_task", task_id)


async def _no_sleep(_seconds: float) -> None:
    """Sleeper that returns immediately."""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    """Return the job database path inside the temp directory."""
    return temp_dir / ".scanrelay" / "scanrelay.db"


@pytest.fixture
def store(db_path: Path) -> Generator[JobStore, None, None]:
    """Create a job store with an initialized database."""
    job_store = JobStore(db_path)
    yield job_store
    job_store.close()


@pytest.fixture
def config() -> ScanConfiguration:
    """A minimal scan configuration."""
    return ScanConfiguration(target="http://testphp.vulnweb.com/artists.php?artist=1")


@pytest.fixture
def job(config: ScanConfiguration) -> ScanJob:
    """A fresh in-memory job."""
    return ScanJob(job_id="job-1", config=config)


@pytest.fixture
def no_sleep():
    """Sleeper for orchestrators so polling loops run instantly."""
    return _no_sleep


@pytest.fixture
def make_client():
    """Factory for scripted remote clients."""
    return FakeRemoteScanClient


@pytest.fixture
def fake_client() -> FakeRemoteScanClient:
    """Remote client that terminates on the first poll."""
    return FakeRemoteScanClient()


@pytest.fixture
def transport_error() -> TransportError:
    return TransportError("connection refused")
