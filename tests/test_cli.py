"""Tests for CLI commands."""

import json
import re
from pathlib import Path

import pytest
from typer.testing import CliRunner

from scanrelay import cli
from scanrelay.cli import app
from scanrelay.config import ENV_KEYS
from scanrelay.modules.jobqueue import JobStore

runner = CliRunner()
JOB_ID = re.compile(r"Job:\s+([0-9a-f-]{36})")


@pytest.fixture
def workspace(monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> Path:
    """Run commands against a private database, home and cwd."""
    monkeypatch.setattr(Path, "home", lambda: temp_dir)
    monkeypatch.chdir(temp_dir)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SCANRELAY_DB_PATH", str(temp_dir / "jobs.db"))
    monkeypatch.setenv("COLUMNS", "200")
    return temp_dir


@pytest.fixture
def fake_api(monkeypatch: pytest.MonkeyPatch, make_client):
    """Replace the sqlmap client used by the worker command."""
    created = []

    class FakeApi(make_client):
        def __init__(self, base_url: str, timeout: float = 30.0):
            super().__init__()
            self.base_url = base_url
            self.timeout = timeout
            created.append(self)

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

    monkeypatch.setattr(cli, "SqlmapApiClient", FakeApi)
    return created


def submit_job(*args: str) -> str:
    result = runner.invoke(app, ["submit", "http://example.com/?id=1", *args])
    assert result.exit_code == 0, result.output
    match = JOB_ID.search(result.output)
    assert match, result.output
    return match.group(1)


def open_store(workspace: Path) -> JobStore:
    return JobStore(workspace / "jobs.db")


class TestSubmit:
    """Test the submit command."""

    def test_submit_queues_job(self, workspace: Path):
        job_id = submit_job()

        store = open_store(workspace)
        try:
            job = store.get_job(job_id)
        finally:
            store.close()
        assert job.config.target == "http://example.com/?id=1"
        assert job.metadata["source"] == "cli"

    def test_submit_maps_headers_and_options(self, workspace: Path):
        job_id = submit_job(
            "-H",
            "X-A: 1",
            "-H",
            "X-B: 2",
            "--option",
            "level=3",
            "--option",
            "forceSsl=true",
            "--option",
            "tamper=space2comment",
            "--priority",
            "0",
            "--max-attempts",
            "3",
        )

        store = open_store(workspace)
        try:
            job = store.get_job(job_id)
            record = store.get_record(job_id)
        finally:
            store.close()
        assert job.config.headers == ["X-A: 1", "X-B: 2"]
        assert job.config.force_ssl is True
        assert job.config.custom_options == {"level": 3, "tamper": "space2comment"}
        assert record.priority == 0
        assert record.max_attempts == 3

    def test_submit_rejects_malformed_option(self, workspace: Path):
        result = runner.invoke(app, ["submit", "http://example.com/", "--option", "level"])
        assert result.exit_code != 0


class TestQueries:
    """Test status, result, cancel, jobs and stats."""

    def test_status_of_queued_job(self, workspace: Path):
        job_id = submit_job()

        result = runner.invoke(app, ["status", job_id])

        assert result.exit_code == 0
        assert "waiting" in result.output
        assert "0.0%" in result.output

    def test_status_not_found(self, workspace: Path):
        result = runner.invoke(app, ["status", "missing"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_result_json_before_completion(self, workspace: Path):
        job_id = submit_job()

        result = runner.invoke(app, ["result", job_id, "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["status"] == "waiting"
        assert payload["message"] == "Scan is not completed yet"

    def test_cancel_queued_job(self, workspace: Path):
        job_id = submit_job()

        result = runner.invoke(app, ["cancel", job_id])

        assert result.exit_code == 0
        assert "cancelled successfully" in result.output

    def test_jobs_and_stats(self, workspace: Path):
        submit_job()
        submit_job()

        listing = runner.invoke(app, ["jobs", "--status", "waiting"])
        stats = runner.invoke(app, ["stats"])

        assert listing.exit_code == 0
        assert "Scan Jobs" in listing.output
        assert stats.exit_code == 0
        assert re.search(r"total\s+.*2", stats.output)

    def test_jobs_unknown_state(self, workspace: Path):
        result = runner.invoke(app, ["jobs", "--status", "done"])

        assert result.exit_code == 1
        assert "Unknown job state" in result.output

    def test_jobs_empty(self, workspace: Path):
        result = runner.invoke(app, ["jobs"])

        assert result.exit_code == 0
        assert "No jobs found" in result.output


class TestWorker:
    """Test the worker command."""

    def test_worker_once_processes_queue(self, workspace: Path, fake_api):
        job_id = submit_job()

        result = runner.invoke(app, ["worker", "--once", "--concurrency", "1"])

        assert result.exit_code == 0, result.output
        assert "1 finished" in result.output
        assert fake_api[0].base_url == "http://localhost:8775"

        shown = runner.invoke(app, ["result", job_id])
        assert "completed" in shown.output
        assert "Findings: 1" in shown.output

    def test_worker_uses_configured_api_url(
        self, workspace: Path, fake_api, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("SCANRELAY_API_URL", "http://scanner:9000")

        result = runner.invoke(app, ["worker", "--once"])

        assert result.exit_code == 0, result.output
        assert fake_api[0].base_url == "http://scanner:9000"


class TestConfigAndVersion:
    """Test config and version commands."""

    def test_config_show(self, workspace: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SCANRELAY_CONCURRENCY", "7")

        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert re.search(r"SCANRELAY_CONCURRENCY\s+.*7\s+.*env", result.output)

    def test_config_init_creates_local_env(self, workspace: Path):
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        assert (workspace / ".scanrelay" / ".env").exists()

    def test_config_unknown_action(self, workspace: Path):
        result = runner.invoke(app, ["config", "bogus"])
        assert result.exit_code == 1

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "ScanRelay" in result.output
