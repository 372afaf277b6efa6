"""Tests for the scan job orchestrator."""

import pytest

from scanrelay.errors import (
    ApplicationError,
    ConfigurationError,
    PollTimeoutError,
    StartError,
    TransportError,
)
from scanrelay.modules.orchestrator import (
    DEFAULT_MAX_POLLS,
    JobStatus,
    MemoryJobTracker,
    ScanEvent,
    ScanOrchestrator,
    running_progress,
)
from scanrelay.modules.sqlmapapi import RemoteAck

CLEANUP_CALLS = ["stop", "kill", "delete_task"]


def make_orchestrator(client, no_sleep, **kwargs) -> ScanOrchestrator:
    return ScanOrchestrator(client, poll_interval=5.0, sleep=no_sleep, listeners=[], **kwargs)


class TestHappyPath:
    """Test a scan that runs to completion."""

    async def test_terminated_job_has_full_progress_and_result(self, job, fake_client, no_sleep):
        orchestrator = make_orchestrator(fake_client, no_sleep)

        outcome = await orchestrator.run(job)

        assert outcome.status == JobStatus.TERMINATED
        assert outcome.progress == 100
        assert outcome.result is not None
        assert outcome.result.log == fake_client.log
        assert outcome.task_id == "task-1"
        assert job.finished_at is not None

    async def test_call_sequence(self, job, make_client, no_sleep):
        client = make_client(statuses=["running", "running", "terminated"])
        orchestrator = make_orchestrator(client, no_sleep)

        await orchestrator.run(job)

        assert client.names() == [
            "create_task",
            "set_options",
            "start",
            "poll_status",
            "poll_status",
            "poll_status",
            "fetch_result",
            "fetch_log",
        ]

    async def test_options_sent_from_configuration(self, job, fake_client, no_sleep):
        job.config.custom_options = {"level": 3}
        orchestrator = make_orchestrator(fake_client, no_sleep)

        await orchestrator.run(job)

        assert fake_client.options == {
            "url": job.config.target,
            "method": "GET",
            "level": 3,
        }

    async def test_progress_is_non_decreasing_and_ends_at_100(self, job, make_client, no_sleep):
        client = make_client(statuses=["running"] * 25 + ["terminated"])
        tracker = MemoryJobTracker()
        orchestrator = make_orchestrator(client, no_sleep)

        await orchestrator.run(job, tracker)

        history = tracker.progress_history
        assert history == sorted(history)
        assert history[-1] == 100
        assert history[:3] == [0.0, 10.0, 20.0]

    async def test_task_id_recorded_before_configuration(self, job, fake_client, no_sleep):
        tracker = MemoryJobTracker()
        orchestrator = make_orchestrator(fake_client, no_sleep)

        await orchestrator.run(job, tracker)

        assert tracker.task_ids == ["task-1"]

    async def test_resumes_existing_remote_task(self, job, fake_client, no_sleep):
        job.task_id = "existing"
        orchestrator = make_orchestrator(fake_client, no_sleep)

        outcome = await orchestrator.run(job)

        assert "create_task" not in fake_client.names()
        assert ("set_options", "existing") in fake_client.calls
        assert outcome.task_id == "existing"

    async def test_unknown_status_keeps_polling(self, job, make_client, no_sleep):
        client = make_client(statuses=["not running", "terminated"])
        orchestrator = make_orchestrator(client, no_sleep)

        outcome = await orchestrator.run(job)

        assert outcome.status == JobStatus.TERMINATED
        assert client.names().count("poll_status") == 2

    async def test_terminal_job_is_rejected(self, job, fake_client, no_sleep):
        job.status = JobStatus.CANCELLED
        orchestrator = make_orchestrator(fake_client, no_sleep)

        with pytest.raises(ValueError):
            await orchestrator.run(job)


class TestRunningProgress:
    """Test the heuristic progress curve."""

    def test_starts_at_30(self):
        assert running_progress(0) == 30

    def test_grows_per_tick(self):
        assert running_progress(10) == pytest.approx(31.0)

    def test_capped_at_95(self):
        assert running_progress(999) == 95


class TestFailures:
    """Test failure handling and cleanup."""

    async def test_no_cleanup_without_task_id(self, job, fake_client, no_sleep):
        fake_client.fail_on["create_task"] = TransportError("refused")
        orchestrator = make_orchestrator(fake_client, no_sleep)

        with pytest.raises(TransportError):
            await orchestrator.run(job)

        assert fake_client.names() == ["create_task"]
        assert job.status == JobStatus.FAILED
        assert job.error.kind == "transport"
        assert job.error.retryable is True

    async def test_rejected_options_raise_configuration_error(self, job, fake_client, no_sleep):
        fake_client.option_ack = RemoteAck(success=False, message="invalid level")
        orchestrator = make_orchestrator(fake_client, no_sleep)

        with pytest.raises(ConfigurationError, match="invalid level"):
            await orchestrator.run(job)

        assert fake_client.names()[-3:] == CLEANUP_CALLS
        assert "start" not in fake_client.names()
        assert job.error.kind == "configuration"
        assert job.error.retryable is False

    async def test_unacknowledged_start_raises_start_error(self, job, fake_client, no_sleep):
        fake_client.start_ack = RemoteAck(success=False, message="")
        orchestrator = make_orchestrator(fake_client, no_sleep)

        with pytest.raises(StartError, match="Unknown error"):
            await orchestrator.run(job)

        assert fake_client.names()[-3:] == CLEANUP_CALLS

    async def test_poll_failure_cleans_up(self, job, fake_client, no_sleep):
        fake_client.fail_on["poll_status"] = ApplicationError("Invalid task ID")
        orchestrator = make_orchestrator(fake_client, no_sleep)

        with pytest.raises(ApplicationError):
            await orchestrator.run(job)

        assert fake_client.names()[-3:] == CLEANUP_CALLS

    async def test_max_polls_of_running_times_out(self, job, make_client, no_sleep):
        client = make_client(default_status="running")
        orchestrator = make_orchestrator(client, no_sleep)

        with pytest.raises(TimeoutError):
            await orchestrator.run(job)

        assert orchestrator.max_polls == DEFAULT_MAX_POLLS
        assert client.names().count("poll_status") == DEFAULT_MAX_POLLS
        assert "fetch_result" not in client.names()
        assert client.names()[-3:] == CLEANUP_CALLS
        assert job.error.kind == "timeout"

    async def test_timeout_is_poll_timeout_error(self, job, make_client, no_sleep):
        client = make_client(default_status="running")
        orchestrator = make_orchestrator(client, no_sleep, max_polls=3)

        with pytest.raises(PollTimeoutError):
            await orchestrator.run(job)

        assert orchestrator.timeout_seconds == 15.0

    async def test_cleanup_failures_are_swallowed(self, job, fake_client, no_sleep):
        fake_client.start_ack = RemoteAck(success=False, message="no")
        fake_client.fail_on["stop"] = TransportError("gone")
        orchestrator = make_orchestrator(fake_client, no_sleep)

        with pytest.raises(StartError):
            await orchestrator.run(job)

        assert fake_client.names()[-3:] == CLEANUP_CALLS

    async def test_cleanup_reports_each_failed_step(self, job, fake_client, no_sleep):
        job.task_id = "task-9"
        fake_client.fail_on["kill"] = TransportError("gone")
        orchestrator = make_orchestrator(fake_client, no_sleep)

        failures = await orchestrator.cleanup(job)

        assert [failure.step for failure in failures] == ["kill"]
        assert failures[0].task_id == "task-9"

    def test_max_polls_must_be_positive(self, fake_client):
        with pytest.raises(ValueError):
            ScanOrchestrator(fake_client, max_polls=0)


class TestCancellation:
    """Test cooperative cancellation."""

    @pytest.mark.parametrize("ticks_before_cancel", [1, 4])
    async def test_cancel_between_ticks(self, job, make_client, ticks_before_cancel):
        client = make_client(default_status="running")
        tracker = MemoryJobTracker()
        sleeps = 0

        async def sleep(_seconds):
            nonlocal sleeps
            sleeps += 1
            if sleeps == ticks_before_cancel:
                tracker.cancel()

        orchestrator = ScanOrchestrator(client, sleep=sleep, listeners=[])

        outcome = await orchestrator.run(job, tracker)

        names = client.names()
        assert outcome.status == JobStatus.CANCELLED
        assert names.count("poll_status") == ticks_before_cancel
        assert names[-3:] == CLEANUP_CALLS
        assert names.count("stop") == names.count("kill") == names.count("delete_task") == 1
        assert names.index("stop") > max(
            i for i, name in enumerate(names) if name == "poll_status"
        )
        assert tracker.published[-1][0] == "cancelled"

    async def test_cancel_before_start_makes_no_remote_calls(self, job, fake_client, no_sleep):
        tracker = MemoryJobTracker()
        tracker.cancel()
        orchestrator = make_orchestrator(fake_client, no_sleep)

        outcome = await orchestrator.run(job, tracker)

        assert outcome.status == JobStatus.CANCELLED
        assert fake_client.calls == []


class TestEvents:
    """Test event emission to listeners."""

    async def test_listeners_receive_lifecycle_events(self, job, fake_client, no_sleep):
        received: list[ScanEvent] = []
        orchestrator = make_orchestrator(fake_client, no_sleep)
        orchestrator.add_listener(received.append)

        await orchestrator.run(job)

        kinds = [event.kind for event in received]
        assert kinds[0] == "status_changed"
        assert "task_created" in kinds
        assert kinds[-1] == "completed"
        assert received[-1].progress == 100

    async def test_failing_listener_does_not_break_run(self, job, fake_client, no_sleep):
        def broken(_event):
            raise RuntimeError("listener bug")

        orchestrator = make_orchestrator(fake_client, no_sleep)
        orchestrator.add_listener(broken)

        outcome = await orchestrator.run(job)

        assert outcome.status == JobStatus.TERMINATED

    async def test_failure_emits_failed_event(self, job, fake_client, no_sleep):
        received: list[ScanEvent] = []
        fake_client.fail_on["create_task"] = TransportError("refused")
        orchestrator = make_orchestrator(fake_client, no_sleep)
        orchestrator.add_listener(received.append)

        with pytest.raises(TransportError):
            await orchestrator.run(job)

        assert received[-1].kind == "failed"
        assert received[-1].status == JobStatus.FAILED
