"""Error taxonomy shared by the client, orchestrator and queue layers."""

from dataclasses import dataclass


@dataclass
class ErrorInfo:
    """Structured error stored on failed jobs and returned by status queries."""

    kind: str
    message: str
    retryable: bool = False

    def to_dict(self) -> dict[str, str | bool]:
        return {"kind": self.kind, "message": self.message, "retryable": self.retryable}

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorInfo":
        """Describe any exception, using domain metadata when available."""
        if isinstance(exc, ScanRelayError):
            return cls(kind=exc.kind, message=str(exc), retryable=exc.retryable)
        return cls(kind="internal", message=str(exc) or exc.__class__.__name__)


class ScanRelayError(Exception):
    """Base class for all scanrelay errors."""

    kind = "error"
    retryable = False

    def to_info(self) -> ErrorInfo:
        return ErrorInfo.from_exception(self)


class TransportError(ScanRelayError):
    """The remote scanning service could not be reached or timed out."""

    kind = "transport"
    retryable = True


class ApplicationError(ScanRelayError):
    """The remote scanning service explicitly reported a failure."""

    kind = "application"

    def __init__(self, message: str, *, task_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.task_id = task_id


class ConfigurationError(ApplicationError):
    """Setting task options was rejected by the remote service."""

    kind = "configuration"


class StartError(ApplicationError):
    """Starting the scan was not acknowledged by the remote service."""

    kind = "start"


class PollTimeoutError(ScanRelayError, TimeoutError):
    """Status polling ran out of ticks before the scan terminated."""

    kind = "timeout"


class CleanupError(ScanRelayError):
    """A teardown call failed. Logged only, never raised to callers."""

    kind = "cleanup"

    def __init__(self, task_id: str, step: str, cause: BaseException):
        super().__init__(f"{step} failed for task {task_id}: {cause}")
        self.task_id = task_id
        self.step = step
        self.cause = cause


class NotFoundError(ScanRelayError, LookupError):
    """A query referenced a job id that does not exist."""

    kind = "not_found"

    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id
