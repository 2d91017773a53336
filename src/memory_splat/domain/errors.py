"""Error taxonomy for splat generation and storage."""


class SplatError(Exception):
    """Base class for splat orchestration errors."""


class SubmissionError(SplatError):
    """Raised when the backend rejects or cannot receive a new job."""


class PollTransientError(SplatError):
    """Raised by a status query that should be retried on the next tick."""


class GenerationError(SplatError):
    """Raised when the backend reports a terminal failure for a job."""


class SplatTimeoutError(SplatError, TimeoutError):
    """Raised when a job does not reach a terminal state within its budget."""

    def __init__(self, request_id: str, timeout_ms: int) -> None:
        super().__init__(f"Job {request_id} timed out after {timeout_ms}ms")
        self.request_id = request_id
        self.timeout_ms = timeout_ms


class StorageError(SplatError):
    """Raised when the persistence layer fails."""
