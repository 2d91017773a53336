"""Status polling for splat generation jobs."""

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from dataclasses import dataclass, field

from memory_splat.adapters.sharp_client import SharpClient
from memory_splat.domain.errors import (
    GenerationError,
    PollTransientError,
    SplatTimeoutError,
)
from memory_splat.domain.jobs import JobStatus, SplatResult, StatusEvent
from memory_splat.services.jobs import JobTracker

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


@dataclass(frozen=True)
class BackoffPolicy:
    """Linear backoff between status queries, capped, without jitter."""

    base_ms: int = 1000
    step_ms: int = 200
    max_ms: int = 5000

    def interval_ms(self, attempt: int) -> int:
        """Delay after the given 1-based attempt."""
        return min(self.max_ms, self.base_ms + attempt * self.step_ms)


@dataclass
class SplatStatusPoller:
    """Drives a job from submission to a terminal state.

    ``watch`` exposes the raw sequence of status observations; it is lazy,
    single-use and always ends with one terminal event (completed, failed or
    timed out). ``wait_for_result`` consumes that sequence, reports progress
    through a callback and resolves the job against the tracker.

    Polling is never cancelled from outside: a loop only ends on a terminal
    backend status or when its time budget runs out.
    """

    client: SharpClient
    tracker: JobTracker
    backoff: BackoffPolicy = field(default_factory=BackoffPolicy)
    default_timeout_ms: int = 180_000
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def watch(
        self, request_id: str, timeout_ms: int | None = None
    ) -> AsyncIterator[StatusEvent]:
        """Yield status events until a terminal status or the timeout."""
        budget_ms = self.default_timeout_ms if timeout_ms is None else timeout_ms
        start = self.clock()
        attempt = 0

        while (self.clock() - start) * 1000 < budget_ms:
            attempt += 1
            elapsed = round(self.clock() - start)
            try:
                response = await self.client.get_status(request_id)
            except PollTransientError as exc:
                logger.warning(
                    "Poll %d for %s failed, retrying: %s", attempt, request_id, exc
                )
            else:
                yield StatusEvent(
                    request_id=request_id,
                    status=response.status,
                    attempt=attempt,
                    elapsed_seconds=elapsed,
                    error=response.error,
                )
                if response.status.is_terminal:
                    return
            await self.sleep(self.backoff.interval_ms(attempt) / 1000)

        yield StatusEvent(
            request_id=request_id,
            status=JobStatus.TIMED_OUT,
            attempt=attempt,
            elapsed_seconds=round(self.clock() - start),
        )

    async def wait_for_result(
        self,
        request_id: str,
        timeout_ms: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> SplatResult:
        """Poll until the job completes and return its generated asset."""
        budget_ms = self.default_timeout_ms if timeout_ms is None else timeout_ms
        async with aclosing(self.watch(request_id, budget_ms)) as events:
            async for event in events:
                if event.status in {JobStatus.PENDING, JobStatus.PROCESSING}:
                    if on_progress is not None:
                        on_progress(f"Generating splat... ({event.elapsed_seconds}s)")
                elif event.status == JobStatus.COMPLETED:
                    result = await self.client.get_result(request_id)
                    self.tracker.remove(request_id)
                    logger.info("Job %s completed: %s", request_id, result.asset_url)
                    return result
                elif event.status == JobStatus.FAILED:
                    self.tracker.remove(request_id)
                    logger.info("Job %s failed: %s", request_id, event.error)
                    raise GenerationError(event.error or "Generation failed")

        logger.warning("Job %s timed out after %dms", request_id, budget_ms)
        raise SplatTimeoutError(request_id, budget_ms)
