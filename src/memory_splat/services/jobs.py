"""In-memory registry of outstanding splat jobs."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from memory_splat.domain.jobs import JobRecord

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class JobTracker:
    """Tracks jobs by request id until they resolve or are reaped.

    Entries are never expired on a schedule; stale jobs leave only through
    an explicit ``reap`` call.
    """

    stale_after_ms: int = 300_000
    clock: Callable[[], datetime] = _utcnow
    _jobs: dict[str, JobRecord] = field(default_factory=dict, init=False)

    def register(self, request_id: str, image_ref: str) -> JobRecord:
        """Start tracking a newly submitted job."""
        job = JobRecord(request_id=request_id, image_ref=image_ref, started_at=self.clock())
        self._jobs[request_id] = job
        return job

    def attach_entity(self, request_id: str, entity_id: str) -> None:
        """Bind a job to the photo it was submitted for."""
        job = self._jobs.get(request_id)
        if job is not None:
            job.photo_id = entity_id

    def lookup_entity(self, request_id: str) -> str | None:
        job = self._jobs.get(request_id)
        return job.photo_id if job else None

    def get(self, request_id: str) -> JobRecord | None:
        return self._jobs.get(request_id)

    def remove(self, request_id: str) -> None:
        self._jobs.pop(request_id, None)

    def list_active(self) -> list[str]:
        return list(self._jobs)

    def reap(self, max_age_ms: int | None = None) -> list[str]:
        """Remove jobs older than the threshold and return their ids."""
        threshold = timedelta(
            milliseconds=self.stale_after_ms if max_age_ms is None else max_age_ms
        )
        now = self.clock()
        stale = [
            request_id
            for request_id, job in self._jobs.items()
            if now - job.started_at > threshold
        ]
        for request_id in stale:
            del self._jobs[request_id]
        if stale:
            logger.info("Reaped %d stale jobs", len(stale))
        return stale

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._jobs

    def __len__(self) -> int:
        return len(self._jobs)
