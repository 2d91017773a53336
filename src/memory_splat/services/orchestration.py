"""Splat generation for photos: submit, poll, record the outcome."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from memory_splat.domain.errors import SplatError
from memory_splat.domain.jobs import SplatResult
from memory_splat.domain.photos import Photo, SplatStatus
from memory_splat.services.jobs import JobTracker
from memory_splat.services.photos import PhotoStore
from memory_splat.services.polling import ProgressCallback, SplatStatusPoller
from memory_splat.services.submitter import SplatJobSubmitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchOutcome:
    """Per-photo results of a batch generation run."""

    results: dict[str, SplatResult]
    failures: dict[str, str]


@dataclass
class SplatOrchestrator:
    """Facade composing submission and polling on behalf of the store."""

    submitter: SplatJobSubmitter
    poller: SplatStatusPoller
    store: PhotoStore
    timeout_ms: int = 180_000
    _batch_running: bool = field(default=False, init=False)
    _queued: list[Photo] = field(default_factory=list, init=False)

    @property
    def tracker(self) -> JobTracker:
        return self.submitter.tracker

    @property
    def is_generating(self) -> bool:
        return self._batch_running

    async def generate_for_photo(
        self, photo: Photo, on_progress: ProgressCallback | None = None
    ) -> SplatResult:
        """Generate a splat from a stored photo and record it on the photo."""
        await self.store.update_splat_status(photo.id, SplatStatus.PROCESSING)
        try:
            request_id = await self.submitter.submit_by_content(
                photo.content, photo.name
            )
            self.tracker.attach_entity(request_id, photo.id)
            result = await self.poller.wait_for_result(
                request_id, self.timeout_ms, on_progress
            )
        except SplatError:
            logger.exception("Splat generation failed for %s", photo.name)
            await self.store.update_splat_status(photo.id, SplatStatus.FAILED)
            raise
        await self._record_ready(photo.id, result)
        return result

    async def start_from_reference(
        self, image_ref: str, photo_id: str | None = None
    ) -> str:
        """Submit an image URL and bind the job to a photo if given."""
        if photo_id is not None:
            await self.store.update_splat_status(photo_id, SplatStatus.PROCESSING)
        try:
            request_id = await self.submitter.submit_by_reference(image_ref)
        except SplatError:
            if photo_id is not None:
                await self.store.update_splat_status(photo_id, SplatStatus.FAILED)
            raise
        if photo_id is not None:
            self.tracker.attach_entity(request_id, photo_id)
        return request_id

    async def complete(
        self, request_id: str, on_progress: ProgressCallback | None = None
    ) -> SplatResult:
        """Wait for a submitted job and record the outcome on its bound photo."""
        photo_id = self.tracker.lookup_entity(request_id)
        try:
            result = await self.poller.wait_for_result(
                request_id, self.timeout_ms, on_progress
            )
        except SplatError:
            logger.exception("Splat generation failed for job %s", request_id)
            if photo_id is not None:
                await self.store.update_splat_status(photo_id, SplatStatus.FAILED)
            raise
        if photo_id is not None:
            await self._record_ready(photo_id, result)
        return result

    async def generate_from_reference(
        self,
        image_ref: str,
        photo_id: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> SplatResult:
        """Generate a splat from an image URL."""
        request_id = await self.start_from_reference(image_ref, photo_id)
        return await self.complete(request_id, on_progress)

    async def generate_for_photos(
        self,
        photos: Iterable[Photo],
        on_progress: ProgressCallback | None = None,
    ) -> BatchOutcome | None:
        """Generate splats for pending photos one at a time.

        Photos handed in while a batch is running are queued onto that batch
        and the call returns None. Photos that are not pending are skipped.
        """
        if self._batch_running:
            queued = list(photos)
            self._queued.extend(queued)
            logger.info("Splat batch already running, queued %d photos", len(queued))
            return None
        self._batch_running = True
        results: dict[str, SplatResult] = {}
        failures: dict[str, str] = {}
        batch = list(photos)
        try:
            while batch:
                for photo in batch:
                    if photo.id in results or photo.id in failures:
                        continue
                    if photo.splat_status != SplatStatus.PENDING:
                        logger.info(
                            "Skipping %s with splat status %s",
                            photo.name,
                            photo.splat_status,
                        )
                        continue
                    try:
                        results[photo.id] = await self.generate_for_photo(
                            photo, on_progress
                        )
                    except SplatError as exc:
                        failures[photo.id] = str(exc)
                batch, self._queued = self._queued, []
        finally:
            self._batch_running = False
            self._queued = []
        return BatchOutcome(results=results, failures=failures)

    def reap_stale(self, max_age_ms: int | None = None) -> list[str]:
        """Drop tracked jobs older than the threshold."""
        return self.tracker.reap(max_age_ms)

    async def _record_ready(self, photo_id: str, result: SplatResult) -> None:
        applied = await self.store.update_splat_status(
            photo_id, SplatStatus.READY, result.asset_url
        )
        if applied:
            self.store.notifier.splat_ready(photo_id, result.asset_url)
