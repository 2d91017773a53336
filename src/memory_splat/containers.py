"""Dependency container wiring for the application."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from memory_splat.adapters.sharp_client import HttpxSharpClient, SharpClient
from memory_splat.adapters.supabase_album_repository import SupabaseAlbumRepository
from memory_splat.adapters.supabase_photo_repository import SupabasePhotoRepository
from memory_splat.config import Settings
from memory_splat.services.jobs import JobTracker
from memory_splat.services.notifier import ChangeNotifier
from memory_splat.services.orchestration import SplatOrchestrator
from memory_splat.services.photos import PhotoStore
from memory_splat.services.polling import BackoffPolicy, SplatStatusPoller
from memory_splat.services.submitter import SplatJobSubmitter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    sharp_client: SharpClient
    notifier: ChangeNotifier
    photo_store: PhotoStore
    job_tracker: JobTracker
    submitter: SplatJobSubmitter
    poller: SplatStatusPoller
    orchestrator: SplatOrchestrator
    close_resources: Callable[[], Awaitable[None]]


def build_services(
    settings: Settings,
    sharp_client: SharpClient,
    photo_store: PhotoStore,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> tuple[JobTracker, SplatJobSubmitter, SplatStatusPoller, SplatOrchestrator]:
    """Wire the job-orchestration services around a client and a store."""
    job_tracker = JobTracker(stale_after_ms=settings.stale_job_ms)
    submitter = SplatJobSubmitter(client=sharp_client, tracker=job_tracker)
    poller = SplatStatusPoller(
        client=sharp_client,
        tracker=job_tracker,
        backoff=BackoffPolicy(
            base_ms=settings.poll_base_ms,
            step_ms=settings.poll_step_ms,
            max_ms=settings.poll_max_ms,
        ),
        default_timeout_ms=settings.splat_timeout_ms,
        clock=clock,
        sleep=sleep,
    )
    orchestrator = SplatOrchestrator(
        submitter=submitter,
        poller=poller,
        store=photo_store,
        timeout_ms=settings.splat_timeout_ms,
    )
    return job_tracker, submitter, poller, orchestrator


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    notifier = ChangeNotifier()
    photo_store = PhotoStore(
        photo_repository=SupabasePhotoRepository(supabase_client),
        album_repository=SupabaseAlbumRepository(supabase_client),
        notifier=notifier,
        default_album_name=resolved_settings.default_album_name,
    )
    sharp_client = HttpxSharpClient.create(
        base_url=resolved_settings.sharp_api_base_url,
        submit_timeout=resolved_settings.sharp_submit_timeout_seconds,
        request_timeout=resolved_settings.sharp_request_timeout_seconds,
    )
    job_tracker, submitter, poller, orchestrator = build_services(
        resolved_settings, sharp_client, photo_store
    )

    async def close_resources() -> None:
        await sharp_client.close()

    return AppContainer(
        settings=resolved_settings,
        sharp_client=sharp_client,
        notifier=notifier,
        photo_store=photo_store,
        job_tracker=job_tracker,
        submitter=submitter,
        poller=poller,
        orchestrator=orchestrator,
        close_resources=close_resources,
    )
