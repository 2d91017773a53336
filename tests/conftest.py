"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field, replace

import pytest

from memory_splat.adapters.sharp_client import SharpClient
from memory_splat.config import Settings
from memory_splat.containers import AppContainer, build_services
from memory_splat.domain.errors import StorageError
from memory_splat.domain.jobs import JobStatus, JobStatusResponse, SplatResult
from memory_splat.domain.photos import Album, Photo
from memory_splat.services.notifier import ChangeNotifier
from memory_splat.services.photos import AlbumRepository, PhotoRepository, PhotoStore


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    photos: dict[str, Photo] = field(default_factory=dict)
    saves: int = 0

    def save_photo(self, photo: Photo) -> None:
        self.photos[photo.id] = replace(photo)
        self.saves += 1

    def list_photos(self, album_id: str | None = None) -> list[Photo]:
        return [
            replace(photo)
            for photo in self.photos.values()
            if album_id is None or photo.album_id == album_id
        ]

    def get_photo(self, photo_id: str) -> Photo | None:
        photo = self.photos.get(photo_id)
        return replace(photo) if photo is not None else None


@dataclass
class InMemoryAlbumRepository(AlbumRepository):
    """In-memory album repository for tests."""

    albums: dict[str, Album] = field(default_factory=dict)

    def save_album(self, album: Album) -> None:
        self.albums[album.id] = replace(album)

    def list_albums(self) -> list[Album]:
        return [replace(album) for album in self.albums.values()]


@dataclass
class FailingPhotoRepository(PhotoRepository):
    """Photo repository whose writes always fail."""

    def save_photo(self, photo: Photo) -> None:
        raise StorageError("disk full")

    def list_photos(self, album_id: str | None = None) -> list[Photo]:
        return []

    def get_photo(self, photo_id: str) -> Photo | None:
        return None


@dataclass
class FakeSharpClient(SharpClient):
    """Scripted Sharp backend.

    Status responses are served in order; the last one repeats forever.
    Exceptions in the script are raised instead of returned.
    """

    statuses: list[JobStatusResponse | Exception] = field(
        default_factory=lambda: [JobStatusResponse(status=JobStatus.COMPLETED)]
    )
    result: SplatResult | Exception = field(
        default_factory=lambda: SplatResult(
            asset_url="https://x/y.ply", filename="y.ply", size_bytes=12345
        )
    )
    submit_error: Exception | None = None
    submitted_urls: list[str] = field(default_factory=list)
    submitted_files: list[tuple[str, bytes]] = field(default_factory=list)
    status_calls: list[str] = field(default_factory=list)
    result_calls: list[str] = field(default_factory=list)
    _counter: int = 0

    async def submit(self, image_url: str) -> str:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted_urls.append(image_url)
        return self._next_request_id()

    async def submit_file(self, content: bytes, filename: str) -> str:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted_files.append((filename, content))
        return self._next_request_id()

    async def get_status(self, request_id: str) -> JobStatusResponse:
        self.status_calls.append(request_id)
        item = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def get_result(self, request_id: str) -> SplatResult:
        self.result_calls.append(request_id)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    def _next_request_id(self) -> str:
        self._counter += 1
        return f"req-{self._counter}"


@dataclass
class FakeClock:
    """Monotonic clock that only moves when the poll loop sleeps."""

    now: float = 0.0
    sleeps: list[float] = field(default_factory=list)

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


def statuses(*names: str) -> list[JobStatusResponse | Exception]:
    """Build a status script from plain status names."""
    return [JobStatusResponse(status=JobStatus(name)) for name in names]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sharp_client() -> FakeSharpClient:
    return FakeSharpClient()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def album_repository() -> InMemoryAlbumRepository:
    return InMemoryAlbumRepository()


@pytest.fixture
def photo_store(
    photo_repository: InMemoryPhotoRepository,
    album_repository: InMemoryAlbumRepository,
) -> PhotoStore:
    return PhotoStore(
        photo_repository=photo_repository,
        album_repository=album_repository,
        notifier=ChangeNotifier(),
    )


@pytest.fixture
def container(
    settings: Settings,
    sharp_client: FakeSharpClient,
    photo_store: PhotoStore,
    clock: FakeClock,
) -> AppContainer:
    job_tracker, submitter, poller, orchestrator = build_services(
        settings, sharp_client, photo_store, clock=clock, sleep=clock.sleep
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        sharp_client=sharp_client,
        notifier=photo_store.notifier,
        photo_store=photo_store,
        job_tracker=job_tracker,
        submitter=submitter,
        poller=poller,
        orchestrator=orchestrator,
        close_resources=close_resources,
    )
