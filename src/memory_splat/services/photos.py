"""Photo and album store with an album-scoped working set."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import uuid4

from memory_splat.domain.photos import (
    DEFAULT_ALBUM_ID,
    Album,
    Photo,
    SourceFile,
    SplatStatus,
    StoreSnapshot,
    can_advance,
)
from memory_splat.services.notifier import ChangeNotifier

logger = logging.getLogger(__name__)


class PhotoRepository(Protocol):
    """Persistence interface for photos."""

    def save_photo(self, photo: Photo) -> None:
        """Insert or replace a photo."""

    def list_photos(self, album_id: str | None = None) -> list[Photo]:
        """Return photos in insertion order, optionally scoped to an album."""

    def get_photo(self, photo_id: str) -> Photo | None:
        """Return a photo by id, if present."""


class AlbumRepository(Protocol):
    """Persistence interface for albums."""

    def save_album(self, album: Album) -> None:
        """Insert or replace an album."""

    def list_albums(self) -> list[Album]:
        """Return all albums in creation order."""


@dataclass
class PhotoStore:
    """Owns persisted photos and albums plus the current album's photos.

    Photo writes reach the repository before the working set changes, so a
    failed write leaves memory as it was. Repository faults propagate as
    ``StorageError``.
    """

    photo_repository: PhotoRepository
    album_repository: AlbumRepository
    notifier: ChangeNotifier = field(default_factory=ChangeNotifier)
    default_album_name: str = "All Memories"
    _photos: list[Photo] = field(default_factory=list, init=False)
    _albums: list[Album] = field(default_factory=list, init=False)
    _current_album_id: str | None = field(default=None, init=False)

    @property
    def current_album_id(self) -> str | None:
        return self._current_album_id

    async def initialize(self) -> StoreSnapshot:
        """Load albums, creating the default one if needed, then its photos."""
        self._albums = self.album_repository.list_albums()
        if not self._albums:
            default_album = Album(id=DEFAULT_ALBUM_ID, name=self.default_album_name)
            self._albums.append(default_album)
            self.album_repository.save_album(default_album)
            logger.info("Created default album %s", default_album.id)

        self._current_album_id = self._albums[0].id
        self._photos = self.photo_repository.list_photos(self._current_album_id)
        return StoreSnapshot(photos=self.get_all(), albums=self.get_albums())

    async def create_album(self, name: str) -> Album:
        """Create and persist an empty album."""
        album = Album(id=f"album-{uuid4()}", name=name)
        self._albums.append(album)
        self.album_repository.save_album(album)
        self.notifier.albums_changed(self._albums)
        return album

    async def switch_album(self, album_id: str) -> list[Photo]:
        """Replace the working set with the photos of another album."""
        self._current_album_id = album_id
        self._photos = self.photo_repository.list_photos(album_id)
        self.notifier.photos_changed(self._photos)
        return self.get_all()

    async def add_from_source(
        self, files: Iterable[SourceFile], album_id: str | None = None
    ) -> list[Photo]:
        """Import image files into an album, skipping anything that isn't an image."""
        target_album_id = album_id or self._current_album_id or DEFAULT_ALBUM_ID
        new_photos: list[Photo] = []

        try:
            for source in files:
                if not source.content_type.startswith("image/"):
                    logger.info("Skipping non-image file %s", source.name)
                    continue
                photo = Photo(
                    id=f"photo-{uuid4()}",
                    name=source.name,
                    content=source.content,
                    content_type=source.content_type,
                    album_id=target_album_id,
                    splat_status=SplatStatus.PENDING,
                )
                self.photo_repository.save_photo(photo)
                new_photos.append(photo)
                if target_album_id == self._current_album_id:
                    self._photos.append(photo)
        finally:
            if new_photos:
                self._count_added(target_album_id, new_photos)
            self.notifier.photos_changed(self._photos)
        return new_photos

    def _count_added(self, album_id: str, new_photos: list[Photo]) -> None:
        album = self._find_album(album_id)
        if album is None:
            return
        album.photo_count += len(new_photos)
        if not album.cover_url:
            album.cover_url = new_photos[0].url
        self.album_repository.save_album(album)
        self.notifier.albums_changed(self._albums)

    def get_all(self, album_id: str | None = None) -> list[Photo]:
        """Return photos of the current album, or of another album from storage."""
        if album_id is None or album_id == self._current_album_id:
            return list(self._photos)
        return self.photo_repository.list_photos(album_id)

    def get_albums(self) -> list[Album]:
        return list(self._albums)

    def get_photo(self, photo_id: str) -> Photo | None:
        return next((photo for photo in self._photos if photo.id == photo_id), None)

    async def update_splat_status(
        self,
        photo_id: str,
        status: SplatStatus,
        splat_url: str | None = None,
    ) -> bool:
        """Advance a photo's splat status and report whether it changed.

        Photos outside the working set are loaded from the repository, so a
        job finishing after an album switch still lands. Ids known nowhere
        are ignored.
        """
        resident = self.get_photo(photo_id)
        photo = resident or self.photo_repository.get_photo(photo_id)
        if photo is None:
            return False
        if not can_advance(photo.splat_status, status):
            logger.warning(
                "Ignoring splat status change %s -> %s for %s",
                photo.splat_status,
                status,
                photo_id,
            )
            return False

        self.photo_repository.save_photo(
            replace(photo, splat_status=status, splat_url=splat_url or photo.splat_url)
        )
        photo.splat_status = status
        if splat_url:
            photo.splat_url = splat_url
        if resident is not None:
            self.notifier.photos_changed(self._photos)
        return True

    def _find_album(self, album_id: str) -> Album | None:
        return next((album for album in self._albums if album.id == album_id), None)
