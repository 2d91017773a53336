"""Pub-sub hooks announcing store mutations to the UI."""

from collections.abc import Callable
from dataclasses import dataclass, field

from memory_splat.domain.photos import Album, Photo

PhotosListener = Callable[[list[Photo]], None]
AlbumsListener = Callable[[list[Album]], None]
SplatReadyListener = Callable[[str, str], None]


@dataclass
class ChangeNotifier:
    """Fan out snapshots and splat-ready events to subscribers."""

    _photo_listeners: list[PhotosListener] = field(default_factory=list)
    _album_listeners: list[AlbumsListener] = field(default_factory=list)
    _splat_listeners: list[SplatReadyListener] = field(default_factory=list)

    def subscribe_photos(self, listener: PhotosListener) -> None:
        self._photo_listeners.append(listener)

    def subscribe_albums(self, listener: AlbumsListener) -> None:
        self._album_listeners.append(listener)

    def subscribe_splat_ready(self, listener: SplatReadyListener) -> None:
        self._splat_listeners.append(listener)

    def photos_changed(self, photos: list[Photo]) -> None:
        """Send every photo listener its own copy of the working set."""
        for listener in self._photo_listeners:
            listener(list(photos))

    def albums_changed(self, albums: list[Album]) -> None:
        for listener in self._album_listeners:
            listener(list(albums))

    def splat_ready(self, photo_id: str, asset_url: str) -> None:
        for listener in self._splat_listeners:
            listener(photo_id, asset_url)
