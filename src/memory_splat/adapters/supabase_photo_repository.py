"""Supabase-backed photo repository."""

import base64
from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from memory_splat.adapters.supabase_errors import execute
from memory_splat.domain.photos import Photo, SplatStatus
from memory_splat.services.photos import PhotoRepository

_COLUMNS = "id, name, content, content_type, timestamp, album_id, splat_url, splat_status"


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo persistence."""

    client: Client

    def save_photo(self, photo: Photo) -> None:
        """Upsert a photo row keyed by id."""
        execute(
            self.client.table("photos").upsert(
                {
                    "id": photo.id,
                    "name": photo.name,
                    "content": base64.b64encode(photo.content).decode("ascii"),
                    "content_type": photo.content_type,
                    "timestamp": photo.timestamp.isoformat(),
                    "album_id": photo.album_id,
                    "splat_url": photo.splat_url,
                    "splat_status": photo.splat_status.value,
                }
            ),
            "save photo",
        )

    def list_photos(self, album_id: str | None = None) -> list[Photo]:
        """Return photos ordered by creation time."""
        query = self.client.table("photos").select(_COLUMNS)
        if album_id is not None:
            query = query.eq("album_id", album_id)
        response = execute(query.order("timestamp"), "list photos")
        return [_row_to_photo(row) for row in response.data or []]

    def get_photo(self, photo_id: str) -> Photo | None:
        """Return a photo by id, if present."""
        response = execute(
            self.client.table("photos").select(_COLUMNS).eq("id", photo_id).limit(1),
            "get photo",
        )
        if not response.data:
            return None
        return _row_to_photo(response.data[0])


def _row_to_photo(row: dict[str, object]) -> Photo:
    return Photo(
        id=str(row["id"]),
        name=str(row["name"]),
        content=base64.b64decode(str(row.get("content") or "")),
        content_type=str(row.get("content_type") or "image/jpeg"),
        album_id=str(row["album_id"]),
        timestamp=datetime.fromisoformat(str(row["timestamp"])),
        splat_status=SplatStatus(row.get("splat_status") or SplatStatus.NONE),
        splat_url=row.get("splat_url"),  # type: ignore[arg-type]
    )
