"""Supabase-backed album repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from memory_splat.adapters.supabase_errors import execute
from memory_splat.domain.photos import Album
from memory_splat.services.photos import AlbumRepository


@dataclass
class SupabaseAlbumRepository(AlbumRepository):
    """Supabase implementation for album persistence."""

    client: Client

    def save_album(self, album: Album) -> None:
        """Upsert an album row keyed by id."""
        execute(
            self.client.table("albums").upsert(
                {
                    "id": album.id,
                    "name": album.name,
                    "photo_count": album.photo_count,
                    "cover_url": album.cover_url,
                    "created_at": album.created_at.isoformat(),
                }
            ),
            "save album",
        )

    def list_albums(self) -> list[Album]:
        """Return albums ordered by creation time."""
        response = execute(
            self.client.table("albums")
            .select("id, name, photo_count, cover_url, created_at")
            .order("created_at"),
            "list albums",
        )
        return [
            Album(
                id=str(row["id"]),
                name=str(row["name"]),
                photo_count=int(row.get("photo_count") or 0),
                cover_url=row.get("cover_url"),
                created_at=datetime.fromisoformat(str(row["created_at"])),
            )
            for row in response.data or []
        ]
