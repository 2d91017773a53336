"""Pydantic models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from memory_splat.domain.jobs import JobRecord
from memory_splat.domain.photos import Album, Photo


class PhotoOut(BaseModel):
    """Photo metadata without its content."""

    id: str
    name: str
    album_id: str
    content_type: str
    size_bytes: int
    timestamp: datetime
    url: str
    splat_status: str
    splat_url: str | None = None

    @classmethod
    def from_photo(cls, photo: Photo) -> "PhotoOut":
        return cls(
            id=photo.id,
            name=photo.name,
            album_id=photo.album_id,
            content_type=photo.content_type,
            size_bytes=len(photo.content),
            timestamp=photo.timestamp,
            url=photo.url,
            splat_status=photo.splat_status.value,
            splat_url=photo.splat_url,
        )


class AlbumOut(BaseModel):
    """Album summary."""

    id: str
    name: str
    photo_count: int
    cover_url: str | None = None
    created_at: datetime

    @classmethod
    def from_album(cls, album: Album) -> "AlbumOut":
        return cls(
            id=album.id,
            name=album.name,
            photo_count=album.photo_count,
            cover_url=album.cover_url,
            created_at=album.created_at,
        )


class JobOut(BaseModel):
    """Tracked job summary."""

    request_id: str
    image_ref: str
    started_at: datetime
    photo_id: str | None = None

    @classmethod
    def from_job(cls, job: JobRecord) -> "JobOut":
        return cls(
            request_id=job.request_id,
            image_ref=job.image_ref,
            started_at=job.started_at,
            photo_id=job.photo_id,
        )


class AlbumCreate(BaseModel):
    """Request body for album creation."""

    name: str = Field(min_length=1)


class SplatRequest(BaseModel):
    """Request body for generating a splat from an image URL."""

    image_url: str = Field(min_length=1)
    photo_id: str | None = None
