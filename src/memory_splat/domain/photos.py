"""Domain models for photos and albums."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

DEFAULT_ALBUM_ID = "default"


class SplatStatus(StrEnum):
    """Splat generation status tracked on each photo."""

    NONE = "none"
    PENDING = "pending"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


_STATUS_RANK = {
    SplatStatus.NONE: 0,
    SplatStatus.PENDING: 1,
    SplatStatus.PROCESSING: 2,
    SplatStatus.READY: 3,
    SplatStatus.FAILED: 3,
}


def can_advance(current: SplatStatus, target: SplatStatus) -> bool:
    """Return whether a status change moves forward (or repeats the same status)."""
    if current == target:
        return True
    return _STATUS_RANK[target] > _STATUS_RANK[current]


@dataclass
class Photo:
    """A user photo with its splat generation state."""

    id: str
    name: str
    content: bytes
    album_id: str
    content_type: str = "image/jpeg"
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    splat_status: SplatStatus = SplatStatus.NONE
    splat_url: str | None = None

    @property
    def url(self) -> str:
        """Local reference to the photo content."""
        return f"photo://{self.id}"


@dataclass
class Album:
    """A named grouping of photos."""

    id: str
    name: str
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    photo_count: int = 0
    cover_url: str | None = None


@dataclass(frozen=True)
class SourceFile:
    """Candidate file handed to the store for import."""

    name: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class StoreSnapshot:
    """Photos of the current album together with every album."""

    photos: list[Photo]
    albums: list[Album]
