"""Domain models for uploaded photos."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class PhotoUpload:
    """Raw upload as received from a client."""

    file_name: str
    content: bytes


@dataclass(frozen=True)
class Photo:
    """Validated photo with a stable index within its session."""

    index: int
    file_name: str
    content: bytes
    mime_type: str


@dataclass(frozen=True)
class PhotoRecord:
    """Persisted photo metadata."""

    id: UUID
    session_id: UUID
    photo_index: int
    file_path: str
    file_name: str
    analyzed_at: datetime | None
