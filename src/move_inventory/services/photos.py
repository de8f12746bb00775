"""Photo validation, storage and metadata."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from move_inventory.domain.photos import Photo, PhotoRecord, PhotoUpload
from move_inventory.errors import InvalidPhotoError

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
_HEIF_BRANDS = {b"heic", b"heix", b"hevc", b"hevx", b"heif", b"mif1", b"msf1"}


class PhotoStorage(Protocol):
    """Object storage for photo bytes."""

    def put(self, path: str, content: bytes, content_type: str) -> None:
        """Store bytes under a path."""

    def public_url(self, path: str) -> str:
        """Return a public URL for a stored path."""


class PhotoRepository(Protocol):
    """Persistence interface for photo metadata."""

    def create_photo(
        self, session_id: UUID, photo_index: int, file_path: str, file_name: str
    ) -> PhotoRecord:
        """Record an uploaded photo and return it."""

    def list_photos(self, session_id: UUID) -> list[PhotoRecord]:
        """Return a session's photos ordered by index."""

    def mark_analyzed(
        self, session_id: UUID, photo_index: int, analyzed_at: datetime
    ) -> None:
        """Record when a photo finished analysis."""


@dataclass
class PhotoService:
    """Validates uploads and keeps them in storage."""

    storage: PhotoStorage
    repository: PhotoRepository
    max_bytes: int

    def prepare_uploads(
        self, session_id: UUID, uploads: Sequence[PhotoUpload]
    ) -> list[Photo]:
        """Validate every upload, then store them with indices after existing ones.

        Nothing is stored when any upload is rejected.
        """
        if not uploads:
            raise InvalidPhotoError("At least one photo is required")
        mime_types = [self.validate(upload) for upload in uploads]
        offset = len(self.repository.list_photos(session_id))
        stamp = int(datetime.now(tz=UTC).timestamp() * 1000)
        photos: list[Photo] = []
        for position, (upload, mime_type) in enumerate(
            zip(uploads, mime_types, strict=True), start=1
        ):
            index = offset + position
            path = f"{session_id}_{index}_{stamp}.{_EXTENSIONS[mime_type]}"
            self.storage.put(path, upload.content, mime_type)
            self.repository.create_photo(session_id, index, path, upload.file_name)
            photos.append(
                Photo(
                    index=index,
                    file_name=upload.file_name,
                    content=upload.content,
                    mime_type=mime_type,
                )
            )
        logger.info(
            "Stored photo batch",
            extra={"session_id": str(session_id), "photo_count": len(photos)},
        )
        return photos

    def validate(self, upload: PhotoUpload) -> str:
        """Return the MIME type of an acceptable upload or raise."""
        if _is_heif(upload):
            raise InvalidPhotoError(
                f"{upload.file_name}: HEIC photos are not supported. "
                "Please convert to JPG first using your Photos app."
            )
        mime_type = detect_mime_type(upload.content)
        if mime_type is None:
            raise InvalidPhotoError(
                f"{upload.file_name}: Unsupported format. "
                "Please use JPG, PNG, GIF, or WEBP."
            )
        if len(upload.content) > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise InvalidPhotoError(
                f"{upload.file_name}: File too large. Maximum size is {limit_mb}MB."
            )
        return mime_type

    def list_photos(self, session_id: UUID) -> list[PhotoRecord]:
        """Return a session's photo metadata."""
        return self.repository.list_photos(session_id)

    def mark_analyzed(self, session_id: UUID, photo_index: int) -> None:
        """Stamp a photo as analyzed."""
        self.repository.mark_analyzed(session_id, photo_index, datetime.now(tz=UTC))

    def public_url(self, record: PhotoRecord) -> str:
        """Return the public URL of a stored photo."""
        return self.storage.public_url(record.file_path)


def detect_mime_type(content: bytes) -> str | None:
    """Infer a supported image MIME type from file signatures."""
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return None


def _is_heif(upload: PhotoUpload) -> bool:
    if upload.file_name.lower().endswith((".heic", ".heif")):
        return True
    return upload.content[4:8] == b"ftyp" and upload.content[8:12] in _HEIF_BRANDS
