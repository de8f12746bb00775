"""Supabase-backed photo metadata repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from move_inventory.domain.photos import PhotoRecord
from move_inventory.services.photos import PhotoRepository


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for uploaded photo metadata."""

    client: Client

    def create_photo(
        self, session_id: UUID, photo_index: int, file_path: str, file_name: str
    ) -> PhotoRecord:
        """Create a photo metadata row and return it."""
        response = (
            self.client.table("uploaded_images")
            .insert(
                {
                    "session_id": str(session_id),
                    "photo_index": photo_index,
                    "file_path": file_path,
                    "file_name": file_name,
                    "analyzed_at": None,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo metadata")
        return _to_photo(response.data[0])

    def list_photos(self, session_id: UUID) -> list[PhotoRecord]:
        """Return a session's photos ordered by index."""
        response = (
            self.client.table("uploaded_images")
            .select("id, session_id, photo_index, file_path, file_name, analyzed_at")
            .eq("session_id", str(session_id))
            .order("photo_index")
            .execute()
        )
        return [_to_photo(row) for row in response.data or []]

    def mark_analyzed(
        self, session_id: UUID, photo_index: int, analyzed_at: datetime
    ) -> None:
        """Record when a photo finished analysis."""
        self.client.table("uploaded_images").update(
            {"analyzed_at": analyzed_at.isoformat()}
        ).eq("session_id", str(session_id)).eq("photo_index", photo_index).execute()


def _to_photo(row: dict[str, object]) -> PhotoRecord:
    analyzed_at = row.get("analyzed_at")
    return PhotoRecord(
        id=UUID(str(row["id"])),
        session_id=UUID(str(row["session_id"])),
        photo_index=int(row["photo_index"]),
        file_path=str(row["file_path"]),
        file_name=str(row["file_name"]),
        analyzed_at=datetime.fromisoformat(str(analyzed_at)) if analyzed_at else None,
    )
