"""Supabase Storage bucket for photo bytes."""

from dataclasses import dataclass

from supabase import Client

from move_inventory.services.photos import PhotoStorage


@dataclass
class SupabasePhotoStorage(PhotoStorage):
    """Stores photos in a public Supabase Storage bucket."""

    client: Client
    bucket: str

    def put(self, path: str, content: bytes, content_type: str) -> None:
        """Upload bytes under a path."""
        self.client.storage.from_(self.bucket).upload(
            path=path, file=content, file_options={"content-type": content_type}
        )

    def public_url(self, path: str) -> str:
        """Return the public URL of a stored object."""
        return self.client.storage.from_(self.bucket).get_public_url(path)
