"""Supabase-backed share token repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from move_inventory.domain.sharing import AccessToken
from move_inventory.services.sharing import AccessTokenRepository

_COLUMNS = (
    "id, session_id, token, access_level, recipient_name, recipient_email, notes, "
    "created_by_name, created_by_email, created_at, last_accessed_at, "
    "access_count, is_active"
)


@dataclass
class SupabaseAccessTokenRepository(AccessTokenRepository):
    """Supabase implementation for inventory access tokens."""

    client: Client

    def create_token(  # noqa: PLR0913
        self,
        session_id: UUID,
        token: UUID,
        access_level: str,
        recipient_name: str | None,
        recipient_email: str | None,
        notes: str | None,
        created_by_name: str,
        created_by_email: str,
    ) -> AccessToken:
        """Create a token row and return it."""
        response = (
            self.client.table("inventory_access_tokens")
            .insert(
                {
                    "session_id": str(session_id),
                    "token": str(token),
                    "access_level": access_level,
                    "recipient_name": recipient_name,
                    "recipient_email": recipient_email,
                    "notes": notes,
                    "created_by_name": created_by_name,
                    "created_by_email": created_by_email,
                    "access_count": 0,
                    "is_active": True,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create access token")
        return _to_token(response.data[0])

    def get_token(self, token_id: UUID) -> AccessToken | None:
        """Return a token by row id, if present."""
        return self._get_one("id", token_id)

    def get_by_token(self, token: UUID) -> AccessToken | None:
        """Return a token by its secret value, if present."""
        return self._get_one("token", token)

    def list_active(self, session_id: UUID) -> list[AccessToken]:
        """Return active tokens of a session, newest first."""
        response = (
            self.client.table("inventory_access_tokens")
            .select(_COLUMNS)
            .eq("session_id", str(session_id))
            .eq("is_active", True)
            .order("created_at", desc=True)
            .execute()
        )
        return [_to_token(row) for row in response.data or []]

    def record_access(
        self, token_id: UUID, access_count: int, accessed_at: datetime
    ) -> None:
        """Store the updated usage counters of a token."""
        self.client.table("inventory_access_tokens").update(
            {"access_count": access_count, "last_accessed_at": accessed_at.isoformat()}
        ).eq("id", str(token_id)).execute()

    def deactivate(self, token_id: UUID) -> None:
        """Revoke a token."""
        self.client.table("inventory_access_tokens").update({"is_active": False}).eq(
            "id", str(token_id)
        ).execute()

    def _get_one(self, column: str, value: UUID) -> AccessToken | None:
        response = (
            self.client.table("inventory_access_tokens")
            .select(_COLUMNS)
            .eq(column, str(value))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_token(response.data[0])


def _to_token(row: dict[str, object]) -> AccessToken:
    return AccessToken(
        id=UUID(str(row["id"])),
        session_id=UUID(str(row["session_id"])),
        token=UUID(str(row["token"])),
        access_level=str(row["access_level"]),
        recipient_name=row.get("recipient_name"),
        recipient_email=row.get("recipient_email"),
        notes=row.get("notes"),
        created_by_name=row.get("created_by_name"),
        created_by_email=row.get("created_by_email"),
        created_at=_parse_timestamp(row.get("created_at")),
        last_accessed_at=_parse_timestamp(row.get("last_accessed_at")),
        access_count=int(row.get("access_count") or 0),
        is_active=bool(row.get("is_active", True)),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value))
