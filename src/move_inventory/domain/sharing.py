"""Domain models for shared inventory access."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

ACCESS_LEVELS = frozenset({"view", "edit"})


@dataclass(frozen=True)
class AccessToken:
    """Capability grant for a non-owner to read or edit a session."""

    id: UUID
    session_id: UUID
    token: UUID
    access_level: str
    recipient_name: str | None
    recipient_email: str | None
    notes: str | None
    created_by_name: str | None
    created_by_email: str | None
    created_at: datetime | None
    last_accessed_at: datetime | None
    access_count: int
    is_active: bool

    @property
    def can_edit(self) -> bool:
        """Return true when the grant allows mutations."""
        return self.access_level == "edit"
