"""Buffer for in-progress item edits that have not been committed."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID


class DraftStore(Protocol):
    """Per-session store of pending field edits keyed by item id."""

    def stage(
        self, session_id: UUID, item_id: UUID, changes: dict[str, object]
    ) -> None:
        """Merge field edits into the pending edits for an item."""

    def pending(self, session_id: UUID) -> dict[UUID, dict[str, object]]:
        """Return pending edits for a session."""

    def clear(self, session_id: UUID) -> None:
        """Drop all pending edits for a session."""


@dataclass
class _DraftEntry:
    edits: dict[UUID, dict[str, object]] = field(default_factory=dict)
    expires_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


@dataclass
class InMemoryDraftStore(DraftStore):
    """In-memory draft store; abandoned drafts expire after a TTL."""

    ttl_seconds: int = 86400
    _entries: dict[UUID, _DraftEntry] = field(
        default_factory=dict, init=False, repr=False
    )

    def stage(
        self, session_id: UUID, item_id: UUID, changes: dict[str, object]
    ) -> None:
        """Merge edits and extend the session's draft lifetime."""
        entry = self._live_entry(session_id) or _DraftEntry()
        entry.edits.setdefault(item_id, {}).update(changes)
        entry.expires_at = datetime.now(tz=UTC) + timedelta(seconds=self.ttl_seconds)
        self._entries[session_id] = entry

    def pending(self, session_id: UUID) -> dict[UUID, dict[str, object]]:
        """Return a copy of the pending edits, if they haven't expired."""
        entry = self._live_entry(session_id)
        if entry is None:
            return {}
        return {item_id: dict(edits) for item_id, edits in entry.edits.items()}

    def clear(self, session_id: UUID) -> None:
        """Drop pending edits."""
        self._entries.pop(session_id, None)

    def _live_entry(self, session_id: UUID) -> _DraftEntry | None:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(session_id, None)
            return None
        return entry
