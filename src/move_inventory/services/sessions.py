"""Inventory session lifecycle and cached totals."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from move_inventory.domain.inventory import InventoryItem, InventoryTotals
from move_inventory.domain.sessions import InventorySession
from move_inventory.errors import SessionNotFoundError
from move_inventory.services.totals import compute_totals, validate_safety_factor

logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for inventory sessions."""

    def create_session(
        self, name: str | None, safety_factor: float
    ) -> InventorySession:
        """Create a new session and return it."""

    def get_session(self, session_id: UUID) -> InventorySession | None:
        """Return a session by id, if present."""

    def update_safety_factor(self, session_id: UUID, safety_factor: float) -> None:
        """Store a new safety factor."""

    def update_totals(self, session_id: UUID, totals: InventoryTotals) -> None:
        """Store computed totals and clear the stale flag."""

    def mark_totals_stale(self, session_id: UUID) -> None:
        """Flag cached totals as out of date."""

    def mark_shared(
        self,
        session_id: UUID,
        shared_by_name: str,
        shared_by_email: str,
        shared_at: datetime,
    ) -> None:
        """Record that the session has been shared."""


class ItemSource(Protocol):
    """Read access to a session's items."""

    def list_items(self, session_id: UUID) -> list[InventoryItem]:
        """Return all items of a session."""


@dataclass
class SessionService:
    """Creates, loads and totals inventory sessions."""

    session_repository: SessionRepository
    item_source: ItemSource
    default_safety_factor: float = 0.2

    def create_session(self, name: str | None = None) -> InventorySession:
        """Create a session, named after today's date when no name is given."""
        resolved_name = name or (
            f"Inventory Session {datetime.now(tz=UTC).date().isoformat()}"
        )
        session = self.session_repository.create_session(
            resolved_name, validate_safety_factor(self.default_safety_factor)
        )
        logger.info(
            "Created inventory session", extra={"session_id": str(session.id)}
        )
        return session

    def get_session(self, session_id: UUID) -> InventorySession:
        """Return a session or raise when it does not exist."""
        session = self.session_repository.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def set_safety_factor(self, session_id: UUID, value: float) -> InventoryTotals:
        """Store an allowed safety factor and recompute totals with it."""
        safety_factor = validate_safety_factor(value)
        self.get_session(session_id)
        self.session_repository.update_safety_factor(session_id, safety_factor)
        return self._recompute(session_id, safety_factor)

    def mark_stale(self, session_id: UUID) -> None:
        """Flag cached totals as out of date after an item mutation."""
        self.session_repository.mark_totals_stale(session_id)

    def recompute_totals(self, session_id: UUID) -> InventoryTotals:
        """Recompute totals from stored items and cache them."""
        session = self.get_session(session_id)
        return self._recompute(session_id, session.safety_factor)

    def get_totals(self, session_id: UUID) -> tuple[InventoryTotals, bool]:
        """Return cached totals and whether they are stale."""
        session = self.get_session(session_id)
        return session.totals, session.totals_stale

    def _recompute(self, session_id: UUID, safety_factor: float) -> InventoryTotals:
        items = self.item_source.list_items(session_id)
        totals = compute_totals(items, safety_factor)
        self.session_repository.update_totals(session_id, totals)
        return totals
