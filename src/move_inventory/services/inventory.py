"""Inventory item editing with a draft buffer."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from move_inventory.domain.inventory import InventoryItem, InventoryTotals, ItemSnapshot
from move_inventory.errors import InvalidItemError, ItemNotFoundError
from move_inventory.services.drafts import DraftStore
from move_inventory.services.sessions import SessionService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {"name", "quantity", "volume", "weight", "room", "is_going"}
)


class ItemRepository(Protocol):
    """Persistence interface for inventory items."""

    def create_items(
        self, session_id: UUID, items: list[ItemSnapshot]
    ) -> list[InventoryItem]:
        """Insert items and return the stored rows."""

    def list_items(self, session_id: UUID) -> list[InventoryItem]:
        """Return all items of a session."""

    def get_item(self, item_id: UUID) -> InventoryItem | None:
        """Return an item by id, if present."""

    def update_item(self, item_id: UUID, changes: dict[str, object]) -> InventoryItem:
        """Apply field changes and return the updated item."""

    def delete_item(self, item_id: UUID) -> None:
        """Delete an item."""


@dataclass
class InventoryService:
    """Reads and mutates the items of a session."""

    item_repository: ItemRepository
    session_service: SessionService
    drafts: DraftStore

    def list_items(self, session_id: UUID) -> list[InventoryItem]:
        """Return a session's items."""
        self.session_service.get_session(session_id)
        return self.item_repository.list_items(session_id)

    def add_item(self, session_id: UUID, fields: dict[str, object]) -> InventoryItem:
        """Add a manually entered item."""
        self.session_service.get_session(session_id)
        changes = validate_item_changes(fields)
        if "name" not in changes:
            raise InvalidItemError("Item name is required")
        snapshot = ItemSnapshot(
            name=changes["name"],
            quantity=changes.get("quantity", 1),
            volume=changes.get("volume", 0.0),
            weight=changes.get("weight", 0.0),
            room=changes.get("room"),
            is_going=changes.get("is_going", True),
            ai_generated=False,
        )
        (created,) = self.item_repository.create_items(session_id, [snapshot])
        self.session_service.mark_stale(session_id)
        return created

    def update_item(
        self, session_id: UUID, item_id: UUID, fields: dict[str, object]
    ) -> InventoryItem:
        """Apply edits to an item immediately."""
        self._require_item(session_id, item_id)
        changes = validate_item_changes(fields)
        if not changes:
            raise InvalidItemError("No editable fields given")
        updated = self.item_repository.update_item(item_id, changes)
        self.session_service.mark_stale(session_id)
        return updated

    def delete_item(self, session_id: UUID, item_id: UUID) -> None:
        """Delete an item."""
        self._require_item(session_id, item_id)
        self.item_repository.delete_item(item_id)
        self.session_service.mark_stale(session_id)

    def stage_edit(
        self, session_id: UUID, item_id: UUID, fields: dict[str, object]
    ) -> dict[str, object]:
        """Buffer edits for an item without touching totals."""
        self._require_item(session_id, item_id)
        changes = validate_item_changes(fields)
        if not changes:
            raise InvalidItemError("No editable fields given")
        self.drafts.stage(session_id, item_id, changes)
        return self.drafts.pending(session_id)[item_id]

    def pending_edits(self, session_id: UUID) -> dict[UUID, dict[str, object]]:
        """Return buffered edits."""
        self.session_service.get_session(session_id)
        return self.drafts.pending(session_id)

    def discard_edits(self, session_id: UUID) -> None:
        """Drop buffered edits."""
        self.session_service.get_session(session_id)
        self.drafts.clear(session_id)

    def commit_edits(self, session_id: UUID) -> InventoryTotals:
        """Apply buffered edits, then recompute totals."""
        self.session_service.get_session(session_id)
        pending = self.drafts.pending(session_id)
        for item_id, changes in pending.items():
            item = self.item_repository.get_item(item_id)
            if item is None or item.session_id != session_id:
                logger.warning(
                    "Skipping draft for missing item",
                    extra={"session_id": str(session_id), "item_id": str(item_id)},
                )
                continue
            self.item_repository.update_item(item_id, changes)
        self.drafts.clear(session_id)
        return self.session_service.recompute_totals(session_id)

    def _require_item(self, session_id: UUID, item_id: UUID) -> InventoryItem:
        self.session_service.get_session(session_id)
        item = self.item_repository.get_item(item_id)
        if item is None or item.session_id != session_id:
            raise ItemNotFoundError(f"Item {item_id} not found")
        return item


def validate_item_changes(fields: dict[str, object]) -> dict[str, object]:
    """Validate editable item fields, dropping keys that are not editable."""
    changes: dict[str, object] = {}
    for key, value in fields.items():
        if key not in EDITABLE_FIELDS:
            continue
        if key == "name":
            if not isinstance(value, str) or not value.strip():
                raise InvalidItemError("Item name must be a non-empty string")
            changes[key] = value.strip()
        elif key == "quantity":
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidItemError("Quantity must be a positive integer")
            changes[key] = value
        elif key in {"volume", "weight"}:
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise InvalidItemError(f"{key.capitalize()} must be a number")
            if value < 0:
                raise InvalidItemError(f"{key.capitalize()} cannot be negative")
            changes[key] = float(value)
        elif key == "room":
            if value is None:
                changes[key] = None
            elif isinstance(value, str):
                changes[key] = value.strip() or None
            else:
                raise InvalidItemError("Room must be a string")
        elif key == "is_going":
            if not isinstance(value, bool):
                raise InvalidItemError("is_going must be a boolean")
            changes[key] = value
    return changes
