"""Supabase-backed inventory item repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from move_inventory.domain.inventory import InventoryItem, ItemSnapshot
from move_inventory.services.inventory import ItemRepository

_COLUMNS = (
    "id, session_id, name, quantity, volume, weight, room, found_in_image, "
    "is_going, ai_generated"
)


@dataclass
class SupabaseItemRepository(ItemRepository):
    """Supabase implementation for inventory items."""

    client: Client

    def create_items(
        self, session_id: UUID, items: list[ItemSnapshot]
    ) -> list[InventoryItem]:
        """Insert items and return the stored rows."""
        if not items:
            return []
        payload = [
            {
                "session_id": str(session_id),
                "name": item.name,
                "quantity": item.quantity,
                "volume": item.volume,
                "weight": item.weight,
                "room": item.room,
                "found_in_image": item.found_in_image,
                "is_going": item.is_going,
                "ai_generated": item.ai_generated,
            }
            for item in items
        ]
        response = self.client.table("inventory_items").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create inventory items")
        return [_to_item(row) for row in response.data]

    def list_items(self, session_id: UUID) -> list[InventoryItem]:
        """Return all items of a session in insertion order."""
        response = (
            self.client.table("inventory_items")
            .select(_COLUMNS)
            .eq("session_id", str(session_id))
            .order("created_at")
            .execute()
        )
        return [_to_item(row) for row in response.data or []]

    def get_item(self, item_id: UUID) -> InventoryItem | None:
        """Return an item by id, if present."""
        response = (
            self.client.table("inventory_items")
            .select(_COLUMNS)
            .eq("id", str(item_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_item(response.data[0])

    def update_item(self, item_id: UUID, changes: dict[str, object]) -> InventoryItem:
        """Apply field changes and return the updated item."""
        response = (
            self.client.table("inventory_items")
            .update({**changes, "updated_at": datetime.now(tz=UTC).isoformat()})
            .eq("id", str(item_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update inventory item")
        return _to_item(response.data[0])

    def delete_item(self, item_id: UUID) -> None:
        """Delete an item."""
        self.client.table("inventory_items").delete().eq("id", str(item_id)).execute()


def _to_item(row: dict[str, object]) -> InventoryItem:
    found_in_image = row.get("found_in_image")
    return InventoryItem(
        id=UUID(str(row["id"])),
        session_id=UUID(str(row["session_id"])),
        name=str(row["name"]),
        quantity=int(row.get("quantity") or 1),
        volume=float(row.get("volume") or 0.0),
        weight=float(row.get("weight") or 0.0),
        room=row.get("room"),
        found_in_image=int(found_in_image) if found_in_image is not None else None,
        is_going=row.get("is_going") is not False,
        ai_generated=bool(row.get("ai_generated")),
    )
