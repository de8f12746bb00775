"""Domain models for inventory items and totals."""

from dataclasses import dataclass
from uuid import UUID

ESTIMATE_SUFFIX = " (est.)"


@dataclass(frozen=True)
class ItemSnapshot:
    """Inventory item data without identity, as produced by analysis or entry."""

    name: str
    quantity: int
    volume: float
    weight: float
    room: str | None
    found_in_image: int | None = None
    is_going: bool = True
    ai_generated: bool = False

    @property
    def is_estimate(self) -> bool:
        """Return true when the entry is inferred rather than observed."""
        return self.name.endswith(ESTIMATE_SUFFIX)


@dataclass(frozen=True)
class InventoryItem:
    """Persisted inventory item row.

    ``volume`` and ``weight`` are per unit; ``quantity`` is the multiplier.
    """

    id: UUID
    session_id: UUID
    name: str
    quantity: int
    volume: float
    weight: float
    room: str | None
    found_in_image: int | None
    is_going: bool
    ai_generated: bool

    @property
    def is_estimate(self) -> bool:
        """Return true when the entry is inferred rather than observed."""
        return self.name.endswith(ESTIMATE_SUFFIX)

    def snapshot(self) -> ItemSnapshot:
        """Return the item without its identity."""
        return ItemSnapshot(
            name=self.name,
            quantity=self.quantity,
            volume=self.volume,
            weight=self.weight,
            room=self.room,
            found_in_image=self.found_in_image,
            is_going=self.is_going,
            ai_generated=self.ai_generated,
        )


@dataclass(frozen=True)
class InventoryTotals:
    """Summary totals with the safety factor applied."""

    total_items: int
    total_volume: float
    total_weight: float


@dataclass(frozen=True)
class RoomTotals:
    """Totals for a single room."""

    room: str
    totals: InventoryTotals
