"""Totals accumulation for inventory sessions."""

from collections.abc import Iterable

from move_inventory.domain.inventory import (
    InventoryItem,
    InventoryTotals,
    ItemSnapshot,
    RoomTotals,
)
from move_inventory.domain.rooms import FALLBACK_ROOM
from move_inventory.errors import InvalidSafetyFactorError

ALLOWED_SAFETY_FACTORS: tuple[float, ...] = (-0.1, 0.0, 0.1, 0.2, 0.3, 0.4)
DEFAULT_SAFETY_FACTOR = 0.2
_PRECISION = 6


def compute_totals(
    items: Iterable[InventoryItem | ItemSnapshot], safety_factor: float
) -> InventoryTotals:
    """Sum going items and apply the safety factor to volume and weight."""
    total_items = 0
    volume = 0.0
    weight = 0.0
    for item in items:
        if item.is_going is False:
            continue
        total_items += item.quantity
        volume += item.volume * item.quantity
        weight += item.weight * item.quantity
    multiplier = 1 + safety_factor
    return InventoryTotals(
        total_items=total_items,
        total_volume=round(volume * multiplier, _PRECISION),
        total_weight=round(weight * multiplier, _PRECISION),
    )


def totals_by_room(
    items: Iterable[InventoryItem | ItemSnapshot], safety_factor: float
) -> list[RoomTotals]:
    """Return per-room totals, rooms sorted by name."""
    grouped = group_by_room(items)
    return [
        RoomTotals(room=room, totals=compute_totals(room_items, safety_factor))
        for room, room_items in grouped.items()
    ]


def group_by_room(
    items: Iterable[InventoryItem | ItemSnapshot],
) -> dict[str, list[InventoryItem | ItemSnapshot]]:
    """Group items by room name, sorted by room then item name."""
    grouped: dict[str, list[InventoryItem | ItemSnapshot]] = {}
    for item in items:
        grouped.setdefault(item.room or FALLBACK_ROOM, []).append(item)
    return {
        room: sorted(grouped[room], key=lambda item: item.name.lower())
        for room in sorted(grouped)
    }


def validate_safety_factor(value: float) -> float:
    """Return the canonical allowed safety factor matching value."""
    for allowed in ALLOWED_SAFETY_FACTORS:
        if abs(allowed - value) < 1e-9:
            return allowed
    allowed_text = ", ".join(str(factor) for factor in ALLOWED_SAFETY_FACTORS)
    raise InvalidSafetyFactorError(f"Safety factor must be one of {allowed_text}")

