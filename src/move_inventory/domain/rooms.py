"""Room vocabulary and the per-batch room mapping."""

from dataclasses import dataclass

FALLBACK_ROOM = "Unassigned"
OTHER_ROOM = "Other"

ROOM_VOCABULARY: tuple[str, ...] = (
    "Living Room",
    "Kitchen",
    "Bedroom",
    "Bathroom",
    "Office",
    "Dining Room",
    "Garage",
    "Basement",
    "Closet",
    "Laundry Room",
    "Hallway",
    "Shed",
    "Outdoor Area",
    "Storage Room",
    "Sun Room",
    "Patio",
    "Deck",
    "Balcony",
    "Attic",
    "Pantry",
    "Mudroom",
    OTHER_ROOM,
)


@dataclass(frozen=True)
class RoomMap:
    """Canonical rooms for a photo batch and the rooms each photo depicts.

    Every name in ``image_room_mapping`` also appears in ``rooms_detected``.
    """

    rooms_detected: tuple[str, ...]
    image_room_mapping: dict[int, tuple[str, ...]]
    is_fallback: bool = False

    def rooms_for(self, photo_index: int) -> tuple[str, ...]:
        """Return the rooms mapped to a photo, or the fallback room."""
        return self.image_room_mapping.get(photo_index, (FALLBACK_ROOM,))

    @classmethod
    def fallback(cls, photo_indices: list[int]) -> "RoomMap":
        """Build a degenerate one-room mapping for every photo."""
        return cls(
            rooms_detected=(FALLBACK_ROOM,),
            image_room_mapping={index: (FALLBACK_ROOM,) for index in photo_indices},
            is_fallback=True,
        )
