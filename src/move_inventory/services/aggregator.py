"""Sequential per-photo item extraction with a running ledger."""

import logging
import re
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field

from move_inventory.domain.boxes import BOX_SIZES, BoxSpec, match_box
from move_inventory.domain.inventory import ESTIMATE_SUFFIX, ItemSnapshot
from move_inventory.domain.photos import Photo
from move_inventory.domain.rooms import RoomMap
from move_inventory.domain.vision import ExtractedItem
from move_inventory.services.vision import VisionService

logger = logging.getLogger(__name__)

_ESTIMATE_RE = re.compile(r"\(est\.?\)|\bestimated?\b", re.IGNORECASE)


@dataclass(frozen=True)
class PhotoResult:
    """Outcome of the extraction step for one photo."""

    photo_index: int
    rooms: tuple[str, ...]
    items: list[ItemSnapshot] = field(default_factory=list)
    repeats_dropped: int = 0
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class ItemAggregator:
    """Drives item extraction photo by photo, threading the ledger forward."""

    vision_service: VisionService

    async def iter_photos(
        self,
        photos: Sequence[Photo],
        room_map: RoomMap,
        already_found: Sequence[ItemSnapshot] = (),
    ) -> AsyncIterator[PhotoResult]:
        """Yield one result per photo in index order.

        Each result's items are in the ledger before the next photo is sent.
        """
        ledger = list(already_found)
        for photo in sorted(photos, key=lambda candidate: candidate.index):
            rooms = room_map.rooms_for(photo.index)
            try:
                extracted = await self.extract_for_photo(photo, rooms, ledger)
            except Exception as exc:
                logger.exception(
                    "Item extraction failed", extra={"photo_index": photo.index}
                )
                yield PhotoResult(photo_index=photo.index, rooms=rooms, error=exc)
                continue
            accepted = [item for item in extracted if not _is_repeat(item, ledger)]
            ledger.extend(accepted)
            yield PhotoResult(
                photo_index=photo.index,
                rooms=rooms,
                items=accepted,
                repeats_dropped=len(extracted) - len(accepted),
            )

    async def aggregate(
        self,
        photos: Sequence[Photo],
        room_map: RoomMap,
        already_found: Sequence[ItemSnapshot] = (),
    ) -> list[ItemSnapshot]:
        """Run the whole batch and return every accepted item."""
        items: list[ItemSnapshot] = []
        async for result in self.iter_photos(photos, room_map, already_found):
            items.extend(result.items)
        return items

    async def extract_for_photo(
        self,
        photo: Photo,
        rooms_for_photo: Sequence[str],
        already_found: Sequence[ItemSnapshot],
    ) -> list[ItemSnapshot]:
        """Extract and normalize the items of a single photo."""
        extracted = await self.vision_service.extract_items(
            photo, rooms_for_photo, already_found
        )
        items = [
            normalize_item(entry, photo.index, rooms_for_photo) for entry in extracted
        ]
        return merge_boxes(items)


def normalize_item(
    entry: ExtractedItem, photo_index: int, rooms_for_photo: Sequence[str]
) -> ItemSnapshot:
    """Close the room over the photo's rooms and apply box units."""
    name = entry.name
    volume = entry.volume
    weight = entry.weight
    box = _box_for(entry)
    if box is not None:
        estimated = _ESTIMATE_RE.search(name) is not None
        name = box.label + (ESTIMATE_SUFFIX if estimated else "")
        volume = box.volume
        weight = box.weight
    return ItemSnapshot(
        name=name,
        quantity=entry.quantity,
        volume=volume,
        weight=weight,
        room=_resolve_room(entry.room, rooms_for_photo),
        found_in_image=photo_index,
        ai_generated=True,
    )


def merge_boxes(items: list[ItemSnapshot]) -> list[ItemSnapshot]:
    """Sum the counts of identical box entries for the same room."""
    merged: list[ItemSnapshot] = []
    positions: dict[tuple[str, str | None], int] = {}
    for item in items:
        if match_box(item.name) is None:
            merged.append(item)
            continue
        key = (item.name, item.room)
        if key not in positions:
            positions[key] = len(merged)
            merged.append(item)
            continue
        current = merged[positions[key]]
        merged[positions[key]] = ItemSnapshot(
            name=current.name,
            quantity=current.quantity + item.quantity,
            volume=current.volume,
            weight=current.weight,
            room=current.room,
            found_in_image=current.found_in_image,
            ai_generated=current.ai_generated,
        )
    return merged


def _box_for(entry: ExtractedItem) -> BoxSpec | None:
    if entry.box_size is not None:
        return BOX_SIZES[entry.box_size]
    return match_box(entry.name)


def _resolve_room(room: str | None, rooms_for_photo: Sequence[str]) -> str | None:
    if not rooms_for_photo:
        return room
    if room:
        wanted = room.strip().lower()
        for candidate in rooms_for_photo:
            if candidate.lower() == wanted:
                return candidate
    return rooms_for_photo[0]


def _is_repeat(item: ItemSnapshot, ledger: Sequence[ItemSnapshot]) -> bool:
    """Return true when an earlier photo already recorded exactly this entry.

    Estimated box counts are never treated as repeats.
    """
    if item.is_estimate:
        return False
    key = _identity(item)
    return any(
        _identity(entry) == key
        and entry.quantity == item.quantity
        and entry.found_in_image != item.found_in_image
        for entry in ledger
    )


def _identity(item: ItemSnapshot) -> tuple[str, str]:
    return (" ".join(item.name.lower().split()), (item.room or "").lower())
