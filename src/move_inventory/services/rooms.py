"""Room resolution for a batch of photos."""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from move_inventory.domain.photos import Photo
from move_inventory.domain.rooms import FALLBACK_ROOM, ROOM_VOCABULARY, RoomMap
from move_inventory.domain.vision import RoomDetection
from move_inventory.services.vision import VisionService

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_NUMBERED_RE = re.compile(r"^(?P<base>.*?)\s*#?\s*(?P<number>\d+)$")
_VOCABULARY_BY_KEY = {room.lower(): room for room in ROOM_VOCABULARY}


@dataclass
class RoomResolver:
    """Turns raw room guesses into a canonical, closed room mapping."""

    vision_service: VisionService

    async def resolve(self, photos: Sequence[Photo]) -> RoomMap:
        """Classify all photos at once; never raises."""
        indices = [photo.index for photo in photos]
        if not photos:
            return RoomMap(rooms_detected=(), image_room_mapping={})
        try:
            detection = await self.vision_service.detect_rooms(photos)
        except Exception:
            logger.exception(
                "Room detection failed, using fallback room",
                extra={"photo_count": len(photos)},
            )
            return RoomMap.fallback(indices)
        room_map = build_room_map(detection, indices)
        if room_map is None:
            logger.warning(
                "Room detection returned no rooms, using fallback room",
                extra={"photo_count": len(photos)},
            )
            return RoomMap.fallback(indices)
        return room_map


def build_room_map(
    detection: RoomDetection, photo_indices: list[int]
) -> RoomMap | None:
    """Normalize a detection result against the photos of the batch.

    Mapping keys in ``detection`` are 1-based positions in ``photo_indices``.
    Returns None when the detection names no room at all.
    """
    rooms: list[str] = []
    for raw in detection.rooms_detected:
        _append_unique(rooms, canonical_room_name(raw))

    mapping: dict[int, tuple[str, ...]] = {}
    for position, rooms_for_image in sorted(detection.image_room_mapping.items()):
        if not 1 <= position <= len(photo_indices):
            continue
        names: list[str] = []
        for raw in rooms_for_image:
            _append_unique(names, canonical_room_name(raw))
        if names:
            mapping[photo_indices[position - 1]] = tuple(names)
            for name in names:
                _append_unique(rooms, name)

    if not rooms:
        return None
    # an unmapped photo can only be placed when the batch has a single room
    default_room = rooms[0] if len(rooms) == 1 else FALLBACK_ROOM
    for index in photo_indices:
        if index not in mapping:
            mapping[index] = (default_room,)
            _append_unique(rooms, default_room)
    return RoomMap(rooms_detected=tuple(rooms), image_room_mapping=mapping)


def canonical_room_name(raw: str) -> str:
    """Collapse whitespace and match the room vocabulary case-insensitively."""
    cleaned = _WHITESPACE_RE.sub(" ", raw).strip()
    if not cleaned:
        return ""
    known = _VOCABULARY_BY_KEY.get(cleaned.lower())
    if known:
        return known
    numbered = _NUMBERED_RE.match(cleaned)
    if numbered:
        base = _VOCABULARY_BY_KEY.get(numbered.group("base").strip().lower())
        if base:
            return f"{base} {int(numbered.group('number'))}"
    return cleaned


def _append_unique(names: list[str], name: str) -> None:
    if name and name not in names:
        names.append(name)
