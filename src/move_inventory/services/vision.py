"""Vision prompts and result parsing for room detection and item extraction."""

import base64
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from move_inventory.domain.boxes import BOX_SIZES
from move_inventory.domain.inventory import ESTIMATE_SUFFIX, ItemSnapshot
from move_inventory.domain.photos import Photo
from move_inventory.domain.rooms import ROOM_VOCABULARY
from move_inventory.domain.vision import ExtractedItem, RoomDetection
from move_inventory.errors import VisionParseError
from move_inventory.services.parsing import extract_json_array, extract_json_object

logger = logging.getLogger(__name__)

ROOM_SCHEMA_NAME = "room_detection"
ITEM_SCHEMA_NAME = "item_extraction"

ROOM_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "rooms_detected": {"type": "array", "items": {"type": "string"}},
        "image_room_mapping": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "image": {"type": "integer", "minimum": 1},
                    "rooms": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["image", "rooms"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["rooms_detected", "image_room_mapping"],
    "additionalProperties": False,
}

ITEM_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "integer", "minimum": 1},
                    "volume": {"type": "number", "minimum": 0.0},
                    "weight": {"type": "number", "minimum": 0.0},
                    "room": {"anyOf": [{"type": "string"}, {"type": "null"}]},
                    "box_size": {
                        "anyOf": [
                            {"type": "string", "enum": list(BOX_SIZES)},
                            {"type": "null"},
                        ]
                    },
                },
                "required": [
                    "name",
                    "quantity",
                    "volume",
                    "weight",
                    "room",
                    "box_size",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}


class VisionClient(Protocol):
    """Interface for LLM vision calls."""

    async def describe(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        image_data_urls: Sequence[str],
        schema: dict[str, object],
        schema_name: str,
    ) -> str:
        """Return the JSON answer text for a prompt over the given images."""


@dataclass
class VisionService:
    """Service that prepares vision prompts and interprets results."""

    client: VisionClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def detect_rooms(self, photos: Sequence[Photo]) -> RoomDetection:
        """Classify a whole batch of photos into rooms.

        Mapping keys in the result are 1-based positions within ``photos``.
        Raises ``VisionParseError`` when the answer is not usable.
        """
        raw = await self.client.describe(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=build_room_detection_prompt(len(photos)),
            image_data_urls=[to_data_url(photo) for photo in photos],
            schema=ROOM_SCHEMA,
            schema_name=ROOM_SCHEMA_NAME,
        )
        payload = extract_json_object(raw)
        if payload is None:
            raise VisionParseError("Room detection returned no JSON object")
        try:
            return RoomDetection.model_validate(payload)
        except ValidationError as exc:
            raise VisionParseError("Room detection returned malformed JSON") from exc

    async def extract_items(
        self,
        photo: Photo,
        rooms_for_image: Sequence[str],
        already_found: Sequence[ItemSnapshot],
    ) -> list[ExtractedItem]:
        """Extract items visible in one photo, skipping what is already recorded.

        Unparseable output yields an empty list.
        """
        raw = await self.client.describe(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=build_item_extraction_prompt(
                photo.index, rooms_for_image, already_found
            ),
            image_data_urls=[to_data_url(photo)],
            schema=ITEM_SCHEMA,
            schema_name=ITEM_SCHEMA_NAME,
        )
        entries = extract_json_array(raw)
        if entries is None:
            logger.warning(
                "Could not parse item list from vision output",
                extra={"photo_index": photo.index},
            )
            return []
        items: list[ExtractedItem] = []
        for entry in entries:
            try:
                items.append(ExtractedItem.model_validate(entry))
            except ValidationError:
                logger.warning(
                    "Skipping malformed item entry",
                    extra={"photo_index": photo.index, "entry": repr(entry)[:200]},
                )
        return items


def build_room_detection_prompt(image_count: int) -> str:
    """Build the batch room classification prompt."""
    vocabulary = ", ".join(ROOM_VOCABULARY)
    return (
        f"You are given {image_count} photos of a home, numbered 1 to "
        f"{image_count} in the order shown. Identify which room each photo "
        "depicts.\n"
        "Rules:\n"
        "- Photos of the same room from different angles are the SAME room. "
        "Matching architecture, furniture layout, flooring or fixed fittings "
        "mean the same room. When unsure, prefer fewer distinct rooms.\n"
        "- Only use numbered names such as 'Bedroom 1' and 'Bedroom 2' when "
        "there is clear evidence of genuinely different spaces (different "
        "layout, different floor or different purpose).\n"
        "- A photo may show more than one room, for example an open floor "
        "plan or a visible doorway; list every room it shows.\n"
        f"- Use these room names where possible: {vocabulary}. Use 'Other' "
        "for anything you cannot recognise.\n"
        "Return only JSON of the form "
        '{"rooms_detected": ["Kitchen", "Living Room"], '
        '"image_room_mapping": [{"image": 1, "rooms": ["Kitchen"]}, '
        '{"image": 2, "rooms": ["Kitchen", "Living Room"]}]}. '
        "Every room used in image_room_mapping must appear in rooms_detected."
    )


def build_item_extraction_prompt(
    image_index: int,
    rooms_for_image: Sequence[str],
    already_found: Sequence[ItemSnapshot],
) -> str:
    """Build the per-image extraction prompt with room and ledger context."""
    rooms = ", ".join(f'"{room}"' for room in rooms_for_image)
    box_lines = "\n".join(
        f"  - {spec.label}: {spec.volume:g} cu ft, {spec.weight:g} lbs per box"
        for spec in BOX_SIZES.values()
    )
    if already_found:
        ledger = "\n".join(
            f"  - {item.name} x{item.quantity} ({item.room or 'no room'})"
            for item in already_found
        )
    else:
        ledger = "  (nothing yet)"
    return (
        f"This is photo {image_index} of a home being inventoried for a move. "
        f"It shows: {rooms}.\n"
        "List the items that would be moved.\n"
        "Items already recorded from earlier photos:\n"
        f"{ledger}\n"
        "Do NOT list an item that is already recorded. Only list it again if "
        "this photo clearly shows additional units, and then give only the "
        "additional quantity.\n"
        f"Assign every item a room chosen ONLY from: {rooms}.\n"
        "Group identical items (for example 4 wooden dining chairs as one "
        "entry with quantity 4).\n"
        "Small or miscellaneous things that would be packed (books, "
        "kitchenware, linens, decor, toys) must be counted as boxes instead of "
        "individual items, using these box sizes:\n"
        f"{box_lines}\n"
        "For closed storage furniture (cabinets, closets, dressers, pantries, "
        "bookcases) estimate the boxes needed for the unseen contents, for "
        "example one closet is about 3 to 5 medium boxes. Name these entries "
        f"with the suffix '{ESTIMATE_SUFFIX.strip()}', for example "
        f"'Medium boxes{ESTIMATE_SUFFIX}'.\n"
        "Skip anything ambiguous or barely visible, and skip fixtures that "
        "stay with the property (built-ins, countertops, light fixtures).\n"
        "Return only a JSON object with an 'items' array where each element "
        "has: name (string), quantity (integer), volume (cu ft per unit), "
        "weight (lbs per unit), room (string), box_size (one of "
        f"{', '.join(BOX_SIZES)} for box entries, otherwise null)."
    )


def to_data_url(photo: Photo) -> str:
    """Convert a photo to a base64 data URL for image input."""
    encoded = base64.b64encode(photo.content).decode("utf-8")
    return f"data:{photo.mime_type};base64,{encoded}"
