"""Models for vision extraction results."""

import math
import re

from pydantic import BaseModel, Field, field_validator

from move_inventory.domain.boxes import box_size_key

_TRAILING_NUMBER_RE = re.compile(r"(\d+)\D*$")


class RoomDetection(BaseModel):
    """Raw room detection output for a batch of images."""

    rooms_detected: list[str] = Field(default_factory=list)
    image_room_mapping: dict[int, list[str]] = Field(default_factory=dict)

    @field_validator("rooms_detected", mode="before")
    @classmethod
    def _coerce_rooms(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [room for room in value if isinstance(room, str)]
        return value

    @field_validator("image_room_mapping", mode="before")
    @classmethod
    def _coerce_mapping(cls, value: object) -> object:
        """Accept ``{"1": [...]}`` or ``[{"image": 1, "rooms": [...]}]``.

        Keys such as ``"Image 2"`` or ``"photo_2"`` resolve to their number.
        """
        if isinstance(value, list):
            pairs = [
                (entry.get("image"), entry.get("rooms"))
                for entry in value
                if isinstance(entry, dict)
            ]
        elif isinstance(value, dict):
            pairs = list(value.items())
        else:
            return value
        coerced: dict[int, list[str]] = {}
        for key, rooms in pairs:
            index = _image_number(key)
            if index is None:
                continue
            if isinstance(rooms, str):
                rooms = [rooms]
            if isinstance(rooms, list):
                coerced.setdefault(index, []).extend(
                    room for room in rooms if isinstance(room, str)
                )
        return coerced


def _image_number(key: object) -> int | None:
    if isinstance(key, int) and not isinstance(key, bool):
        return key
    match = _TRAILING_NUMBER_RE.search(str(key).strip())
    return int(match.group(1)) if match else None


class ExtractedItem(BaseModel):
    """Single item reported by the vision model for one image."""

    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    volume: float = Field(default=0.0, ge=0.0)
    weight: float = Field(default=0.0, ge=0.0)
    room: str | None = None
    box_size: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("quantity", mode="before")
    @classmethod
    def _round_quantity(cls, value: object) -> object:
        if value is None:
            return 1
        if isinstance(value, float) and math.isfinite(value):
            return max(1, round(value))
        return value

    @field_validator("volume", "weight", mode="before")
    @classmethod
    def _default_measure(cls, value: object) -> object:
        return 0.0 if value is None else value

    @field_validator("box_size", mode="before")
    @classmethod
    def _normalize_box_size(cls, value: object) -> object:
        if not isinstance(value, str):
            return None
        return box_size_key(value)
