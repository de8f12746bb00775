"""Pydantic request models and response shaping for the HTTP API."""

import base64
import binascii
from uuid import UUID

from pydantic import BaseModel, Field

from move_inventory.domain.inventory import InventoryItem, InventoryTotals
from move_inventory.domain.photos import PhotoUpload
from move_inventory.domain.sessions import InventorySession
from move_inventory.domain.sharing import AccessToken
from move_inventory.errors import InvalidPhotoError


class CreateSessionRequest(BaseModel):
    """Payload for creating a session."""

    name: str | None = None


class SafetyFactorRequest(BaseModel):
    """Payload for changing the safety factor."""

    safety_factor: float


class PhotoPayload(BaseModel):
    """One photo encoded as base64 or as a data URL."""

    file_name: str = "photo.jpg"
    data: str

    def to_upload(self) -> PhotoUpload:
        """Decode the payload into raw bytes."""
        encoded = self.data
        if encoded.startswith("data:"):
            _, _, encoded = encoded.partition(",")
        try:
            content = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidPhotoError(f"{self.file_name}: Invalid base64 data") from exc
        return PhotoUpload(file_name=self.file_name, content=content)


class AnalyzeRequest(BaseModel):
    """Batch of photos to analyze."""

    photos: list[PhotoPayload] = Field(min_length=1)


class ItemCreateRequest(BaseModel):
    """Manually entered item."""

    name: str
    quantity: int = 1
    volume: float = 0.0
    weight: float = 0.0
    room: str | None = None
    is_going: bool = True


class ItemUpdateRequest(BaseModel):
    """Partial item edit; only the fields sent are changed."""

    name: str | None = None
    quantity: int | None = None
    volume: float | None = None
    weight: float | None = None
    room: str | None = None
    is_going: bool | None = None


class ShareRequest(BaseModel):
    """Payload for issuing a share link."""

    access_level: str = "view"
    shared_by_name: str
    shared_by_email: str
    recipient_name: str | None = None
    recipient_email: str | None = None
    notes: str | None = None


class ReportRequest(BaseModel):
    """Client details for a report."""

    client_name: str
    city: str
    quote_id: str | None = None


def totals_payload(totals: InventoryTotals) -> dict[str, object]:
    return {
        "total_items": totals.total_items,
        "total_volume": totals.total_volume,
        "total_weight": totals.total_weight,
    }


def session_payload(session: InventorySession) -> dict[str, object]:
    return {
        "id": str(session.id),
        "name": session.name,
        "status": session.status,
        "safety_factor": session.safety_factor,
        "totals": totals_payload(session.totals),
        "totals_stale": session.totals_stale,
        "access_mode": session.access_mode,
        "shared_at": session.shared_at.isoformat() if session.shared_at else None,
        "shared_by_name": session.shared_by_name,
        "shared_by_email": session.shared_by_email,
    }


def item_payload(item: InventoryItem) -> dict[str, object]:
    return {
        "id": str(item.id),
        "session_id": str(item.session_id),
        "name": item.name,
        "quantity": item.quantity,
        "volume": item.volume,
        "weight": item.weight,
        "room": item.room,
        "found_in_image": item.found_in_image,
        "is_going": item.is_going,
        "ai_generated": item.ai_generated,
        "is_estimate": item.is_estimate,
    }


def token_payload(token: AccessToken) -> dict[str, object]:
    return {
        "id": str(token.id),
        "session_id": str(token.session_id),
        "token": str(token.token),
        "access_level": token.access_level,
        "recipient_name": token.recipient_name,
        "recipient_email": token.recipient_email,
        "notes": token.notes,
        "created_at": token.created_at.isoformat() if token.created_at else None,
        "last_accessed_at": (
            token.last_accessed_at.isoformat() if token.last_accessed_at else None
        ),
        "access_count": token.access_count,
    }


def drafts_payload(pending: dict[UUID, dict[str, object]]) -> dict[str, object]:
    return {str(item_id): changes for item_id, changes in pending.items()}
