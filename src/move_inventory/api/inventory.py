"""Owner endpoints for sessions, analysis, items, drafts, totals and shares."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, StreamingResponse

from move_inventory.api.models import (
    AnalyzeRequest,
    CreateSessionRequest,
    ItemCreateRequest,
    ItemUpdateRequest,
    ReportRequest,
    SafetyFactorRequest,
    ShareRequest,
    drafts_payload,
    item_payload,
    session_payload,
    token_payload,
    totals_payload,
)
from move_inventory.domain.reports import ClientInfo
from move_inventory.services.totals import totals_by_room

if TYPE_CHECKING:
    from move_inventory.containers import AppContainer
    from move_inventory.domain.photos import Photo

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: CreateSessionRequest, request: Request
) -> dict[str, object]:
    """Start a new inventory session."""
    session = _container(request).session_service.create_session(payload.name)
    return session_payload(session)


@router.get("/{session_id}")
async def get_session(session_id: UUID, request: Request) -> dict[str, object]:
    """Return a session with its cached totals."""
    session = _container(request).session_service.get_session(session_id)
    return session_payload(session)


@router.put("/{session_id}/safety-factor")
async def set_safety_factor(
    session_id: UUID, payload: SafetyFactorRequest, request: Request
) -> dict[str, object]:
    """Change the safety factor and return recomputed totals."""
    totals = _container(request).session_service.set_safety_factor(
        session_id, payload.safety_factor
    )
    return {"safety_factor": payload.safety_factor, "totals": totals_payload(totals)}


@router.post("/{session_id}/analyze")
async def analyze_photos(
    session_id: UUID, payload: AnalyzeRequest, request: Request
) -> StreamingResponse:
    """Store a photo batch and stream analysis progress as NDJSON."""
    container = _container(request)
    uploads = [photo.to_upload() for photo in payload.photos]
    photos = container.analysis_service.prepare_batch(session_id, uploads)
    return StreamingResponse(
        _ndjson_events(container, session_id, photos),
        media_type="application/x-ndjson",
    )


async def _ndjson_events(
    container: AppContainer, session_id: UUID, photos: list[Photo]
) -> AsyncIterator[str]:
    async for event in container.analysis_service.run(session_id, photos):
        yield json.dumps(event.as_dict()) + "\n"


@router.get("/{session_id}/photos")
async def list_photos(session_id: UUID, request: Request) -> dict[str, object]:
    """Return the session's photos with public URLs."""
    container = _container(request)
    container.session_service.get_session(session_id)
    photos = container.photo_service.list_photos(session_id)
    return {
        "photos": [
            {
                "id": str(photo.id),
                "photo_index": photo.photo_index,
                "file_name": photo.file_name,
                "url": container.photo_service.public_url(photo),
                "analyzed_at": (
                    photo.analyzed_at.isoformat() if photo.analyzed_at else None
                ),
            }
            for photo in photos
        ]
    }


@router.get("/{session_id}/items")
async def list_items(session_id: UUID, request: Request) -> dict[str, object]:
    """Return the session's items."""
    items = _container(request).inventory_service.list_items(session_id)
    return {"items": [item_payload(item) for item in items]}


@router.post("/{session_id}/items", status_code=status.HTTP_201_CREATED)
async def add_item(
    session_id: UUID, payload: ItemCreateRequest, request: Request
) -> dict[str, object]:
    """Add a manual item."""
    item = _container(request).inventory_service.add_item(
        session_id, payload.model_dump()
    )
    return item_payload(item)


@router.patch("/{session_id}/items/{item_id}")
async def update_item(
    session_id: UUID, item_id: UUID, payload: ItemUpdateRequest, request: Request
) -> dict[str, object]:
    """Apply edits to an item immediately."""
    item = _container(request).inventory_service.update_item(
        session_id, item_id, payload.model_dump(exclude_unset=True)
    )
    return item_payload(item)


@router.delete("/{session_id}/items/{item_id}")
async def delete_item(
    session_id: UUID, item_id: UUID, request: Request
) -> dict[str, str]:
    """Delete an item."""
    _container(request).inventory_service.delete_item(session_id, item_id)
    return {"status": "deleted"}


@router.get("/{session_id}/drafts")
async def list_drafts(session_id: UUID, request: Request) -> dict[str, object]:
    """Return buffered edits."""
    pending = _container(request).inventory_service.pending_edits(session_id)
    return {"drafts": drafts_payload(pending)}


@router.patch("/{session_id}/drafts/{item_id}")
async def stage_draft(
    session_id: UUID, item_id: UUID, payload: ItemUpdateRequest, request: Request
) -> dict[str, object]:
    """Buffer edits for an item."""
    changes = _container(request).inventory_service.stage_edit(
        session_id, item_id, payload.model_dump(exclude_unset=True)
    )
    return {"item_id": str(item_id), "changes": changes}


@router.delete("/{session_id}/drafts")
async def discard_drafts(session_id: UUID, request: Request) -> dict[str, str]:
    """Drop buffered edits."""
    _container(request).inventory_service.discard_edits(session_id)
    return {"status": "discarded"}


@router.post("/{session_id}/drafts/commit")
async def commit_drafts(session_id: UUID, request: Request) -> dict[str, object]:
    """Apply buffered edits and recompute totals."""
    totals = _container(request).inventory_service.commit_edits(session_id)
    return {"totals": totals_payload(totals)}


@router.get("/{session_id}/totals")
async def get_totals(session_id: UUID, request: Request) -> dict[str, object]:
    """Return cached totals, the stale flag and live per-room subtotals."""
    container = _container(request)
    session = container.session_service.get_session(session_id)
    totals, stale = container.session_service.get_totals(session_id)
    items = container.inventory_service.list_items(session_id)
    return {
        "totals": totals_payload(totals),
        "stale": stale,
        "safety_factor": session.safety_factor,
        "rooms": [
            {"room": room.room, **totals_payload(room.totals)}
            for room in totals_by_room(items, session.safety_factor)
        ],
    }


@router.post("/{session_id}/totals/recompute")
async def recompute_totals(session_id: UUID, request: Request) -> dict[str, object]:
    """Recompute totals from stored items."""
    totals = _container(request).session_service.recompute_totals(session_id)
    return {"totals": totals_payload(totals), "stale": False}


@router.post("/{session_id}/shares", status_code=status.HTTP_201_CREATED)
async def create_share(
    session_id: UUID, payload: ShareRequest, request: Request
) -> dict[str, object]:
    """Issue a share link."""
    token = _container(request).sharing_service.create_share(
        session_id,
        access_level=payload.access_level,
        shared_by_name=payload.shared_by_name,
        shared_by_email=payload.shared_by_email,
        recipient_name=payload.recipient_name,
        recipient_email=payload.recipient_email,
        notes=payload.notes,
    )
    return token_payload(token)


@router.get("/{session_id}/shares")
async def list_shares(session_id: UUID, request: Request) -> dict[str, object]:
    """Return active share links."""
    tokens = _container(request).sharing_service.list_shares(session_id)
    return {"shares": [token_payload(token) for token in tokens]}


@router.delete("/{session_id}/shares/{token_id}")
async def revoke_share(
    session_id: UUID, token_id: UUID, request: Request
) -> dict[str, str]:
    """Revoke a share link."""
    _container(request).sharing_service.revoke_share(session_id, token_id)
    return {"status": "revoked"}


@router.post("/{session_id}/report", response_class=HTMLResponse)
async def render_report(
    session_id: UUID, payload: ReportRequest, request: Request
) -> HTMLResponse:
    """Render the printable inventory report."""
    report = _container(request).report_service.render(
        session_id,
        ClientInfo(
            client_name=payload.client_name,
            city=payload.city,
            quote_id=payload.quote_id,
        ),
    )
    return HTMLResponse(report)
