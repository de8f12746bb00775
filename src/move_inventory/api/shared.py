"""Share-link endpoints guarded by an access token."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse

from move_inventory.api.models import (
    ItemCreateRequest,
    ItemUpdateRequest,
    ReportRequest,
    item_payload,
    session_payload,
    totals_payload,
)
from move_inventory.domain.reports import ClientInfo
from move_inventory.services.sharing import SharedAccess
from move_inventory.services.totals import compute_totals

if TYPE_CHECKING:
    from move_inventory.containers import AppContainer

router = APIRouter(prefix="/shared", tags=["shared"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def open_share(token: str, request: Request) -> SharedAccess:
    """Validate the share token and count the visit."""
    return _container(request).sharing_service.open_share(token)


async def require_edit(token: str, request: Request) -> SharedAccess:
    """Validate the share token and ensure it grants edits."""
    sharing_service = _container(request).sharing_service
    access = sharing_service.open_share(token, record=False)
    sharing_service.require_edit(access)
    return access


@router.get("/{token}")
async def view_shared(
    request: Request, access: SharedAccess = Depends(open_share)
) -> dict[str, object]:
    """Return the shared session with its items and live totals."""
    container = _container(request)
    session = access.session
    items = container.inventory_service.list_items(session.id)
    return {
        "session": session_payload(session),
        "access_level": access.token.access_level,
        "items": [item_payload(item) for item in items],
        "totals": totals_payload(compute_totals(items, session.safety_factor)),
    }


@router.post("/{token}/items", status_code=status.HTTP_201_CREATED)
async def add_shared_item(
    payload: ItemCreateRequest,
    request: Request,
    access: SharedAccess = Depends(require_edit),
) -> dict[str, object]:
    """Add an item through an edit link."""
    item = _container(request).inventory_service.add_item(
        access.session.id, payload.model_dump()
    )
    return item_payload(item)


@router.patch("/{token}/items/{item_id}")
async def update_shared_item(
    item_id: UUID,
    payload: ItemUpdateRequest,
    request: Request,
    access: SharedAccess = Depends(require_edit),
) -> dict[str, object]:
    """Edit an item through an edit link."""
    item = _container(request).inventory_service.update_item(
        access.session.id, item_id, payload.model_dump(exclude_unset=True)
    )
    return item_payload(item)


@router.delete("/{token}/items/{item_id}")
async def delete_shared_item(
    item_id: UUID,
    request: Request,
    access: SharedAccess = Depends(require_edit),
) -> dict[str, str]:
    """Delete an item through an edit link."""
    _container(request).inventory_service.delete_item(access.session.id, item_id)
    return {"status": "deleted"}


@router.post("/{token}/report", response_class=HTMLResponse)
async def shared_report(
    payload: ReportRequest,
    request: Request,
    access: SharedAccess = Depends(open_share),
) -> HTMLResponse:
    """Render the report of a shared session."""
    report = _container(request).report_service.render(
        access.session.id,
        ClientInfo(
            client_name=payload.client_name,
            city=payload.city,
            quote_id=payload.quote_id,
        ),
    )
    return HTMLResponse(report)
