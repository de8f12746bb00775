"""Printable HTML inventory report."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID

from fastapi.templating import Jinja2Templates

from move_inventory.domain.inventory import InventoryItem, InventoryTotals, ItemSnapshot
from move_inventory.domain.reports import ClientInfo
from move_inventory.services.inventory import ItemRepository
from move_inventory.services.photos import PhotoService
from move_inventory.services.sessions import SessionService
from move_inventory.services.totals import compute_totals, group_by_room

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def signed_percent(safety_factor: float) -> str:
    """Format a safety factor as a signed whole percentage such as ``+20``."""
    value = round(safety_factor * 100)
    return f"+{value}" if value > 0 else str(value)


def report_templates() -> Jinja2Templates:
    """Return the report template set; output is autoescaped."""
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["signed_percent"] = signed_percent
    return templates


@dataclass(frozen=True)
class RoomSection:
    room: str
    items: list[InventoryItem | ItemSnapshot]
    totals: InventoryTotals


@dataclass(frozen=True)
class GalleryPhoto:
    index: int
    url: str


@dataclass
class ReportService:
    """Renders a session's inventory as a standalone HTML document."""

    session_service: SessionService
    item_repository: ItemRepository
    photo_service: PhotoService
    templates: Jinja2Templates = field(default_factory=report_templates)

    def render(self, session_id: UUID, client_info: ClientInfo) -> str:
        """Return the report HTML for a session."""
        session = self.session_service.get_session(session_id)
        items = self.item_repository.list_items(session_id)
        safety_factor = session.safety_factor
        sections = [
            RoomSection(room, room_items, compute_totals(room_items, safety_factor))
            for room, room_items in group_by_room(items).items()
        ]
        photos = [
            GalleryPhoto(photo.photo_index, self.photo_service.public_url(photo))
            for photo in self.photo_service.list_photos(session_id)
        ]
        template = self.templates.get_template("report.html")
        return template.render(
            client=client_info,
            session=session,
            generated_at=datetime.now(tz=UTC),
            totals=compute_totals(items, safety_factor),
            safety_factor=safety_factor,
            sections=sections,
            photos=photos,
        )
