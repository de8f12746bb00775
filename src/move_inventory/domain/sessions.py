"""Domain models for inventory sessions."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from move_inventory.domain.inventory import InventoryTotals


@dataclass(frozen=True)
class InventorySession:
    """Represents a persisted inventory session."""

    id: UUID
    name: str | None
    status: str
    safety_factor: float
    totals: InventoryTotals
    totals_stale: bool
    access_mode: str = "private"
    shared_at: datetime | None = None
    shared_by_name: str | None = None
    shared_by_email: str | None = None
