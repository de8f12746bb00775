"""Supabase-backed inventory session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from move_inventory.domain.inventory import InventoryTotals
from move_inventory.domain.sessions import InventorySession
from move_inventory.services.sessions import SessionRepository

_COLUMNS = (
    "id, name, status, safety_factor, total_items, total_volume, total_weight, "
    "totals_stale, access_mode, shared_at, shared_by_name, shared_by_email"
)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for inventory sessions."""

    client: Client

    def create_session(
        self, name: str | None, safety_factor: float
    ) -> InventorySession:
        """Create a session row and return it."""
        response = (
            self.client.table("inventory_sessions")
            .insert(
                {
                    "name": name,
                    "status": "active",
                    "safety_factor": safety_factor,
                    "total_items": 0,
                    "total_volume": 0,
                    "total_weight": 0,
                    "totals_stale": False,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create inventory session")
        return _to_session(response.data[0])

    def get_session(self, session_id: UUID) -> InventorySession | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("inventory_sessions")
            .select(_COLUMNS)
            .eq("id", str(session_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_session(response.data[0])

    def update_safety_factor(self, session_id: UUID, safety_factor: float) -> None:
        """Store a new safety factor."""
        self._update(session_id, {"safety_factor": safety_factor})

    def update_totals(self, session_id: UUID, totals: InventoryTotals) -> None:
        """Store computed totals and clear the stale flag."""
        self._update(
            session_id,
            {
                "total_items": totals.total_items,
                "total_volume": totals.total_volume,
                "total_weight": totals.total_weight,
                "totals_stale": False,
            },
        )

    def mark_totals_stale(self, session_id: UUID) -> None:
        """Flag cached totals as out of date."""
        self._update(session_id, {"totals_stale": True})

    def mark_shared(
        self,
        session_id: UUID,
        shared_by_name: str,
        shared_by_email: str,
        shared_at: datetime,
    ) -> None:
        """Record that the session has been shared."""
        self._update(
            session_id,
            {
                "access_mode": "shared",
                "shared_at": shared_at.isoformat(),
                "shared_by_name": shared_by_name,
                "shared_by_email": shared_by_email,
            },
        )

    def _update(self, session_id: UUID, payload: dict[str, object]) -> None:
        self.client.table("inventory_sessions").update(
            {**payload, "updated_at": datetime.now(tz=UTC).isoformat()}
        ).eq("id", str(session_id)).execute()


def _to_session(row: dict[str, object]) -> InventorySession:
    shared_at = row.get("shared_at")
    return InventorySession(
        id=UUID(str(row["id"])),
        name=row.get("name"),
        status=str(row.get("status") or "active"),
        safety_factor=float(row.get("safety_factor") or 0.0),
        totals=InventoryTotals(
            total_items=int(row.get("total_items") or 0),
            total_volume=float(row.get("total_volume") or 0.0),
            total_weight=float(row.get("total_weight") or 0.0),
        ),
        totals_stale=bool(row.get("totals_stale")),
        access_mode=str(row.get("access_mode") or "private"),
        shared_at=datetime.fromisoformat(str(shared_at)) if shared_at else None,
        shared_by_name=row.get("shared_by_name"),
        shared_by_email=row.get("shared_by_email"),
    )
