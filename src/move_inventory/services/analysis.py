"""Photo batch analysis: store, detect rooms, extract and persist items."""

import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from uuid import UUID

from move_inventory.domain.inventory import InventoryTotals
from move_inventory.domain.photos import Photo, PhotoUpload
from move_inventory.services.aggregator import ItemAggregator
from move_inventory.services.inventory import ItemRepository
from move_inventory.services.photos import PhotoService
from move_inventory.services.rooms import RoomResolver
from move_inventory.services.sessions import SessionService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisEvent:
    """Progress notification emitted while a batch is analyzed."""

    event: str
    total_photos: int
    photo_index: int | None = None
    rooms: tuple[str, ...] = ()
    items_found: int = 0
    message: str | None = None
    totals: InventoryTotals | None = None

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-ready representation."""
        payload: dict[str, object] = {
            "event": self.event,
            "total_photos": self.total_photos,
        }
        if self.photo_index is not None:
            payload["photo_index"] = self.photo_index
        if self.rooms:
            payload["rooms"] = list(self.rooms)
        if self.event == "photo_analyzed":
            payload["items_found"] = self.items_found
        if self.message:
            payload["message"] = self.message
        if self.totals is not None:
            payload["totals"] = {
                "total_items": self.totals.total_items,
                "total_volume": self.totals.total_volume,
                "total_weight": self.totals.total_weight,
            }
        return payload


@dataclass
class AnalysisService:
    """Runs the two-pass analysis for a batch of uploaded photos."""

    photo_service: PhotoService
    room_resolver: RoomResolver
    aggregator: ItemAggregator
    item_repository: ItemRepository
    session_service: SessionService
    include_error_detail: bool = False

    def prepare_batch(
        self, session_id: UUID, uploads: Sequence[PhotoUpload]
    ) -> list[Photo]:
        """Validate and store uploads for a session."""
        self.session_service.get_session(session_id)
        return self.photo_service.prepare_uploads(session_id, uploads)

    async def run(
        self, session_id: UUID, photos: Sequence[Photo]
    ) -> AsyncIterator[AnalysisEvent]:
        """Analyze photos in index order, persisting each photo's items."""
        total = len(photos)
        try:
            existing = [
                item.snapshot() for item in self.item_repository.list_items(session_id)
            ]
        except Exception:
            logger.exception(
                "Failed to load existing items, starting with an empty ledger",
                extra={"session_id": str(session_id)},
            )
            existing = []
        room_map = await self.room_resolver.resolve(photos)
        yield AnalysisEvent(
            event="rooms_detected",
            total_photos=total,
            rooms=room_map.rooms_detected,
            message="Room detection failed, using fallback room"
            if room_map.is_fallback
            else None,
        )

        async for result in self.aggregator.iter_photos(photos, room_map, existing):
            if result.error is not None:
                yield AnalysisEvent(
                    event="photo_failed",
                    total_photos=total,
                    photo_index=result.photo_index,
                    rooms=result.rooms,
                    message=self._error_message(
                        result.error, "Couldn't analyze this photo."
                    ),
                )
                continue
            try:
                if result.items:
                    self.item_repository.create_items(session_id, result.items)
                    self.session_service.mark_stale(session_id)
                self.photo_service.mark_analyzed(session_id, result.photo_index)
            except Exception as exc:
                logger.exception(
                    "Failed to save analyzed items",
                    extra={
                        "session_id": str(session_id),
                        "photo_index": result.photo_index,
                    },
                )
                yield AnalysisEvent(
                    event="persist_failed",
                    total_photos=total,
                    photo_index=result.photo_index,
                    rooms=result.rooms,
                    message=self._error_message(
                        exc, "Couldn't save the items of this photo."
                    ),
                )
                continue
            yield AnalysisEvent(
                event="photo_analyzed",
                total_photos=total,
                photo_index=result.photo_index,
                rooms=result.rooms,
                items_found=len(result.items),
            )

        totals: InventoryTotals | None
        try:
            totals = self.session_service.recompute_totals(session_id)
        except Exception as exc:
            logger.exception(
                "Failed to recompute totals", extra={"session_id": str(session_id)}
            )
            totals = None
            yield AnalysisEvent(
                event="totals_failed",
                total_photos=total,
                message=self._error_message(
                    exc, "Couldn't update the session totals."
                ),
            )
        logger.info(
            "Analysis completed",
            extra={"session_id": str(session_id), "photo_count": total},
        )
        yield AnalysisEvent(event="completed", total_photos=total, totals=totals)

    def _error_message(self, exc: Exception, fallback: str) -> str:
        if self.include_error_detail:
            detail = f"{type(exc).__name__}: {exc}".strip()
            if detail:
                return f"{fallback} (debug: {detail})"
        return fallback
