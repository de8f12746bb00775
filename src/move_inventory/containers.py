"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from move_inventory.adapters.openai_vision_client import OpenAIVisionClient
from move_inventory.adapters.supabase_access_token_repository import (
    SupabaseAccessTokenRepository,
)
from move_inventory.adapters.supabase_item_repository import SupabaseItemRepository
from move_inventory.adapters.supabase_photo_repository import SupabasePhotoRepository
from move_inventory.adapters.supabase_photo_storage import SupabasePhotoStorage
from move_inventory.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from move_inventory.config import Settings
from move_inventory.services.aggregator import ItemAggregator
from move_inventory.services.analysis import AnalysisService
from move_inventory.services.drafts import InMemoryDraftStore
from move_inventory.services.inventory import InventoryService
from move_inventory.services.photos import PhotoService
from move_inventory.services.reports import ReportService
from move_inventory.services.rooms import RoomResolver
from move_inventory.services.sessions import SessionService
from move_inventory.services.sharing import SharingService
from move_inventory.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    inventory_service: InventoryService
    photo_service: PhotoService
    analysis_service: AnalysisService
    sharing_service: SharingService
    report_service: ReportService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseSessionRepository(supabase_client)
    item_repository = SupabaseItemRepository(supabase_client)
    photo_repository = SupabasePhotoRepository(supabase_client)
    token_repository = SupabaseAccessTokenRepository(supabase_client)
    photo_storage = SupabasePhotoStorage(
        supabase_client, bucket=resolved_settings.storage_bucket
    )
    openai_client = OpenAIVisionClient.create(resolved_settings.openai_api_key)
    vision_service = VisionService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    session_service = SessionService(
        session_repository=session_repository,
        item_source=item_repository,
        default_safety_factor=resolved_settings.default_safety_factor,
    )
    inventory_service = InventoryService(
        item_repository=item_repository,
        session_service=session_service,
        drafts=InMemoryDraftStore(ttl_seconds=resolved_settings.draft_ttl_seconds),
    )
    photo_service = PhotoService(
        storage=photo_storage,
        repository=photo_repository,
        max_bytes=resolved_settings.max_photo_bytes,
    )
    analysis_service = AnalysisService(
        photo_service=photo_service,
        room_resolver=RoomResolver(vision_service),
        aggregator=ItemAggregator(vision_service),
        item_repository=item_repository,
        session_service=session_service,
        include_error_detail=resolved_settings.environment == "local",
    )
    sharing_service = SharingService(
        token_repository=token_repository,
        session_service=session_service,
    )
    report_service = ReportService(
        session_service=session_service,
        item_repository=item_repository,
        photo_service=photo_service,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        inventory_service=inventory_service,
        photo_service=photo_service,
        analysis_service=analysis_service,
        sharing_service=sharing_service,
        report_service=report_service,
        close_resources=close_resources,
    )
