"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from move_inventory.adapters.supabase_access_token_repository import (
    SupabaseAccessTokenRepository,
)
from move_inventory.adapters.supabase_item_repository import SupabaseItemRepository
from move_inventory.adapters.supabase_photo_repository import SupabasePhotoRepository
from move_inventory.adapters.supabase_photo_storage import SupabasePhotoStorage
from move_inventory.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from move_inventory.domain.inventory import InventoryTotals, ItemSnapshot


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    actions: list[str] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        self.actions.append(action)
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeBucket:
    name: str
    uploads: list[dict[str, object]] = field(default_factory=list)

    def upload(self, path: str, file: bytes, file_options: dict[str, str]) -> None:
        self.uploads.append({"path": path, "file": file, "options": file_options})

    def get_public_url(self, path: str) -> str:
        return f"https://project.supabase.co/storage/v1/public/{self.name}/{path}"


@dataclass
class FakeStorage:
    buckets: dict[str, FakeBucket] = field(default_factory=dict)

    def from_(self, name: str) -> FakeBucket:
        if name not in self.buckets:
            self.buckets[name] = FakeBucket(name=name)
        return self.buckets[name]


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    storage: FakeStorage = field(default_factory=FakeStorage)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _session_row(session_id: str, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": session_id,
        "name": "Oak Street",
        "status": "active",
        "safety_factor": 0.2,
        "total_items": 3,
        "total_volume": 36.0,
        "total_weight": 120.0,
        "totals_stale": False,
        "access_mode": "private",
    }
    row.update(overrides)
    return row


def test_supabase_session_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    sessions_table = client.table("inventory_sessions")
    session_id = str(uuid4())
    sessions_table.queue("insert", [_session_row(session_id, total_items=0)])
    sessions_table.queue(
        "select",
        [
            _session_row(
                session_id,
                access_mode="shared",
                shared_at="2026-03-01T10:00:00+00:00",
                shared_by_name="Dana",
            )
        ],
    )

    repository = SupabaseSessionRepository(client)
    created = repository.create_session("Oak Street", 0.2)
    fetched = repository.get_session(created.id)

    assert str(created.id) == session_id
    assert isinstance(sessions_table.last_payload, dict)
    assert sessions_table.last_payload["safety_factor"] == 0.2
    assert fetched is not None
    assert fetched.totals == InventoryTotals(3, 36.0, 120.0)
    assert fetched.access_mode == "shared"
    assert fetched.shared_at == datetime(2026, 3, 1, 10, tzinfo=UTC)


def test_supabase_session_repository_missing_session() -> None:
    repository = SupabaseSessionRepository(FakeSupabaseClient())

    assert repository.get_session(uuid4()) is None


def test_supabase_session_repository_updates_totals() -> None:
    client = FakeSupabaseClient()
    sessions_table = client.table("inventory_sessions")
    session_id = uuid4()

    repository = SupabaseSessionRepository(client)
    repository.update_totals(session_id, InventoryTotals(2, 12.0, 48.0))

    payload = sessions_table.last_payload
    assert isinstance(payload, dict)
    assert payload["total_volume"] == 12.0
    assert payload["totals_stale"] is False
    assert "updated_at" in payload
    assert sessions_table.last_filters[-1] == ("id", str(session_id))

    repository.mark_totals_stale(session_id)
    assert isinstance(sessions_table.last_payload, dict)
    assert sessions_table.last_payload["totals_stale"] is True


def test_supabase_session_repository_create_failure() -> None:
    repository = SupabaseSessionRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.create_session(None, 0.2)


def test_supabase_item_repository_bulk_insert() -> None:
    client = FakeSupabaseClient()
    items_table = client.table("inventory_items")
    session_id = uuid4()
    items_table.queue(
        "insert",
        [
            {
                "id": str(uuid4()),
                "session_id": str(session_id),
                "name": "Medium boxes",
                "quantity": 4,
                "volume": 3.0,
                "weight": 25.0,
                "room": "Kitchen",
                "found_in_image": 2,
                "is_going": True,
                "ai_generated": True,
            }
        ],
    )

    repository = SupabaseItemRepository(client)
    created = repository.create_items(
        session_id,
        [
            ItemSnapshot(
                name="Medium boxes",
                quantity=4,
                volume=3.0,
                weight=25.0,
                room="Kitchen",
                found_in_image=2,
                ai_generated=True,
            )
        ],
    )

    assert isinstance(items_table.last_payload, list)
    assert items_table.last_payload[0]["session_id"] == str(session_id)
    assert created[0].quantity == 4
    assert created[0].found_in_image == 2
    assert created[0].ai_generated is True


def test_supabase_item_repository_skips_empty_insert() -> None:
    client = FakeSupabaseClient()

    repository = SupabaseItemRepository(client)

    assert repository.create_items(uuid4(), []) == []
    assert "inventory_items" not in client.tables


def test_supabase_item_repository_insert_failure() -> None:
    repository = SupabaseItemRepository(FakeSupabaseClient())
    snapshot = ItemSnapshot(name="Sofa", quantity=1, volume=35, weight=100, room=None)

    with pytest.raises(RuntimeError):
        repository.create_items(uuid4(), [snapshot])


def test_supabase_item_repository_lists_and_updates() -> None:
    client = FakeSupabaseClient()
    items_table = client.table("inventory_items")
    session_id = uuid4()
    row = {
        "id": str(uuid4()),
        "session_id": str(session_id),
        "name": "Sofa",
        "quantity": 1,
        "volume": None,
        "weight": 100,
        "room": None,
        "found_in_image": None,
        "is_going": None,
        "ai_generated": False,
    }
    items_table.queue("select", [row])
    items_table.queue("update", [{**row, "is_going": False}])

    repository = SupabaseItemRepository(client)
    items = repository.list_items(session_id)
    updated = repository.update_item(items[0].id, {"is_going": False})

    assert items_table.last_order == ("created_at", False)
    assert items[0].volume == 0.0
    assert items[0].found_in_image is None
    assert items[0].is_going is True
    assert updated.is_going is False
    assert isinstance(items_table.last_payload, dict)
    assert items_table.last_payload["is_going"] is False


def test_supabase_item_repository_deletes_and_misses() -> None:
    client = FakeSupabaseClient()
    items_table = client.table("inventory_items")
    item_id = uuid4()

    repository = SupabaseItemRepository(client)
    repository.delete_item(item_id)

    assert items_table.actions == ["delete"]
    assert items_table.last_filters == [("id", str(item_id))]
    assert repository.get_item(uuid4()) is None


def test_supabase_photo_repository() -> None:
    client = FakeSupabaseClient()
    photos_table = client.table("uploaded_images")
    session_id = uuid4()
    row = {
        "id": str(uuid4()),
        "session_id": str(session_id),
        "photo_index": 1,
        "file_path": f"{session_id}_1_1700000000000.jpg",
        "file_name": "kitchen.jpg",
        "analyzed_at": None,
    }
    photos_table.queue("insert", [row])
    photos_table.queue(
        "select", [{**row, "analyzed_at": "2026-03-01T10:00:00+00:00"}]
    )

    repository = SupabasePhotoRepository(client)
    created = repository.create_photo(
        session_id, 1, str(row["file_path"]), "kitchen.jpg"
    )
    listed = repository.list_photos(session_id)
    repository.mark_analyzed(session_id, 1, datetime(2026, 3, 1, tzinfo=UTC))

    assert created.analyzed_at is None
    assert listed[0].analyzed_at == datetime(2026, 3, 1, 10, tzinfo=UTC)
    assert photos_table.last_order == ("photo_index", False)
    assert photos_table.last_filters[-2:] == [
        ("session_id", str(session_id)),
        ("photo_index", 1),
    ]


def test_supabase_photo_storage_uploads_with_content_type() -> None:
    client = FakeSupabaseClient()

    storage = SupabasePhotoStorage(client, "inventory-images")
    storage.put("abc_1.png", b"png-bytes", "image/png")

    bucket = client.storage.buckets["inventory-images"]
    assert bucket.uploads == [
        {
            "path": "abc_1.png",
            "file": b"png-bytes",
            "options": {"content-type": "image/png"},
        }
    ]
    assert storage.public_url("abc_1.png").endswith("/inventory-images/abc_1.png")


def test_supabase_access_token_repository() -> None:
    client = FakeSupabaseClient()
    tokens_table = client.table("inventory_access_tokens")
    session_id = uuid4()
    token_value = uuid4()
    row = {
        "id": str(uuid4()),
        "session_id": str(session_id),
        "token": str(token_value),
        "access_level": "edit",
        "recipient_name": None,
        "recipient_email": None,
        "notes": None,
        "created_by_name": "Dana",
        "created_by_email": "dana@example.com",
        "created_at": "2026-03-01T10:00:00+00:00",
        "last_accessed_at": None,
        "access_count": 0,
        "is_active": True,
    }
    tokens_table.queue("insert", [row])
    tokens_table.queue("select", [row])
    tokens_table.queue("select", [row])

    repository = SupabaseAccessTokenRepository(client)
    created = repository.create_token(
        session_id=session_id,
        token=token_value,
        access_level="edit",
        recipient_name=None,
        recipient_email=None,
        notes=None,
        created_by_name="Dana",
        created_by_email="dana@example.com",
    )
    fetched = repository.get_by_token(token_value)
    active = repository.list_active(session_id)

    assert created.can_edit
    assert fetched is not None
    assert fetched.token == token_value
    assert active[0].created_at == datetime(2026, 3, 1, 10, tzinfo=UTC)
    assert tokens_table.last_order == ("created_at", True)
    assert ("is_active", True) in tokens_table.last_filters

    repository.record_access(created.id, 3, datetime(2026, 3, 2, tzinfo=UTC))
    assert isinstance(tokens_table.last_payload, dict)
    assert tokens_table.last_payload["access_count"] == 3

    repository.deactivate(created.id)
    assert tokens_table.last_payload == {"is_active": False}
    assert tokens_table.last_filters[-1] == ("id", str(created.id))
