"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID, uuid4

import pytest

from smart_pantry.adapters.supabase_inventory_repository import (
    SupabaseInventoryRepository,
)
from smart_pantry.adapters.supabase_notification_repository import (
    SupabaseNotificationRepository,
)
from smart_pantry.adapters.supabase_receipt_repository import (
    SupabaseReceiptRepository,
)
from smart_pantry.adapters.supabase_usage_stats_repository import (
    SupabaseUsageStatsRepository,
)
from smart_pantry.domain.inventory import Category, IngredientDraft
from smart_pantry.domain.notifications import NotificationPreferences


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_options: dict[str, object] = field(default_factory=dict)
    last_filters: list[tuple[str, object]] = field(default_factory=list)

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

    def upsert(self, payload, **options) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_options = options
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _ingredient_row(owner_id: UUID, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "user_id": str(owner_id),
        "name": "Milk",
        "category": "Dairy",
        "quantity": "1 L",
        "expiry_date": "2024-06-15",
        "confidence": 0.9,
    }
    row.update(overrides)
    return row


def test_inventory_repository_lists_and_skips_bad_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("ingredients")
    owner_id = uuid4()
    table.queue(
        "select",
        [
            _ingredient_row(owner_id),
            _ingredient_row(owner_id, expiry_date="not-a-date"),
            _ingredient_row(owner_id, category="Frozen"),
            _ingredient_row(
                owner_id, expiry_date="2024-06-20T00:00:00+00:00", confidence=0
            ),
        ],
    )

    repository = SupabaseInventoryRepository(client)
    items = repository.list_items(owner_id, search="mil", category=Category.DAIRY)

    assert len(items) == 2
    assert items[0].category is Category.DAIRY
    assert items[1].expiry_date == date(2024, 6, 20)
    assert items[1].confidence == 0.0
    assert ("name", "%mil%") in table.last_filters
    assert ("category", "Dairy") in table.last_filters


def test_inventory_repository_creates_in_one_insert() -> None:
    client = FakeSupabaseClient()
    table = client.table("ingredients")
    owner_id = uuid4()
    table.queue(
        "insert",
        [_ingredient_row(owner_id), _ingredient_row(owner_id, name="Eggs")],
    )
    drafts = [
        IngredientDraft(
            name="Milk",
            category=Category.DAIRY,
            quantity="1 L",
            expiry_date=date(2024, 6, 15),
        ),
        IngredientDraft(
            name="Eggs",
            category=Category.DAIRY,
            quantity="12",
            expiry_date=date(2024, 6, 15),
        ),
    ]

    repository = SupabaseInventoryRepository(client)
    created = repository.create_items(owner_id, drafts)

    assert [item.name for item in created] == ["Milk", "Eggs"]
    assert isinstance(table.last_payload, list)
    assert table.last_payload[0]["expiry_date"] == "2024-06-15"
    assert table.last_payload[0]["category"] == "Dairy"
    assert table.last_payload[0]["user_id"] == str(owner_id)


def test_inventory_repository_update_and_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("ingredients")
    owner_id = uuid4()
    row = _ingredient_row(owner_id, quantity="2 L")
    table.queue("update", [row])
    table.queue("delete", [])

    repository = SupabaseInventoryRepository(client)
    updated = repository.update_item(
        owner_id,
        UUID(str(row["id"])),
        {"quantity": "2 L", "expiry_date": date(2024, 6, 18)},
    )
    deleted = repository.delete_item(owner_id, uuid4())

    assert updated is not None
    assert updated.quantity == "2 L"
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["expiry_date"] == "2024-06-18"
    assert "updated_at" in table.last_payload
    assert ("user_id", str(owner_id)) in table.last_filters
    assert deleted is False


def test_inventory_repository_get_missing_item() -> None:
    repository = SupabaseInventoryRepository(FakeSupabaseClient())

    assert repository.get_item(uuid4(), uuid4()) is None


def test_inventory_repository_raises_when_insert_returns_nothing() -> None:
    repository = SupabaseInventoryRepository(FakeSupabaseClient())
    draft = IngredientDraft(
        name="Milk", category=Category.DAIRY, quantity="1", expiry_date=date.today()
    )

    with pytest.raises(RuntimeError):
        repository.create_items(uuid4(), [draft])


def test_usage_stats_repository() -> None:
    client = FakeSupabaseClient()
    client.table("usage_stats").queue(
        "select", [{"month": "2024-06", "estimated_savings": 18, "co2_saved": None}]
    )

    repository = SupabaseUsageStatsRepository(client)
    override = repository.get_month(uuid4(), "2024-06")
    missing = repository.get_month(uuid4(), "2024-07")

    assert override is not None
    assert override.estimated_savings == 18.0
    assert override.co2_saved is None
    assert missing is None


def test_notification_repository_joins_users_and_preferences() -> None:
    client = FakeSupabaseClient()
    with_prefs = str(uuid4())
    without_prefs = str(uuid4())
    client.table("users").queue("select", [{"id": with_prefs}, {"id": without_prefs}])
    client.table("notification_preferences").queue(
        "select",
        [
            {
                "user_id": with_prefs,
                "expiry_days_before": 0,
                "daily_summary": False,
                "notify_time": None,
                "enabled": True,
            }
        ],
    )

    repository = SupabaseNotificationRepository(client)
    users = repository.list_users_with_preferences()

    assert users == [
        (
            UUID(with_prefs),
            NotificationPreferences(
                expiry_days_before=0,
                daily_summary=False,
                notify_time="09:00",
                enabled=True,
            ),
        ),
        (UUID(without_prefs), None),
    ]


def test_notification_repository_upserts_preferences() -> None:
    client = FakeSupabaseClient()
    table = client.table("notification_preferences")
    user_id = uuid4()
    table.queue(
        "upsert",
        [
            {
                "user_id": str(user_id),
                "expiry_days_before": 5,
                "daily_summary": True,
                "notify_time": "08:00",
                "enabled": False,
            }
        ],
    )

    repository = SupabaseNotificationRepository(client)
    saved = repository.save_preferences(
        user_id,
        NotificationPreferences(
            expiry_days_before=5, notify_time="08:00", enabled=False
        ),
    )

    assert saved.enabled is False
    assert table.last_options == {"on_conflict": "user_id"}
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["user_id"] == str(user_id)
    assert repository.get_preferences(uuid4()) is None


def test_receipt_repository_records_and_lists_history() -> None:
    client = FakeSupabaseClient()
    table = client.table("receipts")
    owner_id = uuid4()
    receipt_id = str(uuid4())
    table.queue(
        "insert",
        [
            {
                "id": receipt_id,
                "raw_text": "MILK 3.99",
                "items_count": 1,
                "processed_at": "2024-06-10T09:00:00+00:00",
            }
        ],
    )
    table.queue(
        "select",
        [
            {
                "id": receipt_id,
                "raw_text": "MILK 3.99",
                "items_count": 1,
                "processed_at": "2024-06-10T09:00:00+00:00",
            }
        ],
    )

    repository = SupabaseReceiptRepository(client)
    recorded = repository.record(owner_id, "MILK 3.99", 1)
    payload = table.last_payload
    history = repository.list_recent(owner_id, 50)

    assert recorded.id == UUID(receipt_id)
    assert recorded.processed_at.hour == 9
    assert isinstance(payload, dict)
    assert payload["user_id"] == str(owner_id)
    assert payload["items_count"] == 1
    assert history == [recorded]
    assert ("user_id", str(owner_id)) in table.last_filters


def test_receipt_repository_raises_when_insert_returns_nothing() -> None:
    repository = SupabaseReceiptRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.record(uuid4(), "MILK", 1)
