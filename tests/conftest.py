"""Shared test fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from smart_pantry.config import Settings
from smart_pantry.containers import AppContainer
from smart_pantry.domain.errors import ExternalServiceError
from smart_pantry.domain.inventory import Category, Ingredient, IngredientDraft
from smart_pantry.domain.notifications import NotificationPreferences, PushPayload
from smart_pantry.domain.receipts import ReceiptRecord
from smart_pantry.domain.stats import UsageOverride
from smart_pantry.services.generation import GenerativeClient
from smart_pantry.services.inventory import InventoryRepository, InventoryService
from smart_pantry.services.notifications import (
    NotificationRepository,
    NotificationService,
    PushClient,
)
from smart_pantry.services.receipts import ReceiptRepository, ReceiptService
from smart_pantry.services.recipes import RecipeService
from smart_pantry.services.stats import StatsService, UsageStatsRepository

FAKE_SERVICE_KEY = "eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZV9yb2xlIn0.signature"


def make_ingredient(  # noqa: PLR0913
    name: str,
    expiry_date: date,
    category: Category = Category.OTHER,
    owner_id: UUID | None = None,
    quantity: str = "1",
    confidence: float = 1.0,
) -> Ingredient:
    return Ingredient(
        id=uuid4(),
        owner_id=owner_id or uuid4(),
        name=name,
        category=category,
        quantity=quantity,
        expiry_date=expiry_date,
        confidence=confidence,
    )


@dataclass
class InMemoryInventoryRepository(InventoryRepository):
    """In-memory ingredient repository for tests."""

    items: dict[UUID, Ingredient] = field(default_factory=dict)
    create_calls: int = 0

    def add(self, item: Ingredient) -> Ingredient:
        self.items[item.id] = item
        return item

    def list_items(
        self,
        owner_id: UUID,
        search: str | None = None,
        category: Category | None = None,
    ) -> list[Ingredient]:
        results = [item for item in self.items.values() if item.owner_id == owner_id]
        if search:
            results = [item for item in results if search.lower() in item.name.lower()]
        if category is not None:
            results = [item for item in results if item.category == category]
        return results

    def get_item(self, owner_id: UUID, item_id: UUID) -> Ingredient | None:
        item = self.items.get(item_id)
        if item is None or item.owner_id != owner_id:
            return None
        return item

    def create_items(
        self, owner_id: UUID, drafts: Sequence[IngredientDraft]
    ) -> list[Ingredient]:
        self.create_calls += 1
        created = [
            self.add(
                Ingredient(
                    id=uuid4(),
                    owner_id=owner_id,
                    name=draft.name,
                    category=draft.category,
                    quantity=draft.quantity,
                    expiry_date=draft.expiry_date,
                    confidence=draft.confidence,
                )
            )
            for draft in drafts
        ]
        return created

    def update_item(
        self, owner_id: UUID, item_id: UUID, changes: dict[str, object]
    ) -> Ingredient | None:
        current = self.get_item(owner_id, item_id)
        if current is None:
            return None
        updated = replace(current, **changes)
        self.items[item_id] = updated
        return updated

    def delete_item(self, owner_id: UUID, item_id: UUID) -> bool:
        if self.get_item(owner_id, item_id) is None:
            return False
        del self.items[item_id]
        return True


@dataclass
class InMemoryUsageStatsRepository(UsageStatsRepository):
    """In-memory monthly usage figures for tests."""

    overrides: dict[tuple[UUID, str], UsageOverride] = field(default_factory=dict)

    def get_month(self, owner_id: UUID, month: str) -> UsageOverride | None:
        return self.overrides.get((owner_id, month))


@dataclass
class InMemoryNotificationRepository(NotificationRepository):
    """In-memory users and notification preferences for tests."""

    user_ids: list[UUID] = field(default_factory=list)
    preferences: dict[UUID, NotificationPreferences] = field(default_factory=dict)

    def list_users_with_preferences(
        self,
    ) -> list[tuple[UUID, NotificationPreferences | None]]:
        return [(user_id, self.preferences.get(user_id)) for user_id in self.user_ids]

    def get_preferences(self, user_id: UUID) -> NotificationPreferences | None:
        return self.preferences.get(user_id)

    def save_preferences(
        self, user_id: UUID, preferences: NotificationPreferences
    ) -> NotificationPreferences:
        self.preferences[user_id] = preferences
        return preferences


@dataclass
class InMemoryReceiptRepository(ReceiptRepository):
    """In-memory processed receipts for tests."""

    records: dict[UUID, list[ReceiptRecord]] = field(default_factory=dict)

    def record(self, owner_id: UUID, raw_text: str, items_count: int) -> ReceiptRecord:
        stored = self.records.setdefault(owner_id, [])
        receipt = ReceiptRecord(
            id=uuid4(),
            raw_text=raw_text,
            items_count=items_count,
            processed_at=datetime(2024, 6, 10, tzinfo=UTC)
            + timedelta(minutes=len(stored)),
        )
        stored.append(receipt)
        return receipt

    def list_recent(self, owner_id: UUID, limit: int) -> list[ReceiptRecord]:
        stored = self.records.get(owner_id, [])
        newest_first = sorted(stored, key=lambda item: item.processed_at, reverse=True)
        return newest_first[:limit]


@dataclass
class FakeGenerativeClient(GenerativeClient):
    """Fake generator returning queued responses and recording prompts."""

    responses: list[str] = field(default_factory=list)
    error: ExternalServiceError | None = None
    prompts: list[str] = field(default_factory=list)
    schema_names: list[str] = field(default_factory=list)

    async def generate(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> str:
        self.prompts.append(prompt)
        self.schema_names.append(schema_name)
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


@dataclass
class FakePushClient(PushClient):
    """Fake push client that records payloads."""

    sent: list[PushPayload] = field(default_factory=list)
    failing_users: set[UUID] = field(default_factory=set)

    async def send(self, payload: PushPayload) -> None:
        if payload.user_id in self.failing_users:
            raise ExternalServiceError("push service unavailable")
        self.sent.append(payload)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=FAKE_SERVICE_KEY,
        admin_token="admin-token",
        openai_api_key="openai-key",
        push_service_url="https://push.example.com",
    )


@pytest.fixture
def inventory_repository() -> InMemoryInventoryRepository:
    return InMemoryInventoryRepository()


@pytest.fixture
def usage_repository() -> InMemoryUsageStatsRepository:
    return InMemoryUsageStatsRepository()


@pytest.fixture
def notification_repository() -> InMemoryNotificationRepository:
    return InMemoryNotificationRepository()


@pytest.fixture
def receipt_repository() -> InMemoryReceiptRepository:
    return InMemoryReceiptRepository()


@pytest.fixture
def generative_client() -> FakeGenerativeClient:
    return FakeGenerativeClient()


@pytest.fixture
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    inventory_repository: InMemoryInventoryRepository,
    usage_repository: InMemoryUsageStatsRepository,
    notification_repository: InMemoryNotificationRepository,
    receipt_repository: InMemoryReceiptRepository,
    generative_client: FakeGenerativeClient,
    push_client: FakePushClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        inventory_service=InventoryService(inventory_repository),
        stats_service=StatsService(
            inventory_repository=inventory_repository,
            usage_repository=usage_repository,
            threshold_days=settings.expiry_threshold_days,
        ),
        recipe_service=RecipeService(
            client=generative_client,
            inventory_repository=inventory_repository,
            model=settings.openai_model,
        ),
        receipt_service=ReceiptService(
            client=generative_client,
            repository=receipt_repository,
            model=settings.openai_model,
        ),
        notification_service=NotificationService(
            repository=notification_repository,
            inventory_repository=inventory_repository,
            push_client=push_client,
        ),
        close_resources=close_resources,
    )
