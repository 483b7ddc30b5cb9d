"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from smart_pantry.adapters.httpx_push_client import HttpxPushClient
from smart_pantry.adapters.openai_generative_client import OpenAIGenerativeClient
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
from smart_pantry.config import Settings
from smart_pantry.services.inventory import InventoryService
from smart_pantry.services.notifications import NotificationService
from smart_pantry.services.receipts import ReceiptService
from smart_pantry.services.recipes import RecipeService
from smart_pantry.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    inventory_service: InventoryService
    stats_service: StatsService
    recipe_service: RecipeService
    receipt_service: ReceiptService
    notification_service: NotificationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    inventory_repository = SupabaseInventoryRepository(supabase_client)
    usage_repository = SupabaseUsageStatsRepository(supabase_client)
    notification_repository = SupabaseNotificationRepository(supabase_client)
    receipt_repository = SupabaseReceiptRepository(supabase_client)
    generative_client = OpenAIGenerativeClient.create(
        api_key=resolved_settings.openai_api_key,
        timeout=resolved_settings.openai_timeout_seconds,
    )
    push_client = HttpxPushClient.create(
        base_url=resolved_settings.push_service_url,
        token=resolved_settings.push_service_token,
    )

    inventory_service = InventoryService(inventory_repository)
    stats_service = StatsService(
        inventory_repository=inventory_repository,
        usage_repository=usage_repository,
        threshold_days=resolved_settings.expiry_threshold_days,
        waste_value_per_item=resolved_settings.waste_value_per_item,
        co2_kg_per_item=resolved_settings.co2_kg_per_item,
    )
    recipe_service = RecipeService(
        client=generative_client,
        inventory_repository=inventory_repository,
        model=resolved_settings.openai_model,
    )
    receipt_service = ReceiptService(
        client=generative_client,
        repository=receipt_repository,
        model=resolved_settings.openai_model,
    )
    notification_service = NotificationService(
        repository=notification_repository,
        inventory_repository=inventory_repository,
        push_client=push_client,
    )

    async def close_resources() -> None:
        await generative_client.close()
        await push_client.close()

    return AppContainer(
        settings=resolved_settings,
        inventory_service=inventory_service,
        stats_service=stats_service,
        recipe_service=recipe_service,
        receipt_service=receipt_service,
        notification_service=notification_service,
        close_resources=close_resources,
    )
