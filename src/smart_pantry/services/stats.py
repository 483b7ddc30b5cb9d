"""Inventory statistics: freshness counts and savings estimates."""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from smart_pantry.domain.freshness import (
    DEFAULT_THRESHOLD_DAYS,
    FreshnessBucket,
    classify,
)
from smart_pantry.domain.inventory import Category, Ingredient
from smart_pantry.domain.stats import InventorySummary, UsageOverride
from smart_pantry.services.inventory import InventoryRepository

WASTE_VALUE_PER_ITEM = 3.5
CO2_KG_PER_ITEM = 0.8


class UsageStatsRepository(Protocol):
    """Persistence interface for monthly usage figures."""

    def get_month(self, owner_id: UUID, month: str) -> UsageOverride | None:
        """Return the stored figures for a month, if any."""


def month_key(day: date) -> str:
    """Return the ``YYYY-MM`` period a day belongs to."""
    return day.strftime("%Y-%m")


def summarize(  # noqa: PLR0913
    items: Sequence[Ingredient],
    reference_date: date,
    threshold_days: int = DEFAULT_THRESHOLD_DAYS,
    override: UsageOverride | None = None,
    *,
    waste_value_per_item: float = WASTE_VALUE_PER_ITEM,
    co2_kg_per_item: float = CO2_KG_PER_ITEM,
) -> InventorySummary:
    """Classify every item and aggregate counts and savings estimates.

    The freshness counts are always computed from ``items``. When an override
    is given, each figure it carries replaces the matching heuristic estimate.
    """
    counts = dict.fromkeys(FreshnessBucket, 0)
    by_category = {category.value: 0 for category in Category}
    for item in items:
        status = classify(item.expiry_date, reference_date, threshold_days)
        counts[status.bucket] += 1
        by_category[item.category.value] += 1

    total = len(items)
    expired = counts[FreshnessBucket.EXPIRED]
    kept = total - expired
    waste_saved = round(kept * waste_value_per_item, 2)
    co2_reduced = round(kept * co2_kg_per_item, 2)

    override_applied = False
    if override is not None:
        if override.estimated_savings is not None:
            waste_saved = override.estimated_savings
            override_applied = True
        if override.co2_saved is not None:
            co2_reduced = override.co2_saved
            override_applied = True

    return InventorySummary(
        total=total,
        expiring=counts[FreshnessBucket.EXPIRING_SOON],
        expired=expired,
        fresh=counts[FreshnessBucket.FRESH],
        waste_saved_estimate=waste_saved,
        co2_reduced_estimate=co2_reduced,
        by_category=by_category,
        override_applied=override_applied,
    )


@dataclass
class StatsService:
    """Service computing a user's inventory summary."""

    inventory_repository: InventoryRepository
    usage_repository: UsageStatsRepository
    threshold_days: int = DEFAULT_THRESHOLD_DAYS
    waste_value_per_item: float = WASTE_VALUE_PER_ITEM
    co2_kg_per_item: float = CO2_KG_PER_ITEM

    def get_summary(self, owner_id: UUID, today: date) -> InventorySummary:
        """Return live counts with the current month's override, if stored."""
        items = self.inventory_repository.list_items(owner_id)
        override = self.usage_repository.get_month(owner_id, month_key(today))
        return summarize(
            items,
            today,
            self.threshold_days,
            override,
            waste_value_per_item=self.waste_value_per_item,
            co2_kg_per_item=self.co2_kg_per_item,
        )


def format_money(value: float) -> str:
    """Format a savings figure for display, rounding halves up."""
    return f"${math.floor(value + 0.5)}"


def format_mass(value: float) -> str:
    """Format a CO2 figure for display."""
    return f"{value:.1f}kg"
