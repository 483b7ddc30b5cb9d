"""Freshness classification for inventory items.

Every decision about whether an item is expired or about to expire goes
through :func:`days_until_expiry` so that stats, listings and notifications
agree on the same calendar-day math.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from smart_pantry.domain.inventory import Ingredient

DEFAULT_THRESHOLD_DAYS = 3


class FreshnessBucket(StrEnum):
    """Discrete expiry risk levels."""

    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    FRESH = "fresh"


@dataclass(frozen=True)
class FreshnessStatus:
    """Bucket and day-count for a single expiry date."""

    bucket: FreshnessBucket
    days_until_expiry: int


def _as_calendar_day(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until_expiry(expiry_date: date, reference_date: date) -> int:
    """Return whole calendar days from the reference date to expiry."""
    return (_as_calendar_day(expiry_date) - _as_calendar_day(reference_date)).days


def bucket_for_days(
    days: int, threshold_days: int = DEFAULT_THRESHOLD_DAYS
) -> FreshnessBucket:
    """Map a day-count onto its bucket."""
    if days < 0:
        return FreshnessBucket.EXPIRED
    if days <= threshold_days:
        return FreshnessBucket.EXPIRING_SOON
    return FreshnessBucket.FRESH


def classify(
    expiry_date: date,
    reference_date: date,
    threshold_days: int = DEFAULT_THRESHOLD_DAYS,
) -> FreshnessStatus:
    """Classify an expiry date relative to a reference date."""
    days = days_until_expiry(expiry_date, reference_date)
    return FreshnessStatus(
        bucket=bucket_for_days(days, threshold_days), days_until_expiry=days
    )


def sort_by_expiry(items: Iterable[Ingredient]) -> list[Ingredient]:
    """Order items by ascending expiry date, keeping insertion order on ties."""
    return sorted(items, key=lambda item: item.expiry_date)


def expiring_within(
    items: Iterable[Ingredient], reference_date: date, days: int
) -> list[Ingredient]:
    """Return items expiring between today and ``days`` from now, inclusive."""
    return [
        item
        for item in items
        if 0 <= days_until_expiry(item.expiry_date, reference_date) <= days
    ]
