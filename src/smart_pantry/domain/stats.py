"""Domain models for inventory statistics."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UsageOverride:
    """Persisted savings figures for one calendar month."""

    month: str
    estimated_savings: float | None = None
    co2_saved: float | None = None


@dataclass(frozen=True)
class InventorySummary:
    """Live freshness counts plus savings estimates for one user."""

    total: int
    expiring: int
    expired: int
    fresh: int
    waste_saved_estimate: float
    co2_reduced_estimate: float
    by_category: dict[str, int] = field(default_factory=dict)
    override_applied: bool = False
