"""Supabase repository for monthly usage figures."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from smart_pantry.domain.stats import UsageOverride
from smart_pantry.services.stats import UsageStatsRepository


@dataclass
class SupabaseUsageStatsRepository(UsageStatsRepository):
    """Supabase implementation for the usage_stats table."""

    client: Client

    def get_month(self, owner_id: UUID, month: str) -> UsageOverride | None:
        """Return stored savings figures for a month."""
        response = (
            self.client.table("usage_stats")
            .select("month, estimated_savings, co2_saved")
            .eq("user_id", str(owner_id))
            .eq("month", month)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        savings = row.get("estimated_savings")
        co2 = row.get("co2_saved")
        return UsageOverride(
            month=month,
            estimated_savings=float(savings) if savings is not None else None,
            co2_saved=float(co2) if co2 is not None else None,
        )
