"""Supabase repository for notification preferences."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from smart_pantry.domain.notifications import NotificationPreferences
from smart_pantry.services.notifications import NotificationRepository

_COLUMNS = "user_id, expiry_days_before, daily_summary, notify_time, enabled"


@dataclass
class SupabaseNotificationRepository(NotificationRepository):
    """Supabase implementation for users and notification_preferences."""

    client: Client

    def list_users_with_preferences(
        self,
    ) -> list[tuple[UUID, NotificationPreferences | None]]:
        """Return every user joined with their preferences row."""
        users_response = self.client.table("users").select("id").execute()
        prefs_response = (
            self.client.table("notification_preferences").select(_COLUMNS).execute()
        )
        preferences = {
            str(row["user_id"]): _parse_preferences(row)
            for row in prefs_response.data or []
        }
        return [
            (UUID(str(row["id"])), preferences.get(str(row["id"])))
            for row in users_response.data or []
        ]

    def get_preferences(self, user_id: UUID) -> NotificationPreferences | None:
        """Return a user's preferences row, if any."""
        response = (
            self.client.table("notification_preferences")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_preferences(response.data[0])

    def save_preferences(
        self, user_id: UUID, preferences: NotificationPreferences
    ) -> NotificationPreferences:
        """Upsert a user's preferences."""
        response = (
            self.client.table("notification_preferences")
            .upsert(
                {
                    "user_id": str(user_id),
                    "expiry_days_before": preferences.expiry_days_before,
                    "daily_summary": preferences.daily_summary,
                    "notify_time": preferences.notify_time,
                    "enabled": preferences.enabled,
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save notification preferences")
        return _parse_preferences(response.data[0])


def _parse_preferences(row: dict[str, object]) -> NotificationPreferences:
    defaults = NotificationPreferences()
    days = row.get("expiry_days_before")
    daily_summary = row.get("daily_summary")
    enabled = row.get("enabled")
    return NotificationPreferences(
        expiry_days_before=(
            int(days) if days is not None else defaults.expiry_days_before
        ),
        daily_summary=(
            bool(daily_summary) if daily_summary is not None else defaults.daily_summary
        ),
        notify_time=str(row.get("notify_time") or defaults.notify_time),
        enabled=bool(enabled) if enabled is not None else defaults.enabled,
    )
