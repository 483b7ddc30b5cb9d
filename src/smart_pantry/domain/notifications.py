"""Domain models for expiry notifications."""

from dataclasses import dataclass, field
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from smart_pantry.domain.inventory import Ingredient

NOTIFY_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


@dataclass(frozen=True)
class NotificationPreferences:
    """A user's notification settings."""

    expiry_days_before: int = 3
    daily_summary: bool = True
    notify_time: str = "09:00"
    enabled: bool = True


@dataclass(frozen=True)
class UserInventory:
    """A user, their stored preferences (if any) and their items."""

    user_id: UUID
    preferences: NotificationPreferences | None
    items: list[Ingredient]


@dataclass(frozen=True)
class ExpiryAlert:
    """Items that should trigger an expiry alert for one user."""

    user_id: UUID
    expiring_items: list[Ingredient]
    days_before: int


@dataclass(frozen=True)
class PushPayload:
    """Notification payload handed to the push delivery service."""

    user_id: UUID
    title: str
    body: str
    tag: str
    data: dict[str, object] = field(default_factory=dict)


class PreferencesUpdate(BaseModel):
    """Partial update of notification preferences."""

    model_config = ConfigDict(extra="forbid")

    expiry_days_before: int | None = Field(default=None, ge=0, le=30)
    daily_summary: bool | None = None
    notify_time: str | None = Field(default=None, pattern=NOTIFY_TIME_PATTERN)
    enabled: bool | None = None
