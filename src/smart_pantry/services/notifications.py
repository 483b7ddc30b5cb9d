"""Expiry notification trigger and preference management."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from smart_pantry.domain.errors import ExternalServiceError, ValidationError
from smart_pantry.domain.freshness import expiring_within, sort_by_expiry
from smart_pantry.domain.notifications import (
    ExpiryAlert,
    NotificationPreferences,
    PreferencesUpdate,
    PushPayload,
    UserInventory,
)
from smart_pantry.services.inventory import InventoryRepository

EXPIRY_TAG = "expiry-reminder"
NAMES_IN_BODY = 3

_logger = logging.getLogger(__name__)


class NotificationRepository(Protocol):
    """Persistence interface for users and their notification preferences."""

    def list_users_with_preferences(
        self,
    ) -> list[tuple[UUID, NotificationPreferences | None]]:
        """Return every user id with its preference row, if one exists."""

    def get_preferences(self, user_id: UUID) -> NotificationPreferences | None:
        """Return the stored preferences for a user."""

    def save_preferences(
        self, user_id: UUID, preferences: NotificationPreferences
    ) -> NotificationPreferences:
        """Insert or replace a user's preferences."""


class PushClient(Protocol):
    """Interface for the push delivery service."""

    async def send(self, payload: PushPayload) -> None:
        """Deliver a notification payload to a user's devices."""


def users_to_notify(
    users: Iterable[UserInventory], reference_date: date
) -> list[ExpiryAlert]:
    """Select users with enabled alerts and at least one expiring item."""
    alerts = []
    for user in users:
        preferences = user.preferences or NotificationPreferences()
        if not preferences.enabled:
            continue
        expiring = expiring_within(
            user.items, reference_date, preferences.expiry_days_before
        )
        if not expiring:
            continue
        alerts.append(
            ExpiryAlert(
                user_id=user.user_id,
                expiring_items=sort_by_expiry(expiring),
                days_before=preferences.expiry_days_before,
            )
        )
    return alerts


def build_expiry_payload(alert: ExpiryAlert) -> PushPayload:
    """Render an expiry alert as a push notification."""
    names = ", ".join(item.name for item in alert.expiring_items[:NAMES_IN_BODY])
    remaining = len(alert.expiring_items) - NAMES_IN_BODY
    more = f" and {remaining} more" if remaining > 0 else ""
    return PushPayload(
        user_id=alert.user_id,
        title="Items Expiring Soon!",
        body=(
            f"{names}{more} will expire within {alert.days_before} days. "
            "Check your pantry!"
        ),
        tag=EXPIRY_TAG,
        data={"url": "/pantry", "item_count": len(alert.expiring_items)},
    )


@dataclass
class NotificationRunResult:
    """Outcome of an expiry notification sweep."""

    sent: int
    failed: int


@dataclass
class NotificationService:
    """Service for notification preferences and expiry alerts."""

    repository: NotificationRepository
    inventory_repository: InventoryRepository
    push_client: PushClient

    def get_preferences(self, user_id: UUID) -> NotificationPreferences:
        """Return stored preferences or the defaults."""
        return self.repository.get_preferences(user_id) or NotificationPreferences()

    def update_preferences(
        self, user_id: UUID, payload: object
    ) -> NotificationPreferences:
        """Merge a partial update into the user's preferences."""
        try:
            update = PreferencesUpdate.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid preferences: {exc.error_count()} errors"
            ) from exc
        changes = {
            key: value
            for key, value in update.model_dump(exclude_unset=True).items()
            if value is not None
        }
        merged = replace(self.get_preferences(user_id), **changes)
        return self.repository.save_preferences(user_id, merged)

    def pending_alerts(self, today: date) -> list[ExpiryAlert]:
        """Evaluate every user's inventory against their preferences."""
        users = [
            UserInventory(
                user_id=user_id,
                preferences=preferences,
                items=self.inventory_repository.list_items(user_id),
            )
            for user_id, preferences in self.repository.list_users_with_preferences()
        ]
        return users_to_notify(users, today)

    async def send_expiry_notifications(self, today: date) -> NotificationRunResult:
        """Deliver expiry alerts; a failed delivery does not stop the sweep."""
        sent = 0
        failed = 0
        for alert in self.pending_alerts(today):
            try:
                await self.push_client.send(build_expiry_payload(alert))
            except ExternalServiceError as exc:
                failed += 1
                _logger.warning(
                    "Push delivery failed for user %s: %s", alert.user_id, exc
                )
                continue
            sent += 1
        _logger.info("Expiry notifications sent=%s failed=%s", sent, failed)
        return NotificationRunResult(sent=sent, failed=failed)

    async def send_test(self, user_id: UUID) -> None:
        """Send a test notification to one user."""
        await self.push_client.send(
            PushPayload(
                user_id=user_id,
                title="Test Notification",
                body="Push notifications are working correctly!",
                tag="test",
            )
        )
