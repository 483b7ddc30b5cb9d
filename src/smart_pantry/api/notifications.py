"""Notification preference endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Body, Depends, Request

from smart_pantry.api.dependencies import current_user_id, success

if TYPE_CHECKING:
    from smart_pantry.containers import AppContainer

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("/preferences")
async def get_preferences(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return the user's preferences, or defaults."""
    container: AppContainer = request.app.state.container
    return success(container.notification_service.get_preferences(user_id))


@router.put("/preferences")
async def update_preferences(
    request: Request,
    payload: dict[str, object] = Body(...),
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Update some or all preference fields."""
    container: AppContainer = request.app.state.container
    return success(
        container.notification_service.update_preferences(user_id, payload)
    )


@router.post("/test")
async def send_test_notification(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Send a test push notification to the user."""
    container: AppContainer = request.app.state.container
    await container.notification_service.send_test(user_id)
    return success({"message": "Test notification sent"})
