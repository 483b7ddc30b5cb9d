"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from smart_pantry.api.dependencies import current_day, success

if TYPE_CHECKING:
    from smart_pantry.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/notifications/pending", dependencies=[Depends(require_admin)])
async def pending_notifications(
    request: Request, today: date = Depends(current_day)
) -> dict[str, object]:
    """Preview which users would receive an expiry alert today."""
    container: AppContainer = request.app.state.container
    alerts = container.notification_service.pending_alerts(today)
    return success(
        [
            {
                "user_id": alert.user_id,
                "item_count": len(alert.expiring_items),
                "items": [item.name for item in alert.expiring_items],
            }
            for alert in alerts
        ]
    )


@router.post("/notifications/run", dependencies=[Depends(require_admin)])
async def run_expiry_notifications(
    request: Request, today: date = Depends(current_day)
) -> dict[str, object]:
    """Send expiry alerts to every user with items expiring soon."""
    container: AppContainer = request.app.state.container
    result = await container.notification_service.send_expiry_notifications(today)
    return success(result)
