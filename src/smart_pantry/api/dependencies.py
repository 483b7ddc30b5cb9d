"""Shared request dependencies and response envelopes."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Header, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder

from smart_pantry.config import today_in

if TYPE_CHECKING:
    from smart_pantry.containers import AppContainer


def current_user_id(x_user_id: str | None = Header(default=None)) -> UUID:
    """Resolve the owner id forwarded by the authentication layer."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    try:
        return UUID(x_user_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user id"
        ) from exc


def current_day(request: Request) -> date:
    """Return today's date in the configured timezone."""
    container: AppContainer = request.app.state.container
    return today_in(container.settings.timezone)


def success(data: object) -> dict[str, object]:
    """Wrap a payload in the success envelope."""
    return {"success": True, "data": jsonable_encoder(data)}


def failure(message: str) -> dict[str, object]:
    """Build the error envelope."""
    return {"success": False, "error": message}
