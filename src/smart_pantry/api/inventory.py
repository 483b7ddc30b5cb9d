"""Inventory API endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Body, Depends, Request, status
from pydantic import BaseModel

from smart_pantry.api.dependencies import current_day, current_user_id, success
from smart_pantry.domain.freshness import classify
from smart_pantry.services.stats import format_mass, format_money

if TYPE_CHECKING:
    from smart_pantry.containers import AppContainer
    from smart_pantry.domain.inventory import Ingredient

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


class BulkImportRequest(BaseModel):
    """Body of a bulk import."""

    items: list[object]


def _item_view(item: Ingredient, today: date, threshold_days: int) -> dict[str, object]:
    status_ = classify(item.expiry_date, today, threshold_days)
    return {
        "id": item.id,
        "name": item.name,
        "category": item.category,
        "quantity": item.quantity,
        "expiry_date": item.expiry_date,
        "confidence": item.confidence,
        "days_until_expiry": status_.days_until_expiry,
        "freshness": status_.bucket,
    }


def _views(
    container: AppContainer, items: list[Ingredient], today: date
) -> list[dict[str, object]]:
    threshold = container.settings.expiry_threshold_days
    return [_item_view(item, today, threshold) for item in items]


@router.get("")
async def list_inventory(  # noqa: PLR0913
    request: Request,
    search: str | None = None,
    category: str | None = None,
    sort: str = "expiry",
    user_id: UUID = Depends(current_user_id),
    today: date = Depends(current_day),
) -> dict[str, object]:
    """List the user's items with freshness info."""
    container: AppContainer = request.app.state.container
    items = container.inventory_service.list_items(
        user_id, search=search, category=category, sort=sort
    )
    return success(_views(container, items, today))


@router.get("/search")
async def search_inventory(
    request: Request,
    q: str | None = None,
    user_id: UUID = Depends(current_user_id),
    today: date = Depends(current_day),
) -> dict[str, object]:
    """Quick search by item name."""
    container: AppContainer = request.app.state.container
    items = container.inventory_service.search(user_id, q)
    return success(_views(container, items, today))


@router.get("/stats")
async def inventory_stats(
    request: Request,
    user_id: UUID = Depends(current_user_id),
    today: date = Depends(current_day),
) -> dict[str, object]:
    """Return freshness counts and savings estimates."""
    container: AppContainer = request.app.state.container
    summary = container.stats_service.get_summary(user_id, today)
    return success(
        {
            **asdict(summary),
            "waste_saved": format_money(summary.waste_saved_estimate),
            "co2_reduced": format_mass(summary.co2_reduced_estimate),
        }
    )


@router.get("/expiring")
async def expiring_items(
    request: Request,
    days: int = 3,
    user_id: UUID = Depends(current_user_id),
    today: date = Depends(current_day),
) -> dict[str, object]:
    """Return items expiring within the given number of days."""
    container: AppContainer = request.app.state.container
    items = container.inventory_service.list_expiring(user_id, today, days)
    return success(_views(container, items, today))


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_item(
    request: Request,
    payload: dict[str, object] = Body(...),
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Add a single item."""
    container: AppContainer = request.app.state.container
    return success(container.inventory_service.add_item(user_id, payload))


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
async def bulk_add(
    request: Request,
    body: BulkImportRequest,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Add many items, rejecting invalid records individually."""
    container: AppContainer = request.app.state.container
    result = container.inventory_service.bulk_add(user_id, body.items)
    return success(
        {
            "added": len(result.added),
            "items": result.added,
            "rejected": result.rejected,
        }
    )


@router.put("/{item_id}")
async def update_item(
    item_id: UUID,
    request: Request,
    payload: dict[str, object] = Body(...),
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Update fields of an owned item."""
    container: AppContainer = request.app.state.container
    return success(container.inventory_service.update_item(user_id, item_id, payload))


@router.delete("/{item_id}")
async def delete_item(
    item_id: UUID,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Delete an owned item."""
    container: AppContainer = request.app.state.container
    container.inventory_service.delete_item(user_id, item_id)
    return success({"deleted": item_id})
