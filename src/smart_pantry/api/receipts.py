"""Receipt parsing and expiry inference endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field

from smart_pantry.api.dependencies import current_day, current_user_id, success

if TYPE_CHECKING:
    from smart_pantry.containers import AppContainer

router = APIRouter(prefix="/api/receipts", tags=["receipts"])


class ReceiptTextRequest(BaseModel):
    """OCR text of a grocery receipt."""

    model_config = ConfigDict(extra="forbid")

    text: str = Field(min_length=1)


class ExpiryInferenceRequest(BaseModel):
    """Item to estimate a shelf life for."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    category: str


@router.post("/parse")
async def parse_receipt(
    request: Request,
    body: ReceiptTextRequest,
    user_id: UUID = Depends(current_user_id),
    today: date = Depends(current_day),
) -> dict[str, object]:
    """Extract inventory drafts from receipt text without storing the items."""
    container: AppContainer = request.app.state.container
    result = await container.receipt_service.parse_receipt(
        user_id, body.text, today
    )
    return success(
        {
            "items": [item.model_dump(mode="json") for item in result.items],
            "rejected": result.rejected,
            "raw_text": result.raw_text,
        }
    )


@router.post("/infer-expiry")
async def infer_expiry(
    request: Request,
    body: ExpiryInferenceRequest,
    user_id: UUID = Depends(current_user_id),
    today: date = Depends(current_day),
) -> dict[str, object]:
    """Estimate an expiry date for an item."""
    container: AppContainer = request.app.state.container
    expiry = await container.receipt_service.infer_expiry(
        body.name, body.category, today
    )
    return success({"expiry_date": expiry})


@router.get("/history")
async def receipt_history(
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Return the user's recently processed receipts."""
    container: AppContainer = request.app.state.container
    records = container.receipt_service.history(user_id)
    return success(
        [
            {
                "id": record.id,
                "items_count": record.items_count,
                "processed_at": record.processed_at,
            }
            for record in records
        ]
    )
