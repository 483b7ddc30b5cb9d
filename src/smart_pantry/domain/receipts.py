"""Models for AI receipt parsing results."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from smart_pantry.domain.inventory import IngredientDraft, RejectedRecord


class ReceiptLine(BaseModel):
    """Single food item extracted from receipt text."""

    name: str = Field(min_length=1)
    category: str | None = None
    quantity: str | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


@dataclass(frozen=True)
class ReceiptParseResult:
    """Drafts parsed from a receipt plus the lines that were rejected."""

    items: list[IngredientDraft]
    rejected: list[RejectedRecord]
    raw_text: str


class ShelfLifeAnswer(BaseModel):
    """Shelf-life estimate returned by the generator."""

    days: int


@dataclass(frozen=True)
class ReceiptRecord:
    """A processed receipt kept for the user's history."""

    id: UUID
    raw_text: str
    items_count: int
    processed_at: datetime
