"""Domain models for the ingredient inventory."""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(StrEnum):
    """Fixed set of ingredient categories."""

    PRODUCE = "Produce"
    DAIRY = "Dairy"
    PANTRY = "Pantry"
    MEAT = "Meat"
    OTHER = "Other"


EXPIRY_DEFAULT_DAYS: dict[Category, int] = {
    Category.PRODUCE: 7,
    Category.DAIRY: 14,
    Category.MEAT: 4,
    Category.PANTRY: 60,
    Category.OTHER: 30,
}
UNKNOWN_CATEGORY_EXPIRY_DAYS = 30


@dataclass(frozen=True)
class Ingredient:
    """An inventory item owned by a single user."""

    id: UUID
    owner_id: UUID
    name: str
    category: Category
    quantity: str
    expiry_date: date
    confidence: float = 1.0


class IngredientDraft(BaseModel):
    """Validated input for creating an ingredient."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    category: Category
    quantity: str = Field(min_length=1)
    expiry_date: date
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)


class IngredientChanges(BaseModel):
    """Partial update for an ingredient; unset fields are left untouched."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1)
    category: Category | None = None
    quantity: str | None = Field(default=None, min_length=1)
    expiry_date: date | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("name", "quantity", "category", "expiry_date", "confidence")
    @classmethod
    def _reject_explicit_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("field may be omitted but not null")
        return value

    def as_payload(self) -> dict[str, object]:
        """Return only the fields the caller set."""
        return self.model_dump(exclude_unset=True)


@dataclass(frozen=True)
class RejectedRecord:
    """A record dropped from a batch, with the reason."""

    index: int
    reason: str


@dataclass(frozen=True)
class BulkImportResult:
    """Outcome of a bulk import."""

    added: list[Ingredient]
    rejected: list[RejectedRecord]


def coerce_category(raw: object) -> Category | None:
    """Match a loosely-typed category name against the fixed enum."""
    if isinstance(raw, Category):
        return raw
    if not isinstance(raw, str):
        return None
    cleaned = raw.strip().lower()
    for category in Category:
        if category.value.lower() == cleaned:
            return category
    return None


def default_expiry_days(category: Category | None) -> int:
    """Return the shelf-life assumption for a category."""
    if category is None:
        return UNKNOWN_CATEGORY_EXPIRY_DAYS
    return EXPIRY_DEFAULT_DAYS.get(category, UNKNOWN_CATEGORY_EXPIRY_DAYS)


def expiry_date_after(days: int, today: date) -> date:
    """Derive an expiry date from a relative day count."""
    return today + timedelta(days=days)
