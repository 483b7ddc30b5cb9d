"""Services for managing a user's ingredient inventory."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from smart_pantry.domain.errors import NotFoundError, ValidationError
from smart_pantry.domain.freshness import (
    DEFAULT_THRESHOLD_DAYS,
    expiring_within,
    sort_by_expiry,
)
from smart_pantry.domain.inventory import (
    BulkImportResult,
    Category,
    Ingredient,
    IngredientChanges,
    IngredientDraft,
    RejectedRecord,
)

SEARCH_LIMIT = 20

_logger = logging.getLogger(__name__)


class InventorySort(StrEnum):
    """Supported listing orders."""

    EXPIRY = "expiry"
    NAME = "name"
    CATEGORY = "category"


class InventoryRepository(Protocol):
    """Persistence interface for ingredient records."""

    def list_items(
        self,
        owner_id: UUID,
        search: str | None = None,
        category: Category | None = None,
    ) -> list[Ingredient]:
        """Return the owner's items in insertion order."""

    def get_item(self, owner_id: UUID, item_id: UUID) -> Ingredient | None:
        """Return an item if it exists and belongs to the owner."""

    def create_items(
        self, owner_id: UUID, drafts: Sequence[IngredientDraft]
    ) -> list[Ingredient]:
        """Insert all drafts in one write and return the created items."""

    def update_item(
        self, owner_id: UUID, item_id: UUID, changes: dict[str, object]
    ) -> Ingredient | None:
        """Apply changes to an owned item and return it."""

    def delete_item(self, owner_id: UUID, item_id: UUID) -> bool:
        """Delete an owned item, returning whether a row was removed."""


def validate_draft(payload: object) -> IngredientDraft:
    """Validate a raw ingredient payload."""
    try:
        return IngredientDraft.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from exc


def validate_changes(payload: object) -> IngredientChanges:
    """Validate a raw partial-update payload."""
    try:
        return IngredientChanges.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from exc


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "body"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


@dataclass
class InventoryService:
    """Application service for inventory reads and writes."""

    repository: InventoryRepository

    def list_items(
        self,
        owner_id: UUID,
        search: str | None = None,
        category: str | None = None,
        sort: str = InventorySort.EXPIRY,
    ) -> list[Ingredient]:
        """List items filtered by name substring and category."""
        category_filter = _parse_category_filter(category)
        try:
            order = InventorySort(sort)
        except ValueError as exc:
            raise ValidationError(f"Unsupported sort order: {sort}") from exc
        items = self.repository.list_items(
            owner_id, search=search or None, category=category_filter
        )
        if order is InventorySort.NAME:
            return sorted(items, key=lambda item: item.name.lower())
        if order is InventorySort.CATEGORY:
            return sorted(items, key=lambda item: (item.category, item.expiry_date))
        return sort_by_expiry(items)

    def search(
        self, owner_id: UUID, query: str | None, limit: int = SEARCH_LIMIT
    ) -> list[Ingredient]:
        """Quick search by name; an empty query returns nothing."""
        if not query:
            return []
        items = self.repository.list_items(owner_id, search=query)
        return sort_by_expiry(items)[:limit]

    def add_item(self, owner_id: UUID, payload: object) -> Ingredient:
        """Validate and store a single item."""
        draft = validate_draft(payload)
        return self.repository.create_items(owner_id, [draft])[0]

    def bulk_add(self, owner_id: UUID, payloads: Sequence[object]) -> BulkImportResult:
        """Store every valid item; invalid records are rejected individually."""
        drafts: list[IngredientDraft] = []
        rejected: list[RejectedRecord] = []
        for index, payload in enumerate(payloads):
            try:
                drafts.append(validate_draft(payload))
            except ValidationError as exc:
                rejected.append(RejectedRecord(index=index, reason=str(exc)))
        if rejected:
            _logger.warning(
                "Bulk import rejected %s of %s records", len(rejected), len(payloads)
            )
        added = self.repository.create_items(owner_id, drafts) if drafts else []
        return BulkImportResult(added=added, rejected=rejected)

    def update_item(self, owner_id: UUID, item_id: UUID, payload: object) -> Ingredient:
        """Apply a partial update to an owned item."""
        changes = validate_changes(payload).as_payload()
        existing = self.repository.get_item(owner_id, item_id)
        if existing is None:
            raise NotFoundError("Item not found")
        if not changes:
            return existing
        updated = self.repository.update_item(owner_id, item_id, changes)
        if updated is None:
            raise NotFoundError("Item not found")
        return updated

    def delete_item(self, owner_id: UUID, item_id: UUID) -> None:
        """Delete an owned item."""
        if not self.repository.delete_item(owner_id, item_id):
            raise NotFoundError("Item not found")

    def list_expiring(
        self, owner_id: UUID, today: date, days: int = DEFAULT_THRESHOLD_DAYS
    ) -> list[Ingredient]:
        """Return items expiring within ``days``, soonest first."""
        items = self.repository.list_items(owner_id)
        return sort_by_expiry(expiring_within(items, today, days))

    def list_all(self, owner_id: UUID) -> list[Ingredient]:
        """Return every item, soonest expiry first."""
        return sort_by_expiry(self.repository.list_items(owner_id))


def _parse_category_filter(raw: str | None) -> Category | None:
    if raw is None or raw in {"", "all"}:
        return None
    try:
        return Category(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid category: {raw}") from exc
