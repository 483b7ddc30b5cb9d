"""Supabase implementation of the ingredient inventory store."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from smart_pantry.domain.errors import ValidationError
from smart_pantry.domain.inventory import Category, Ingredient, IngredientDraft
from smart_pantry.services.inventory import InventoryRepository

_COLUMNS = "id, user_id, name, category, quantity, expiry_date, confidence"

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseInventoryRepository(InventoryRepository):
    """Supabase-backed repository for ingredients."""

    client: Client

    def list_items(
        self,
        owner_id: UUID,
        search: str | None = None,
        category: Category | None = None,
    ) -> list[Ingredient]:
        """Return the owner's items, optionally filtered."""
        query = (
            self.client.table("ingredients")
            .select(_COLUMNS)
            .eq("user_id", str(owner_id))
        )
        if search:
            query = query.ilike("name", f"%{search}%")
        if category is not None:
            query = query.eq("category", category.value)
        response = query.order("created_at", desc=False).execute()
        items = []
        for row in response.data or []:
            try:
                items.append(_parse_item(row))
            except ValidationError as exc:
                _logger.warning("Skipping ingredient row %s: %s", row.get("id"), exc)
        return items

    def get_item(self, owner_id: UUID, item_id: UUID) -> Ingredient | None:
        """Return an owned item by id, if present."""
        response = (
            self.client.table("ingredients")
            .select(_COLUMNS)
            .eq("id", str(item_id))
            .eq("user_id", str(owner_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def create_items(
        self, owner_id: UUID, drafts: Sequence[IngredientDraft]
    ) -> list[Ingredient]:
        """Insert all drafts with a single request."""
        rows = [
            {"user_id": str(owner_id), **draft.model_dump(mode="json")}
            for draft in drafts
        ]
        response = self.client.table("ingredients").insert(rows).execute()
        if not response.data:
            raise RuntimeError("Failed to create ingredients")
        return [_parse_item(row) for row in response.data]

    def update_item(
        self, owner_id: UUID, item_id: UUID, changes: dict[str, object]
    ) -> Ingredient | None:
        """Apply changes to an owned item and return the stored row."""
        payload = {key: _to_column(value) for key, value in changes.items()}
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("ingredients")
            .update(payload)
            .eq("id", str(item_id))
            .eq("user_id", str(owner_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def delete_item(self, owner_id: UUID, item_id: UUID) -> bool:
        """Delete an owned item."""
        response = (
            self.client.table("ingredients")
            .delete()
            .eq("id", str(item_id))
            .eq("user_id", str(owner_id))
            .execute()
        )
        return bool(response.data)


def _to_column(value: object) -> object:
    if isinstance(value, Category):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


def _parse_item(row: dict[str, object]) -> Ingredient:
    """Parse an ingredient row, rejecting rows with invalid dates or categories."""
    raw_expiry = row.get("expiry_date")
    try:
        expiry_date = date.fromisoformat(str(raw_expiry)[:10])
    except ValueError as exc:
        raise ValidationError(f"Invalid expiry date: {raw_expiry!r}") from exc
    try:
        category = Category(row.get("category"))
    except ValueError as exc:
        raise ValidationError(f"Invalid category: {row.get('category')!r}") from exc
    confidence = row.get("confidence")
    return Ingredient(
        id=UUID(str(row["id"])),
        owner_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        category=category,
        quantity=str(row.get("quantity", "")),
        expiry_date=expiry_date,
        confidence=float(confidence) if confidence is not None else 1.0,
    )
