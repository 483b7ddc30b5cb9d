"""Receipt parsing and shelf-life inference backed by a generative model."""

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from smart_pantry.domain.errors import ExternalServiceError, ValidationError
from smart_pantry.domain.inventory import (
    Category,
    IngredientDraft,
    RejectedRecord,
    coerce_category,
    default_expiry_days,
    expiry_date_after,
)
from smart_pantry.domain.receipts import (
    ReceiptLine,
    ReceiptParseResult,
    ReceiptRecord,
    ShelfLifeAnswer,
)
from smart_pantry.services.generation import GenerativeClient, strip_code_fence

DEFAULT_RECEIPT_CONFIDENCE = 0.85
DEFAULT_QUANTITY = "1"
MAX_SHELF_LIFE_DAYS = 365
HISTORY_LIMIT = 50

_logger = logging.getLogger(__name__)

RECEIPT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "category": {
                        "type": "string",
                        "enum": [category.value for category in Category],
                    },
                    "quantity": {"type": "string"},
                    "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
                },
                "required": ["name", "category", "quantity", "confidence"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

SHELF_LIFE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {"days": {"type": "integer"}},
    "required": ["days"],
    "additionalProperties": False,
}


class ReceiptRepository(Protocol):
    """Persistence interface for processed receipts."""

    def record(self, owner_id: UUID, raw_text: str, items_count: int) -> ReceiptRecord:
        """Store a processed receipt."""

    def list_recent(self, owner_id: UUID, limit: int) -> list[ReceiptRecord]:
        """Return the owner's receipts, newest first."""


def draft_from_line(line: ReceiptLine, today: date) -> IngredientDraft:
    """Turn a parsed receipt line into an ingredient draft.

    Unknown categories are stored as ``Other`` and get the 30-day default.
    """
    category = coerce_category(line.category)
    expiry = expiry_date_after(default_expiry_days(category), today)
    return IngredientDraft(
        name=line.name,
        category=category or Category.OTHER,
        quantity=line.quantity or DEFAULT_QUANTITY,
        expiry_date=expiry,
        confidence=(
            line.confidence
            if line.confidence is not None
            else DEFAULT_RECEIPT_CONFIDENCE
        ),
    )


def parse_receipt_lines(
    raw: str, today: date
) -> tuple[list[IngredientDraft], list[RejectedRecord]]:
    """Parse the receipt parser's JSON output.

    A payload that is not a JSON array (or an ``items`` object) is an external
    service failure. Individual malformed lines are rejected one by one.
    """
    try:
        payload = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError as exc:
        raise ExternalServiceError("Receipt parser returned invalid JSON") from exc
    if isinstance(payload, dict):
        payload = payload.get("items")
    if not isinstance(payload, list):
        raise ExternalServiceError("Receipt parser returned an unexpected payload")

    drafts: list[IngredientDraft] = []
    rejected: list[RejectedRecord] = []
    for index, entry in enumerate(payload):
        try:
            line = ReceiptLine.model_validate(entry)
            drafts.append(draft_from_line(line, today))
        except PydanticValidationError as exc:
            rejected.append(
                RejectedRecord(index=index, reason=f"{exc.error_count()} errors")
            )
    return drafts, rejected


@dataclass
class ReceiptService:
    """Service that extracts inventory drafts from receipt text."""

    client: GenerativeClient
    repository: ReceiptRepository
    model: str

    async def parse_receipt(
        self, owner_id: UUID, ocr_text: str, today: date
    ) -> ReceiptParseResult:
        """Extract food items from OCR text and record the receipt."""
        if not ocr_text.strip():
            raise ValidationError("Receipt text is empty")
        raw = await self.client.generate(
            model=self.model,
            prompt=_receipt_prompt(ocr_text),
            schema=RECEIPT_SCHEMA,
            schema_name="receipt_items",
        )
        drafts, rejected = parse_receipt_lines(raw, today)
        if rejected:
            _logger.warning("Receipt parsing rejected %s lines", len(rejected))
        self.repository.record(owner_id, ocr_text, len(drafts))
        return ReceiptParseResult(items=drafts, rejected=rejected, raw_text=ocr_text)

    def history(
        self, owner_id: UUID, limit: int = HISTORY_LIMIT
    ) -> list[ReceiptRecord]:
        """Return recently processed receipts, newest first."""
        return self.repository.list_recent(owner_id, limit)

    async def infer_expiry(self, name: str, category: str, today: date) -> date:
        """Estimate an expiry date, falling back to the category default."""
        resolved = coerce_category(category)
        fallback = expiry_date_after(default_expiry_days(resolved), today)
        try:
            raw = await self.client.generate(
                model=self.model,
                prompt=_shelf_life_prompt(name, resolved or Category.OTHER),
                schema=SHELF_LIFE_SCHEMA,
                schema_name="shelf_life",
            )
            answer = ShelfLifeAnswer.model_validate_json(strip_code_fence(raw))
        except (ExternalServiceError, PydanticValidationError) as exc:
            _logger.warning("Shelf-life inference failed for %s: %s", name, exc)
            return fallback
        if answer.days < 1 or answer.days > MAX_SHELF_LIFE_DAYS:
            return fallback
        return expiry_date_after(answer.days, today)


def _receipt_prompt(ocr_text: str) -> str:
    categories = ", ".join(category.value for category in Category)
    return (
        "Extract the food items from this grocery receipt text. Skip non-food "
        "lines such as bags, taxes, totals and store details. Fix obvious OCR "
        f"mistakes in names, assign each item one category from: {categories}, "
        "infer a quantity string, and give a confidence between 0 and 1.\n\n"
        f"Receipt text:\n{ocr_text}"
    )


def _shelf_life_prompt(name: str, category: Category) -> str:
    return (
        "Estimate how many days this grocery item typically stays good when "
        f"stored properly at home.\nItem: {name}\nCategory: {category.value}"
    )

