"""Supabase repository for processed receipts."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from smart_pantry.domain.receipts import ReceiptRecord
from smart_pantry.services.receipts import ReceiptRepository

_COLUMNS = "id, raw_text, items_count, processed_at"


@dataclass
class SupabaseReceiptRepository(ReceiptRepository):
    """Supabase implementation for the receipts table."""

    client: Client

    def record(self, owner_id: UUID, raw_text: str, items_count: int) -> ReceiptRecord:
        """Insert a processed receipt row."""
        response = (
            self.client.table("receipts")
            .insert(
                {
                    "user_id": str(owner_id),
                    "raw_text": raw_text,
                    "items_count": items_count,
                    "processed_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to record receipt")
        return _parse_receipt(response.data[0])

    def list_recent(self, owner_id: UUID, limit: int) -> list[ReceiptRecord]:
        """Return the owner's receipts, newest first."""
        response = (
            self.client.table("receipts")
            .select(_COLUMNS)
            .eq("user_id", str(owner_id))
            .order("processed_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_receipt(row) for row in response.data or []]


def _parse_receipt(row: dict[str, object]) -> ReceiptRecord:
    return ReceiptRecord(
        id=UUID(str(row["id"])),
        raw_text=str(row.get("raw_text") or ""),
        items_count=int(row.get("items_count") or 0),
        processed_at=datetime.fromisoformat(str(row["processed_at"])),
    )
