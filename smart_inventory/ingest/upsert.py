import logging
from dataclasses import asdict, dataclass, field
from typing import Any

from smart_inventory.db.boltic import BolticClient
from smart_inventory.db.models import NormalizedSale
from smart_inventory.db.tables import SALES_HISTORY
from smart_inventory.exceptions import InventoryAppError

logger = logging.getLogger("smart_inventory.ingest")

@dataclass(frozen=True)
class UpsertResult:
    success: bool
    inserted: int = 0
    updated: int = 0
    errors: list[Any] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.success:
            return (f"Successfully ingested {self.inserted + self.updated} rows "
                    f"({self.inserted} new, {self.updated} updated)")
        return f"Upload failed: {len(self.errors)} errors"

@dataclass(frozen=True)
class SecondaryOutcome:
    name: str
    ok: bool
    error: str | None = None

@dataclass(frozen=True)
class IngestOutcome:
    """The upsert result and whatever follow-up calls ran after it.

    ``secondary`` never feeds back into ``primary``.
    """

    primary: UpsertResult
    secondary: list[SecondaryOutcome] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.primary.success,
            "inserted": self.primary.inserted,
            "updated": self.primary.updated,
            "errors": self.primary.errors,
            "message": self.primary.message,
            "secondary": [asdict(s) for s in self.secondary],
        }

async def upsert_sales(
    client: BolticClient,
    records: list[NormalizedSale],
    collection: str = SALES_HISTORY,
) -> UpsertResult:
    """One bulk upsert keyed on (date, store_id, sku_id). Raises NetworkError on transport failure."""
    body = await client.upsert_rows(collection, [r.model_dump() for r in records])
    return UpsertResult(
        success=body["success"],
        inserted=body["inserted"],
        updated=body["updated"],
        errors=body["errors"],
    )

async def ingest_sales(
    client: BolticClient,
    records: list[NormalizedSale],
    collection: str = SALES_HISTORY,
    workflow_id: str | None = "A_sales_signals_sync",
) -> IngestOutcome:
    primary = await upsert_sales(client, records, collection)
    if not primary.success:
        logger.warning("Upsert into %s rejected with %d errors", collection, len(primary.errors))
        return IngestOutcome(primary=primary)

    logger.info("Upserted %d rows into %s (%d new, %d updated)",
                len(records), collection, primary.inserted, primary.updated)

    secondary: list[SecondaryOutcome] = []
    if workflow_id:
        try:
            await client.trigger_workflow(workflow_id, {
                "source": "csv_upload",
                "rows_count": len(records),
            })
            secondary.append(SecondaryOutcome(name=workflow_id, ok=True))
        except InventoryAppError as e:
            logger.warning("Workflow trigger %s failed: %s", workflow_id, e)
            secondary.append(SecondaryOutcome(name=workflow_id, ok=False, error=str(e)))

    return IngestOutcome(primary=primary, secondary=secondary)
