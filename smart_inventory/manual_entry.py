import datetime
import logging
from typing import Optional

from pydantic import BaseModel, field_validator

from smart_inventory.db.boltic import BolticClient
from smart_inventory.db.models import SalesRecord
from smart_inventory.exceptions import EmptyInputError
from smart_inventory.ingest.csv_parser import parse_date, parse_number

logger = logging.getLogger("smart_inventory.manual_entry")

class ManualEntry(BaseModel):
    # Half-filled or malformed form rows parse; is_complete decides what is sent
    date: Optional[datetime.date] = None
    store_id: str = ""
    sku_id: str = ""
    units_sold: int = 0

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return parse_date(value)

    @field_validator("store_id", "sku_id", mode="before")
    @classmethod
    def _as_text(cls, value):
        return "" if value is None else str(value)

    @field_validator("units_sold", mode="before")
    @classmethod
    def _parse_units(cls, value):
        number = parse_number(value)
        return 0 if number is None else int(number)

    def is_complete(self) -> bool:
        return (
            self.date is not None
            and bool(self.store_id.strip())
            and bool(self.sku_id.strip())
            and self.units_sold > 0
        )

def complete_entries(entries: list[ManualEntry]) -> list[SalesRecord]:
    return [
        SalesRecord(
            date=e.date,
            store_id=e.store_id.strip(),
            sku_id=e.sku_id.strip(),
            units_sold=e.units_sold,
        )
        for e in entries
        if e.is_complete()
    ]

def build_envelope(records: list[SalesRecord]) -> dict:
    return {"payload": {"sales": [r.model_dump(mode="json") for r in records]}}

async def submit_manual_entries(client: BolticClient, entries: list[ManualEntry]) -> dict:
    """Send complete entries in a single call.

    Raises:
        EmptyInputError: no entry is complete; nothing is sent.
        NetworkError: the sales loop call failed.
    """
    records = complete_entries(entries)
    if not records:
        raise EmptyInputError("Please fill in at least one complete entry", code="NO_COMPLETE_ENTRIES")

    response = await client.post_sales_loop(build_envelope(records))
    logger.info("Sent %d of %d manual sales entries", len(records), len(entries))
    return {
        "success": True,
        "sent": len(records),
        "message": f"Successfully sent {len(records)} sales entries",
        "response": response,
    }
