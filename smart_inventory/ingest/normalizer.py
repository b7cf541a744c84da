from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from smart_inventory.db.models import NormalizedSale
from smart_inventory.exceptions import EmptyInputError
from smart_inventory.ingest.csv_parser import InvalidRow, ParsedRow, ValidRow, validate_rows

def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()

def normalize_rows(rows: Iterable[ParsedRow], *, now: str | None = None) -> list[NormalizedSale]:
    """Keep valid rows that sold at least one unit, in input order.

    Upload-time filtering is stricter than the preview checks: a row whose
    ``units_sold`` is a number but not positive passes validation yet is
    dropped here.

    Raises:
        EmptyInputError: nothing survives the filter.
    """
    stamp = now or utc_timestamp()
    normalized: list[NormalizedSale] = []
    for row in rows:
        if isinstance(row, InvalidRow):
            continue
        if not isinstance(row, ValidRow):
            raise TypeError(f"unexpected row type {type(row).__name__}")

        units = int(row.units_sold)
        if units <= 0:
            continue
        normalized.append(NormalizedSale(
            date=row.date.isoformat(),
            store_id=row.store_id.strip(),
            sku_id=row.sku_id.strip(),
            units_sold=units,
            updated_at=stamp,
        ))

    if not normalized:
        raise EmptyInputError("No valid rows found in CSV", code="NO_VALID_ROWS")
    return normalized

def normalize_records(records: Iterable[Mapping[str, Any]], *, now: str | None = None) -> list[NormalizedSale]:
    """Validate then normalize plain mappings (e.g. already-normalized records)."""
    return normalize_rows(validate_rows(list(records)), now=now)
