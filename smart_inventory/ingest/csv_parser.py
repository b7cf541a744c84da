import datetime
import io
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

import pandas as pd

from smart_inventory.exceptions import FileParseError

REQUIRED_SALES = ("date", "store_id", "sku_id", "units_sold")
DATE_FORMAT = "%Y-%m-%d"

@dataclass(frozen=True)
class ValidationIssue:
    row: int  # 1-based, header excluded
    field: str
    code: str
    message: str
    value: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "row": self.row,
            "field": self.field,
            "code": self.code,
            "message": self.message,
            "value": self.value,
        }

@dataclass(frozen=True)
class ValidRow:
    row: int
    raw: dict[str, str]
    date: datetime.date
    store_id: str
    sku_id: str
    units_sold: float

@dataclass(frozen=True)
class InvalidRow:
    row: int
    raw: dict[str, str]
    issues: tuple[ValidationIssue, ...]

ParsedRow = Union[ValidRow, InvalidRow]

@dataclass
class ParseResult:
    rows: list[ParsedRow] = field(default_factory=list)
    missing_columns: list[str] = field(default_factory=list)

    @property
    def issues(self) -> list[ValidationIssue]:
        return [i for r in self.rows if isinstance(r, InvalidRow) for i in r.issues]

    @property
    def raw_rows(self) -> list[dict[str, str]]:
        return [r.raw for r in self.rows]

def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()

def parse_date(value: Any) -> datetime.date | None:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    text = _text(value)
    if not text:
        return None
    parsed = pd.to_datetime(text, errors="coerce", format=DATE_FORMAT)
    if pd.isna(parsed):
        return None
    return parsed.date()

def parse_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    text = _text(value)
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number

def validate_row(raw: Mapping[str, Any], row: int) -> ParsedRow:
    """Run the four field checks on one row. A failing check never skips the others."""
    issues: list[ValidationIssue] = []

    day = parse_date(raw.get("date"))
    if day is None:
        issues.append(ValidationIssue(row, "date", "BAD_DATE", "Invalid or missing date",
                                      _text(raw.get("date"))))

    store_id = _text(raw.get("store_id"))
    if not store_id:
        issues.append(ValidationIssue(row, "store_id", "REQUIRED", "Missing store_id"))

    sku_id = _text(raw.get("sku_id"))
    if not sku_id:
        issues.append(ValidationIssue(row, "sku_id", "REQUIRED", "Missing sku_id"))

    units = parse_number(raw.get("units_sold"))
    if units is None:
        issues.append(ValidationIssue(row, "units_sold", "BAD_NUMBER",
                                      "Invalid units_sold: must be a number",
                                      _text(raw.get("units_sold"))))

    as_text = {k: _text(v) for k, v in raw.items()}
    if issues:
        return InvalidRow(row=row, raw=as_text, issues=tuple(issues))
    return ValidRow(row=row, raw=as_text, date=day, store_id=store_id, sku_id=sku_id,
                    units_sold=units)

def validate_rows(rows: list[Mapping[str, Any]]) -> list[ParsedRow]:
    return [validate_row(raw, idx + 1) for idx, raw in enumerate(rows)]

def read_sales_csv(content: bytes, filename: str = "upload.csv", limit: int | None = None) -> pd.DataFrame:
    """Read the upload with every cell as text. ``limit`` bounds the data rows read."""
    if not filename.lower().endswith(".csv"):
        raise FileParseError(f"{filename} must be a CSV", code="NOT_CSV")
    try:
        return pd.read_csv(
            io.BytesIO(content),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            nrows=limit,
        )
    except pd.errors.EmptyDataError as e:
        raise FileParseError(f"{filename}: file is empty", code="EMPTY_FILE") from e
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
        raise FileParseError(f"{filename}: could not read CSV: {e}", code="BAD_CSV") from e

def parse_sales_csv(content: bytes, filename: str = "upload.csv", limit: int | None = None) -> ParseResult:
    df = read_sales_csv(content, filename, limit)
    df.columns = [str(c).strip() for c in df.columns]
    missing = sorted(set(REQUIRED_SALES) - set(df.columns))
    rows = df.to_dict(orient="records")
    return ParseResult(rows=validate_rows(rows), missing_columns=missing)

def error_report_csv(issues: list[ValidationIssue]) -> str:
    columns = ["row", "field", "code", "message", "value"]
    return pd.DataFrame([i.to_dict() for i in issues], columns=columns).to_csv(index=False)
