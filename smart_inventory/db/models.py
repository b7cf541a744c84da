import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

class Row(BaseModel):
    # Boltic rows carry bookkeeping columns (id, created_at, ...) we don't model
    model_config = ConfigDict(extra="ignore")

class SalesRecord(Row):
    date: datetime.date
    store_id: str
    sku_id: str
    units_sold: int = Field(ge=0)

class NormalizedSale(Row):
    date: str  # YYYY-MM-DD
    store_id: str
    sku_id: str
    units_sold: int = Field(gt=0)
    updated_at: str

class Store(Row):
    store_id: str
    store_name: str = ""
    city: str = ""
    region: str = ""

class Sku(Row):
    sku_id: str
    sku_name: str = ""
    category: str = ""
    uom: str = ""

class InventorySnapshot(Row):
    store_id: str
    sku_id: str
    on_hand_qty: int = Field(ge=0)
    safety_stock: int = Field(ge=0)
    reorder_multiple: int = Field(default=1, gt=0)
    vendor_email: str = ""

class DailyForecast(Row):
    day: str
    units: float

class ForecastReasoning(Row):
    avg_daily_sales: float = 0.0
    weekend_boost: float = 0.0
    promo_active: bool = False
    weather_impact: str = ""

class Forecast(Row):
    run_ts: Optional[str] = None
    store_id: str
    sku_id: str
    forecast_horizon_days: int = 7
    recommended_order_qty: int = 0
    daily_forecast: list[DailyForecast] = []
    reasoning: ForecastReasoning = ForecastReasoning()

class ReplenishmentAction(Row):
    action_ts: str
    store_id: str
    sku_id: str
    action_type: str
    status: str  # generated, pending, sent, ...
    details: dict[str, Any] = {}
