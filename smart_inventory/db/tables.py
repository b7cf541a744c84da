import logging
from typing import TypeVar

from pydantic import ValidationError

from smart_inventory.db.boltic import BolticClient
from smart_inventory.db.models import (
    Forecast,
    InventorySnapshot,
    ReplenishmentAction,
    Row,
    Sku,
    Store,
)

logger = logging.getLogger("smart_inventory.tables")

STORE_MASTER = "store_master"
SKU_MASTER = "sku_master"
INVENTORY_SNAPSHOT = "inventory_snapshot"
REPLENISHMENT_ACTIONS = "replenishment_actions"
DEMAND_FORECAST = "demand_forecast"
SALES_HISTORY = "sales_history"

RowT = TypeVar("RowT", bound=Row)

def parse_rows(rows: list[dict], model: type[RowT], table: str) -> list[RowT]:
    """Validate raw table rows, skipping (and logging) the ones that don't fit ``model``."""
    parsed: list[RowT] = []
    for idx, raw in enumerate(rows):
        try:
            parsed.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning("Skipping %s row %d: %s", table, idx, e.errors()[0]["msg"])
    return parsed

async def load_stores(client: BolticClient) -> list[Store]:
    return parse_rows(await client.list_table(STORE_MASTER), Store, STORE_MASTER)

async def load_skus(client: BolticClient) -> list[Sku]:
    return parse_rows(await client.list_table(SKU_MASTER), Sku, SKU_MASTER)

async def load_inventory(client: BolticClient) -> list[InventorySnapshot]:
    return parse_rows(await client.list_table(INVENTORY_SNAPSHOT), InventorySnapshot, INVENTORY_SNAPSHOT)

async def load_replenishment_actions(client: BolticClient) -> list[ReplenishmentAction]:
    return parse_rows(
        await client.list_table(REPLENISHMENT_ACTIONS), ReplenishmentAction, REPLENISHMENT_ACTIONS
    )

async def load_forecasts(client: BolticClient) -> list[Forecast]:
    return parse_rows(await client.list_table(DEMAND_FORECAST), Forecast, DEMAND_FORECAST)
