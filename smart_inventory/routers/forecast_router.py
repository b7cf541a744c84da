import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from smart_inventory.db.boltic import BolticClient
from smart_inventory.db.models import ReplenishmentAction
from smart_inventory.db.session import get_boltic_client
from smart_inventory.db.tables import REPLENISHMENT_ACTIONS, load_forecasts, load_inventory
from smart_inventory.exceptions import NetworkError
from smart_inventory.metrics import stock_status

logger = logging.getLogger("smart_inventory.forecasts")

router = APIRouter()

@router.get("")
async def list_forecasts(client: BolticClient = Depends(get_boltic_client)):
    try:
        forecasts, inventory = await asyncio.gather(load_forecasts(client), load_inventory(client))
    except NetworkError as e:
        raise HTTPException(status_code=502, detail=f"Failed to load forecasts: {e.message}")

    stock = {(i.store_id, i.sku_id): i for i in inventory}
    results = []
    for f in forecasts:
        item = stock.get((f.store_id, f.sku_id))
        results.append({
            **f.model_dump(),
            "on_hand_qty": item.on_hand_qty if item else None,
            "safety_stock": item.safety_stock if item else None,
            "status": stock_status(item.on_hand_qty, item.safety_stock) if item else None,
        })
    return {"forecasts": results}

@router.post("/{store_id}/{sku_id}/order")
async def create_order(
    store_id: str,
    sku_id: str,
    client: BolticClient = Depends(get_boltic_client),
):
    """Accept a forecast's recommended order as a generated replenishment action."""
    try:
        forecasts, inventory = await asyncio.gather(load_forecasts(client), load_inventory(client))
        forecast = next((f for f in forecasts if f.store_id == store_id and f.sku_id == sku_id), None)
        if forecast is None:
            raise HTTPException(status_code=404, detail="Forecast not found")

        item = next((i for i in inventory if i.store_id == store_id and i.sku_id == sku_id), None)
        action = ReplenishmentAction(
            action_ts=datetime.now(timezone.utc).isoformat(),
            store_id=store_id,
            sku_id=sku_id,
            action_type="order_request",
            status="generated",
            details={
                "order_qty": forecast.recommended_order_qty,
                "vendor": item.vendor_email if item and item.vendor_email else "unknown",
                "reason": "AI forecast recommendation",
                "forecast_run": forecast.run_ts,
            },
        )
        await client.insert_rows(REPLENISHMENT_ACTIONS, [action.model_dump()])
    except NetworkError as e:
        raise HTTPException(status_code=502, detail=f"Failed to create order: {e.message}")

    logger.info("Order request for %s/%s: %d units", store_id, sku_id, forecast.recommended_order_qty)
    return {
        "success": True,
        "message": f"Purchase order created for {forecast.recommended_order_qty} units",
        "action": action.model_dump(),
    }
