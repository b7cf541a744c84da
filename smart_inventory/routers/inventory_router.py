import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from smart_inventory.db.boltic import BolticClient
from smart_inventory.db.session import get_boltic_client
from smart_inventory.db.tables import INVENTORY_SNAPSHOT, load_inventory, load_skus, load_stores
from smart_inventory.exceptions import NetworkError
from smart_inventory.metrics import stock_status

logger = logging.getLogger("smart_inventory.inventory")

router = APIRouter()

class InventoryEdit(BaseModel):
    on_hand_qty: Optional[int] = Field(default=None, ge=0)
    safety_stock: Optional[int] = Field(default=None, ge=0)

@router.get("")
async def list_inventory(client: BolticClient = Depends(get_boltic_client)):
    try:
        inventory, stores, skus = await asyncio.gather(
            load_inventory(client),
            load_stores(client),
            load_skus(client),
        )
    except NetworkError as e:
        raise HTTPException(status_code=502, detail=f"Failed to load inventory: {e.message}")

    store_names = {s.store_id: s.store_name for s in stores}
    sku_names = {s.sku_id: s.sku_name for s in skus}

    items = []
    for item in inventory:
        items.append({
            **item.model_dump(),
            "store_name": store_names.get(item.store_id, item.store_id),
            "sku_name": sku_names.get(item.sku_id, item.sku_id),
            "status": stock_status(item.on_hand_qty, item.safety_stock),
        })
    return {"items": items}

@router.put("/{store_id}/{sku_id}")
async def update_inventory(
    store_id: str,
    sku_id: str,
    edit: InventoryEdit,
    client: BolticClient = Depends(get_boltic_client),
):
    try:
        inventory = await load_inventory(client)
        current = next(
            (i for i in inventory if i.store_id == store_id and i.sku_id == sku_id), None
        )
        if current is None:
            raise HTTPException(status_code=404, detail="Inventory item not found")

        updated = current.model_copy(update=edit.model_dump(exclude_none=True))
        result = await client.upsert_rows(INVENTORY_SNAPSHOT, [updated.model_dump()])
    except NetworkError as e:
        raise HTTPException(status_code=502, detail=f"Failed to save: {e.message}")

    if not result["success"]:
        raise HTTPException(status_code=502, detail=f"Failed to save: {len(result['errors'])} errors")

    logger.info("Updated inventory %s/%s", store_id, sku_id)
    return {
        "success": True,
        "message": "Inventory updated successfully",
        "item": {**updated.model_dump(), "status": stock_status(updated.on_hand_qty, updated.safety_stock)},
    }
