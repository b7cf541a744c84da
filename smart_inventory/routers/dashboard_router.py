import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from smart_inventory.db.boltic import BolticClient
from smart_inventory.db.session import get_boltic_client, get_settings
from smart_inventory.db.tables import (
    load_inventory,
    load_replenishment_actions,
    load_skus,
    load_stores,
)
from smart_inventory.exceptions import NetworkError
from smart_inventory.metrics import dashboard_summary

logger = logging.getLogger("smart_inventory.dashboard")

router = APIRouter()

@router.get("/summary")
async def get_summary(
    runs: int = Query(default=5, ge=0, le=50),
    client: BolticClient = Depends(get_boltic_client),
):
    settings = get_settings()
    try:
        # No ordering dependency between the tables
        stores, skus, inventory, actions = await asyncio.gather(
            load_stores(client),
            load_skus(client),
            load_inventory(client),
            load_replenishment_actions(client),
        )
    except NetworkError as e:
        raise HTTPException(status_code=502, detail=f"Failed to load dashboard data: {e.message}")

    summary = dashboard_summary(stores, skus, inventory, actions, top_limit=settings.TOP_SKU_LIMIT)

    # Recent sync runs are informational; the summary stands without them
    workflow_runs = []
    if runs:
        try:
            workflow_runs = await client.list_workflow_runs(settings.SALES_SYNC_WORKFLOW, limit=runs)
        except NetworkError as e:
            logger.warning("Could not load workflow runs: %s", e)

    return {**summary, "workflow_runs": workflow_runs}
