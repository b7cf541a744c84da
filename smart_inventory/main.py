import logging

from fastapi import FastAPI

from smart_inventory.db.session import get_settings
from smart_inventory.routers.dashboard_router import router as dashboard_router
from smart_inventory.routers.forecast_router import router as forecast_router
from smart_inventory.routers.ingest_router import router as ingest_router
from smart_inventory.routers.inventory_router import router as inventory_router
from smart_inventory.routers.manual_entry_router import router as manual_entry_router

logging.basicConfig(
    level=get_settings().LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="Smart Inventory API")

@app.get("/")
def root():
    return {"ok": True, "service": "smart-inventory"}

app.include_router(ingest_router, prefix="/ingest", tags=["ingest"])
app.include_router(manual_entry_router, prefix="/manual-entry", tags=["manual-entry"])
app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])
app.include_router(forecast_router, prefix="/forecasts", tags=["forecasts"])
