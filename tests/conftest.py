"""
Pytest fixtures shared by the Smart Inventory tests.

Boltic is replaced by an in-memory fake that records every call.
"""

import pytest
from fastapi.testclient import TestClient

from smart_inventory.db.session import get_boltic_client
from smart_inventory.exceptions import NetworkError
from smart_inventory.ingest.state import IngestSessions
from smart_inventory.main import app
from smart_inventory.routers.ingest_router import get_sessions


class FakeBoltic:
    """Stands in for BolticClient. ``fail`` names methods that raise NetworkError."""

    def __init__(self, tables=None, upsert_response=None, fail=(), on_upsert=None):
        self.tables = tables or {}
        self.upsert_response = upsert_response or {
            "success": True, "inserted": 0, "updated": 0, "errors": [],
        }
        self.fail = set(fail)
        self.on_upsert = on_upsert
        self.calls = []
        self.sales_loop_url = "https://loop.test/newsales"

    def _record(self, method, *args):
        self.calls.append((method, *args))
        if method in self.fail:
            raise NetworkError(f"{method} unavailable", code="TRANSPORT")

    def called(self, method):
        return [c for c in self.calls if c[0] == method]

    async def list_table(self, table):
        self._record("list_table", table)
        return list(self.tables.get(table, []))

    async def upsert_rows(self, table, rows):
        self._record("upsert_rows", table, rows)
        if self.on_upsert:
            self.on_upsert()
        return dict(self.upsert_response)

    async def insert_rows(self, table, rows):
        self._record("insert_rows", table, rows)
        return {"success": True}

    async def trigger_workflow(self, workflow_id, payload):
        self._record("trigger_workflow", workflow_id, payload)
        return {"ok": True}

    async def list_workflow_runs(self, workflow_id, limit=5):
        self._record("list_workflow_runs", workflow_id, limit)
        return [{"id": "run-1", "status": "success"}][:limit]

    async def post_sales_loop(self, envelope):
        self._record("post_sales_loop", envelope)
        return {"status": "accepted"}


# =============================================================================
# SAMPLE DATA
# =============================================================================

@pytest.fixture
def sales_csv() -> bytes:
    return (
        "date,store_id,sku_id,units_sold\n"
        "2025-11-27,STORE_PUNE_01,BEV-COC-750,12\n"
        "2025-11-27,STORE_PUNE_01,SNK-LAYS-CLSC-52,5\n"
        "2025-11-28, STORE_THANE_01 ,BEV-COC-750,3\n"
    ).encode("utf-8")


@pytest.fixture
def bad_sales_csv() -> bytes:
    return (
        "date,store_id,sku_id,units_sold\n"
        "2025-11-27,S1,SKU1,abc\n"
        "not-a-date,,SKU2,4\n"
    ).encode("utf-8")


@pytest.fixture
def tables():
    return {
        "store_master": [
            {"store_id": "STORE_PUNE_01", "store_name": "Pune City Fresh Store", "city": "Pune", "region": "West"},
            {"store_id": "STORE_THANE_01", "store_name": "Thane Suburban Fresh Store", "city": "Thane", "region": "West"},
        ],
        "sku_master": [
            {"sku_id": "BEV-COC-750", "sku_name": "Coca-Cola 750ml", "category": "Beverages", "uom": "ml"},
            {"sku_id": "SNK-LAYS-CLSC-52", "sku_name": "Lay's Classic 52g", "category": "Snacks", "uom": "g"},
            {"sku_id": "DAIRY-MILK-500", "sku_name": "Amul Milk 500ml", "category": "Dairy", "uom": "ml"},
        ],
        "inventory_snapshot": [
            {"store_id": "STORE_PUNE_01", "sku_id": "BEV-COC-750", "on_hand_qty": 10, "safety_stock": 30,
             "reorder_multiple": 12, "vendor_email": "coke@vendor.test"},
            {"store_id": "STORE_PUNE_01", "sku_id": "SNK-LAYS-CLSC-52", "on_hand_qty": 22, "safety_stock": 20,
             "reorder_multiple": 24, "vendor_email": "lays@vendor.test"},
            {"store_id": "STORE_THANE_01", "sku_id": "BEV-COC-750", "on_hand_qty": 40, "safety_stock": 30,
             "reorder_multiple": 12, "vendor_email": ""},
            {"store_id": "STORE_THANE_01", "sku_id": "DAIRY-MILK-500", "on_hand_qty": 8, "safety_stock": 8,
             "reorder_multiple": 6, "vendor_email": "amul@vendor.test"},
        ],
        "replenishment_actions": [
            {"action_ts": "2025-11-27T10:00:00Z", "store_id": "STORE_PUNE_01", "sku_id": "BEV-COC-750",
             "action_type": "order_request", "status": "generated", "details": {}},
            {"action_ts": "2025-11-26T10:00:00Z", "store_id": "STORE_THANE_01", "sku_id": "DAIRY-MILK-500",
             "action_type": "order_request", "status": "sent", "details": {}},
            {"action_ts": "2025-11-25T10:00:00Z", "store_id": "STORE_PUNE_01", "sku_id": "SNK-LAYS-CLSC-52",
             "action_type": "order_request", "status": "pending", "details": {}},
        ],
        "demand_forecast": [
            {"run_ts": "2025-11-28T06:00:00Z", "store_id": "STORE_PUNE_01", "sku_id": "BEV-COC-750",
             "forecast_horizon_days": 7, "recommended_order_qty": 48,
             "daily_forecast": [{"day": "Mon", "units": 10}, {"day": "Tue", "units": 12}],
             "reasoning": {"avg_daily_sales": 11.2, "weekend_boost": 1.3, "promo_active": True,
                           "weather_impact": "hot"}},
        ],
    }


# =============================================================================
# APP FIXTURES
# =============================================================================

@pytest.fixture
def fake_boltic(tables):
    return FakeBoltic(tables=tables)


@pytest.fixture
def sessions():
    return IngestSessions()


@pytest.fixture
def client(fake_boltic, sessions):
    """Test client with Boltic and the ingest session registry swapped out."""
    app.dependency_overrides[get_boltic_client] = lambda: fake_boltic
    app.dependency_overrides[get_sessions] = lambda: sessions
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
