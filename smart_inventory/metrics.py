from typing import Iterable

from smart_inventory.db.models import InventorySnapshot, ReplenishmentAction

DANGER = "danger"
WARNING = "warning"
SAFE = "safe"

PENDING_STATUSES = ("generated", "pending")

def stock_status(on_hand_qty: int, safety_stock: int) -> str:
    """Three-tier status from on_hand / safety_stock (<1.0 danger, <1.2 warning)."""
    if safety_stock <= 0:
        return SAFE
    ratio = on_hand_qty / safety_stock
    if ratio < 1.0:
        return DANGER
    if ratio < 1.2:
        return WARNING
    return SAFE

def is_low_stock(item: InventorySnapshot) -> bool:
    return item.on_hand_qty < item.safety_stock

def low_stock_count(snapshot: Iterable[InventorySnapshot]) -> int:
    return sum(1 for item in snapshot if is_low_stock(item))

def top_demand_skus(snapshot: Iterable[InventorySnapshot], limit: int = 5) -> list[dict]:
    """Rank SKUs by summed (safety_stock - on_hand_qty).

    A placeholder for real demand ranking. Ties keep first-seen order.
    """
    pressure: dict[str, int] = {}
    for item in snapshot:
        pressure[item.sku_id] = pressure.get(item.sku_id, 0) + (item.safety_stock - item.on_hand_qty)

    # sorted() is stable and dicts keep insertion order
    ranked = sorted(pressure.items(), key=lambda kv: kv[1], reverse=True)
    return [{"sku_id": sku_id, "estimated_sales": value} for sku_id, value in ranked[:limit]]

def pending_replenishment_count(actions: Iterable[ReplenishmentAction]) -> int:
    return sum(1 for a in actions if a.status in PENDING_STATUSES)

def dashboard_summary(
    stores: list,
    skus: list,
    snapshot: list[InventorySnapshot],
    actions: list[ReplenishmentAction],
    top_limit: int = 5,
) -> dict:
    return {
        "total_stores": len(stores),
        "total_skus": len(skus),
        "low_stock_items": low_stock_count(snapshot),
        "pending_replenishments": pending_replenishment_count(actions),
        "top_skus": top_demand_skus(snapshot, top_limit),
    }
