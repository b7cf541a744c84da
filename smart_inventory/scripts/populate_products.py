# smart_inventory/scripts/populate_products.py
"""Create the store catalog in Fynd, one product at a time.

Run: python -m smart_inventory.scripts.populate_products [--dry-run]
"""

import argparse
import logging
import sys
import time

import httpx

from smart_inventory.db.session import get_settings

logger = logging.getLogger("smart_inventory.populate_products")

PRODUCTS = [
    {"name": "Coca-Cola Soft Drink PET Bottle 750ml", "brand": "Coca-Cola", "category": "Beverages",
     "item_code": "BEV-COC-750", "description": "Refreshing Coca-Cola soft drink in PET bottle",
     "price": 40.00, "size": "750ml", "department": "Food & Beverages"},
    {"name": "Coca-Cola Zero Sugar Soft Drink PET Bottle 750ml", "brand": "Coca-Cola", "category": "Beverages",
     "item_code": "BEV-COCZ-750", "description": "Zero sugar Coca-Cola variant",
     "price": 40.00, "size": "750ml", "department": "Food & Beverages"},
    {"name": "Thums Up Soft Drink PET Bottle 750ml", "brand": "Thums Up", "category": "Beverages",
     "item_code": "BEV-THUMSUP-750", "description": "Bold and refreshing cola drink",
     "price": 40.00, "size": "750ml", "department": "Food & Beverages"},
    {"name": "Lay's Potato Chips Classic Salted 52g Pouch", "brand": "Lay's", "category": "Snacks",
     "item_code": "SNK-LAYS-CLSC-52", "description": "Crispy potato chips with classic salted flavor",
     "price": 20.00, "size": "52g", "department": "Snacks"},
    {"name": "MAGGI 2-Minute Masala Instant Noodles 70g Pouch", "brand": "MAGGI", "category": "Instant Foods",
     "item_code": "INST-MAGGI-MAS-70", "description": "Quick and tasty masala noodles",
     "price": 12.00, "size": "70g", "department": "Instant Foods"},
    {"name": "MAGGI Special Masala Instant Noodles 70g Pouch", "brand": "MAGGI", "category": "Instant Foods",
     "item_code": "INST-MAGGI-SPC-70", "description": "Special masala variant instant noodles",
     "price": 14.00, "size": "70g", "department": "Instant Foods"},
    {"name": "Cadbury Dairy Milk Silk Chocolate Bar 60g", "brand": "Cadbury", "category": "Confectionery",
     "item_code": "CONF-SILK-PLN-60", "description": "Premium milk chocolate with smooth texture",
     "price": 85.00, "size": "60g", "department": "Confectionery"},
    {"name": "Cadbury Dairy Milk Silk Hazelnut Chocolate Bar 58g", "brand": "Cadbury", "category": "Confectionery",
     "item_code": "CONF-SILK-HAZ-58", "description": "Silk chocolate with crunchy hazelnuts",
     "price": 90.00, "size": "58g", "department": "Confectionery"},
    {"name": "Parle-G Gold Biscuits 1kg Pack", "brand": "Parle", "category": "Biscuits",
     "item_code": "BISC-PARLEG-1000", "description": "Classic glucose biscuits family pack",
     "price": 80.00, "size": "1kg", "department": "Snacks"},
    {"name": "Britannia Good Day Butter Cookies 100g", "brand": "Britannia", "category": "Biscuits",
     "item_code": "BISC-GDDAY-100", "description": "Delicious butter cookies",
     "price": 30.00, "size": "100g", "department": "Snacks"},
    {"name": "Amul Fresh Milk Full Cream 500ml", "brand": "Amul", "category": "Dairy",
     "item_code": "DAIRY-MILK-500", "description": "Fresh full cream milk",
     "price": 28.00, "size": "500ml", "department": "Dairy"},
    {"name": "Amul Butter 100g Pack", "brand": "Amul", "category": "Dairy",
     "item_code": "DAIRY-BUTTER-100", "description": "Pure butter spread",
     "price": 55.00, "size": "100g", "department": "Dairy"},
    {"name": "Pepsi Soft Drink PET Bottle 750ml", "brand": "Pepsi", "category": "Beverages",
     "item_code": "BEV-PEPSI-750", "description": "Refreshing Pepsi cola drink",
     "price": 40.00, "size": "750ml", "department": "Food & Beverages"},
    {"name": "Mountain Dew Soft Drink 750ml", "brand": "Mountain Dew", "category": "Beverages",
     "item_code": "BEV-DEW-750", "description": "Citrus flavored soft drink",
     "price": 40.00, "size": "750ml", "department": "Food & Beverages"},
    {"name": "Kurkure Masala Munch 90g", "brand": "Kurkure", "category": "Snacks",
     "item_code": "SNK-KURKURE-90", "description": "Crunchy masala snack",
     "price": 20.00, "size": "90g", "department": "Snacks"},
]

COST_MARKUP = 1.3

def build_product_payload(product):
    """Translate a catalog entry into a Fynd create-product request body."""
    return {
        "name": product["name"],
        "brand": {"name": product["brand"]},
        "category": {"name": product["category"]},
        "departments": [product["department"]],
        "item_code": product["item_code"],
        "description": product["description"],
        "sizes": [
            {
                "size": product["size"],
                "price": round(product["price"] * COST_MARKUP, 2),
                "price_effective": product["price"],
                "currency": "INR",
                "seller_identifier": product["item_code"],
            }
        ],
        "is_active": True,
        "slug": product["item_code"].lower(),
    }

def products_url(api_base, company_id):
    return f"{api_base.rstrip('/')}/service/platform/catalog/v1.0/company/{company_id}/products"

def create_product(client, url, product):
    """Create one product. Returns the response body, or None if Fynd refused it."""
    try:
        resp = client.post(url, json=build_product_payload(product))
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        try:
            body = e.response.json()
        except ValueError:
            body = None
        message = body.get("message") if isinstance(body, dict) else None
        logger.error("Failed to create %s: %s", product["name"], message or e)
        return None
    except httpx.HTTPError as e:
        logger.error("Failed to create %s: %s", product["name"], e)
        return None

    logger.info("Created: %s", product["name"])
    try:
        return resp.json() if resp.content else {}
    except ValueError:
        logger.warning("Created %s but the response was not JSON", product["name"])
        return {}

def populate_products(client, url, products=PRODUCTS, delay=1.0):
    """Create every product sequentially, pausing ``delay`` seconds between requests.

    Returns:
        Dictionary with success, failed and total counts
    """
    success = failed = 0
    for idx, product in enumerate(products):
        if create_product(client, url, product) is not None:
            success += 1
        else:
            failed += 1
        if delay and idx < len(products) - 1:
            time.sleep(delay)  # Fynd rate limit

    return {"success": success, "failed": failed, "total": len(products)}

def main(argv=None):
    parser = argparse.ArgumentParser(description="Populate the Fynd catalog with store products")
    parser.add_argument("--delay", type=float, default=1.0, help="Seconds between requests")
    parser.add_argument("--dry-run", action="store_true", help="Print payloads without calling Fynd")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    settings = get_settings()

    if args.dry_run:
        for product in PRODUCTS:
            logger.info("%s", build_product_payload(product))
        return 0

    if not settings.FYND_COMPANY_ID or not settings.FYND_AUTH_TOKEN:
        logger.error("FYND_COMPANY_ID and FYND_AUTH_TOKEN must be set")
        return 1

    url = products_url(settings.FYND_API_BASE, settings.FYND_COMPANY_ID)
    logger.info("Populating company %s with %d products", settings.FYND_COMPANY_ID, len(PRODUCTS))

    headers = {
        "Authorization": f"Bearer {settings.FYND_AUTH_TOKEN}",
        "Content-Type": "application/json",
        "x-fp-cli": "8.0.4",
    }
    with httpx.Client(headers=headers, timeout=settings.HTTP_TIMEOUT) as client:
        counts = populate_products(client, url, delay=args.delay)

    logger.info("Success: %d, Failed: %d, Total: %d", counts["success"], counts["failed"], counts["total"])
    logger.info("View products: https://platform.fynd.com/company/%s/products/list", settings.FYND_COMPANY_ID)
    return 0 if counts["failed"] == 0 else 1

if __name__ == "__main__":
    sys.exit(main())
