"""Tests for the Fynd catalog population script."""

import json

import httpx
import pytest

from smart_inventory.scripts import populate_products as script

URL = script.products_url("https://api.fynd.test/", "4242")


def test_products_url():
    assert URL == "https://api.fynd.test/service/platform/catalog/v1.0/company/4242/products"


def test_build_product_payload():
    payload = script.build_product_payload(script.PRODUCTS[0])
    assert payload["name"] == "Coca-Cola Soft Drink PET Bottle 750ml"
    assert payload["brand"] == {"name": "Coca-Cola"}
    assert payload["category"] == {"name": "Beverages"}
    assert payload["departments"] == ["Food & Beverages"]
    assert payload["slug"] == "bev-coc-750"
    assert payload["is_active"] is True
    assert payload["sizes"] == [{
        "size": "750ml",
        "price": 52.0,
        "price_effective": 40.0,
        "currency": "INR",
        "seller_identifier": "BEV-COC-750",
    }]


def test_item_codes_are_unique():
    codes = [p["item_code"] for p in script.PRODUCTS]
    assert len(codes) == len(set(codes)) == 15


def test_populate_counts_failures_and_continues():
    created = []

    def handler(request):
        body = json.loads(request.content)
        if body["item_code"] == "BEV-COCZ-750":
            return httpx.Response(409, json={"message": "Product already exists"})
        created.append(body["item_code"])
        return httpx.Response(200, json={"uid": len(created)})

    products = script.PRODUCTS[:3]
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        counts = script.populate_products(client, URL, products, delay=0)

    assert counts == {"success": 2, "failed": 1, "total": 3}
    assert created == ["BEV-COC-750", "BEV-THUMSUP-750"]


def test_transport_error_is_a_failure():
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        assert script.create_product(client, URL, script.PRODUCTS[0]) is None


def test_non_json_success_counts_as_created():
    def handler(request):
        return httpx.Response(201, text="Created", headers={"Content-Type": "text/plain"})

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        counts = script.populate_products(client, URL, script.PRODUCTS[:2], delay=0)

    assert counts == {"success": 2, "failed": 0, "total": 2}


def test_pauses_between_requests(monkeypatch):
    sleeps = []
    monkeypatch.setattr(script.time, "sleep", sleeps.append)

    with httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(201, json={}))) as client:
        script.populate_products(client, URL, script.PRODUCTS[:3], delay=1.0)

    assert sleeps == [1.0, 1.0]


def test_main_requires_credentials(monkeypatch):
    uncached = script.get_settings.__wrapped__
    monkeypatch.setenv("FYND_COMPANY_ID", "")
    monkeypatch.setenv("FYND_AUTH_TOKEN", "")
    monkeypatch.setattr(script, "get_settings", uncached)
    monkeypatch.setattr(script.httpx, "Client", lambda *a, **kw: pytest.fail("network used without credentials"))
    assert script.main([]) == 1


def test_main_dry_run_makes_no_calls(monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("network used in dry run")

    monkeypatch.setattr(script.httpx, "Client", boom)
    assert script.main(["--dry-run"]) == 0
