from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cityroots.api.api_server import create_api_app


@pytest.fixture
def client(settings, no_rate_limit):
    with TestClient(create_api_app(settings)) as test_client:
        yield test_client


def test_empty_cart(client) -> None:
    response = client.get("/api/cart/s1")

    assert response.status_code == 200
    assert response.json() == {
        "items": [],
        "totals": {"subtotal": 0.0, "tax": 0.0, "shipping": 0.0, "total": 0.0, "itemsCount": 0},
    }


def test_add_then_get(client) -> None:
    added = client.post("/api/cart/s1/add", json={"productId": "pro-tool-set", "quantity": 2})
    client.post("/api/cart/s1/add", json={"productId": "pro-tool-set"})

    assert added.status_code == 200
    assert added.json()["quantity"] == 2
    body = client.get("/api/cart/s1").json()
    assert body["items"][0]["quantity"] == 3
    assert body["totals"]["itemsCount"] == 3


@pytest.mark.parametrize("quantity", [0, 100, 1.5, "2"])
def test_add_rejects_bad_quantity(client, quantity) -> None:
    response = client.post("/api/cart/s1/add", json={"productId": "pro-tool-set", "quantity": quantity})

    assert response.status_code == 400
    assert response.json()["detail"] == "Quantity must be a whole number between 1 and 99"


def test_add_requires_product_id(client) -> None:
    response = client.post("/api/cart/s1/add", json={"quantity": 1})
    assert response.status_code == 400
    assert response.json()["detail"] == "Product ID is required"


def test_add_unknown_product(client) -> None:
    assert client.post("/api/cart/s1/add", json={"productId": "nope"}).status_code == 404


def test_add_out_of_stock_product(client) -> None:
    response = client.post("/api/cart/s1/add", json={"productId": "heirloom-tomato-set"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Product is out of stock"


def test_add_rejects_merge_past_cap(client) -> None:
    client.post("/api/cart/s1/add", json={"productId": "pro-tool-set", "quantity": 60})

    response = client.post("/api/cart/s1/add", json={"productId": "pro-tool-set", "quantity": 60})

    assert response.status_code == 400
    assert response.json()["detail"] == "Quantity cannot exceed 99"
    assert client.get("/api/cart/s1").json()["items"][0]["quantity"] == 60


def test_update_quantity_rules(client) -> None:
    client.post("/api/cart/s1/add", json={"productId": "pro-tool-set"})

    assert client.put("/api/cart/s1/update", json={"productId": "pro-tool-set", "quantity": 5}).json()["quantity"] == 5
    assert client.put("/api/cart/s1/update", json={"productId": "pro-tool-set", "quantity": 100}).status_code == 400
    assert client.put("/api/cart/s1/update", json={"productId": "pro-tool-set"}).status_code == 400
    assert client.put("/api/cart/s1/update", json={"productId": "pro-tool-set", "quantity": "x"}).status_code == 400
    assert client.put("/api/cart/s1/update", json={"productId": "herb-starter-kit", "quantity": 2}).status_code == 404

    removed = client.put("/api/cart/s1/update", json={"productId": "pro-tool-set", "quantity": 0})
    assert removed.json() == {"success": True, "message": "Item removed from cart"}
    assert client.get("/api/cart/s1").json()["items"] == []


def test_remove_and_clear(client) -> None:
    client.post("/api/cart/s1/add", json={"productId": "pro-tool-set"})
    client.post("/api/cart/s1/add", json={"productId": "herb-starter-kit"})

    assert client.delete("/api/cart/s1/remove/pro-tool-set").status_code == 200
    assert client.delete("/api/cart/s1/remove/pro-tool-set").status_code == 404
    assert client.delete("/api/cart/s1/clear").json()["message"] == "Cart cleared"
    assert client.get("/api/cart/s1").json()["items"] == []


def test_products_listing_and_filters(client) -> None:
    assert len(client.get("/api/products").json()) == 6
    featured = client.get("/api/products", params={"featured": "true"}).json()
    assert {product["id"] for product in featured} == {
        "rose-bush-collection",
        "pro-tool-set",
        "herb-starter-kit",
        "mini-succulents",
    }
    seeds = client.get("/api/products", params={"category": "seeds"}).json()
    assert [product["id"] for product in seeds] == ["herb-starter-kit"]
    assert client.get("/api/products", params={"search": "succulent"}).json()[0]["id"] == "mini-succulents"


def test_product_detail(client) -> None:
    assert client.get("/api/products/pro-tool-set").json()["price"] == 89.99
    assert client.get("/api/products/nope").status_code == 404


def test_status_reports_configuration(client) -> None:
    body = client.get("/api/status").json()
    assert body["status"] == "ok"
    assert body["cart_backend"] == "memory"
    assert body["payments_enabled"] is True
    assert body["email_enabled"] is False
