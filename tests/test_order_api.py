import uuid
from unittest.mock import MagicMock, patch

import pytest
import requests

from pizza_service.metrics import metrics_registry
from conftest import auth_header

FACTORY_POST = "pizza_service.services.order_service.requests.post"


def _factory_response(ok=True, status_code=200, body=None):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.json.return_value = body if body is not None else {}
    return response


@pytest.fixture()
def menu(client, admin_token):
    items = []
    for title, price in (("Veggie", 0.0038), ("Pepperoni", 0.0042)):
        response = client.put(
            "/api/order/menu",
            json={
                "title": f"{title} {uuid.uuid4().hex[:6]}",
                "description": f"A {title.lower()} pizza",
                "image": f"pizza-{title.lower()}.png",
                "price": price,
            },
            headers=auth_header(admin_token),
        )
        assert response.status_code == 200
        items.append(response.get_json()[-1])
    return items


@pytest.fixture()
def store(client, admin_token):
    response = client.post(
        "/api/franchise",
        json={"name": f"pizzaPocket {uuid.uuid4().hex[:8]}", "admins": []},
        headers=auth_header(admin_token),
    )
    franchise = response.get_json()
    response = client.post(
        f"/api/franchise/{franchise['id']}/store",
        json={"name": "SLC"},
        headers=auth_header(admin_token),
    )
    return response.get_json()


@pytest.fixture()
def diner(register_user):
    user, token, _ = register_user()
    return user, token


def _order_body(store, menu):
    return {
        "franchiseId": store["franchiseId"],
        "storeId": store["id"],
        "items": [
            {"menuId": item["id"], "description": item["title"], "price": item["price"]}
            for item in menu
        ],
    }


def test_get_menu_is_public(client, menu):
    response = client.get("/api/order/menu")
    assert response.status_code == 200
    ids = [item["id"] for item in response.get_json()]
    assert all(item["id"] in ids for item in menu)


def test_add_menu_item_requires_admin(client, diner):
    _, token = diner
    response = client.put(
        "/api/order/menu",
        json={"title": "Student", "price": 0.0001},
        headers=auth_header(token),
    )
    assert response.status_code == 403


def test_add_menu_item_validates_price(client, admin_token):
    response = client.put(
        "/api/order/menu",
        json={"title": "Broken", "price": "free"},
        headers=auth_header(admin_token),
    )
    assert response.status_code == 400


def test_create_order(client, diner, store, menu):
    user, token = diner
    factory_body = {"jwt": "factory.signed.jwt", "reportUrl": "https://factory.test/report/1"}

    with patch(FACTORY_POST, return_value=_factory_response(body=factory_body)) as mock_post:
        response = client.post("/api/order", json=_order_body(store, menu), headers=auth_header(token))

    assert response.status_code == 200
    body = response.get_json()
    assert body["jwt"] == "factory.signed.jwt"
    assert body["reportUrl"] == "https://factory.test/report/1"
    assert [item["menuId"] for item in body["order"]["items"]] == [item["id"] for item in menu]

    args, kwargs = mock_post.call_args
    assert args[0] == "http://factory.test/api/order"
    assert kwargs["headers"] == {"Authorization": "Bearer test-factory-key"}
    assert kwargs["json"]["diner"] == {"id": user["id"], "name": user["name"], "email": user["email"]}


def test_create_order_records_pizza_metrics(client, diner, store, menu):
    _, token = diner
    with patch(FACTORY_POST, return_value=_factory_response(body={"jwt": "x"})):
        client.post("/api/order", json=_order_body(store, menu), headers=auth_header(token))

    assert metrics_registry.get("pizzaMetrics_sold") == 2
    assert metrics_registry.get("pizzaMetrics_revenue") == pytest.approx(0.008)
    assert metrics_registry.get("pizzaMetrics_creationFailures") == 0
    assert metrics_registry.get("latencyMetrics_pizzaCreation") >= 0


def test_factory_rejection(client, diner, store, menu):
    _, token = diner
    factory = _factory_response(ok=False, status_code=500, body={"reportUrl": "https://factory.test/report/2"})

    with patch(FACTORY_POST, return_value=factory):
        response = client.post("/api/order", json=_order_body(store, menu), headers=auth_header(token))

    assert response.status_code == 500
    assert response.get_json() == {
        "message": "Failed to fulfill order at factory",
        "reportUrl": "https://factory.test/report/2",
    }
    assert metrics_registry.get("pizzaMetrics_creationFailures") == 1
    assert metrics_registry.get("pizzaMetrics_sold") == 0


def test_factory_unreachable(client, diner, store, menu):
    _, token = diner
    with patch(FACTORY_POST, side_effect=requests.ConnectionError("down")):
        response = client.post("/api/order", json=_order_body(store, menu), headers=auth_header(token))

    assert response.status_code == 500
    assert response.get_json()["message"] == "Failed to fulfill order at factory"
    assert metrics_registry.get("pizzaMetrics_creationFailures") == 1


def test_create_order_requires_auth(client, store, menu):
    response = client.post("/api/order", json=_order_body(store, menu))
    assert response.status_code == 401


def test_create_order_unknown_store(client, diner, store, menu):
    _, token = diner
    body = _order_body(store, menu)
    body["storeId"] = 999999

    with patch(FACTORY_POST) as mock_post:
        response = client.post("/api/order", json=body, headers=auth_header(token))

    assert response.status_code == 404
    mock_post.assert_not_called()


def test_create_order_requires_items(client, diner, store):
    _, token = diner
    response = client.post(
        "/api/order",
        json={"franchiseId": store["franchiseId"], "storeId": store["id"], "items": []},
        headers=auth_header(token),
    )
    assert response.status_code == 400


def test_get_orders(client, diner, store, menu):
    user, token = diner
    with patch(FACTORY_POST, return_value=_factory_response(body={"jwt": "x"})):
        created = client.post(
            "/api/order", json=_order_body(store, menu), headers=auth_header(token)
        ).get_json()["order"]

    response = client.get("/api/order", headers=auth_header(token))

    assert response.status_code == 200
    body = response.get_json()
    assert body["dinerId"] == user["id"]
    assert body["page"] == 1
    assert [order["id"] for order in body["orders"]] == [created["id"]]


def test_get_orders_pagination(client, diner):
    _, token = diner
    response = client.get("/api/order?page=2", headers=auth_header(token))
    assert response.get_json()["page"] == 2
    assert response.get_json()["orders"] == []
