"""Integration tests for the Lending API endpoints via TestClient."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from lending.api import item_router, order_router, register_lending_exception_handlers
from lending.order.order import Order
from protean.exceptions import ExpectedVersionError


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(order_router)
    app.include_router(item_router)
    register_lending_exception_handlers(app)
    return TestClient(app)


def _register_items(client, equipment_id, count):
    item_ids = []
    for n in range(count):
        response = client.post("/items", json={"equipment_id": equipment_id, "serial_number": f"SN-{n}"})
        assert response.status_code == 201
        item_ids.append(response.json()["item_id"])
    return item_ids


def _place_order(client, **overrides):
    defaults = {
        "user_id": "user-api-001",
        "equipment_id": "equip-api-001",
        "quantity": 2,
        "estimated_pickup_time": "2026-11-02T10:00:00Z",
        "day": 3,
    }
    defaults.update(overrides)
    response = client.post("/orders", json=defaults)
    assert response.status_code == 201
    return response.json()["order_id"]


def _approve(client, order_id, item_ids, admin_id="admin-api-001"):
    return client.post(
        f"/orders/{order_id}/response",
        json={"admin_id": admin_id, "reply": "Approve", "item_ids": item_ids},
    )


def _user_order(client, user_id, order_id):
    response = client.get(f"/orders/by-user/{user_id}")
    assert response.status_code == 200
    return next(o for o in response.json() if o["order_id"] == order_id)


class TestPlaceOrderAPI:
    def test_place_returns_201(self, client):
        response = client.post(
            "/orders",
            json={
                "user_id": "user-api-p1",
                "equipment_id": "equip-api-p1",
                "quantity": 1,
                "estimated_pickup_time": "2026-11-02T10:00:00Z",
                "day": 1,
            },
        )
        assert response.status_code == 201
        assert "order_id" in response.json()

    def test_caller_supplied_status_is_ignored(self, client):
        order_id = _place_order(client, user_id="user-api-p2", status="Approved")
        assert _user_order(client, "user-api-p2", order_id)["status"] == "Pending"

    def test_zero_quantity_returns_422(self, client):
        response = client.post(
            "/orders",
            json={
                "user_id": "user-api-p3",
                "equipment_id": "equip-api-p3",
                "quantity": 0,
                "estimated_pickup_time": "2026-11-02T10:00:00Z",
                "day": 1,
            },
        )
        assert response.status_code == 422


class TestRespondToOrderAPI:
    def test_approve_returns_200(self, client):
        item_ids = _register_items(client, "equip-api-001", 3)
        order_id = _place_order(client)

        response = _approve(client, order_id, item_ids[:2])

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert _user_order(client, "user-api-001", order_id)["status"] == "Approved"

    def test_deny_returns_200(self, client):
        order_id = _place_order(client, user_id="user-api-d1")

        response = client.post(
            f"/orders/{order_id}/response",
            json={"admin_id": "admin-api-001", "reply": "Deny"},
        )

        assert response.status_code == 200
        assert _user_order(client, "user-api-d1", order_id)["status"] == "Denied"

    def test_quantity_mismatch_returns_400(self, client):
        item_ids = _register_items(client, "equip-api-001", 3)
        order_id = _place_order(client)

        response = _approve(client, order_id, [item_ids[0], item_ids[0]])

        assert response.status_code == 400

    def test_unknown_reply_returns_400(self, client):
        order_id = _place_order(client)

        response = client.post(
            f"/orders/{order_id}/response",
            json={"admin_id": "admin-api-001", "reply": "Maybe"},
        )

        assert response.status_code == 400

    def test_insufficient_stock_returns_422(self, client):
        item_ids = _register_items(client, "equip-api-001", 2)
        first = _place_order(client, quantity=1)
        assert _approve(client, first, [item_ids[0]]).status_code == 200

        second = _place_order(client, quantity=2)
        response = _approve(client, second, item_ids)

        assert response.status_code == 422
        assert "Insufficient stock" in response.json()["error"]

    def test_second_decision_returns_422(self, client):
        item_ids = _register_items(client, "equip-api-001", 2)
        order_id = _place_order(client)
        assert _approve(client, order_id, item_ids).status_code == 200

        response = _approve(client, order_id, item_ids)

        assert response.status_code == 422

    def test_write_conflict_returns_409(self, client):
        item_ids = _register_items(client, "equip-api-001", 2)
        order_id = _place_order(client, user_id="user-api-v1")

        def concurrently_changed(self, admin_id, item_ids):
            raise ExpectedVersionError("Wrong expected version: order was changed concurrently")

        with patch.object(Order, "approve", concurrently_changed):
            response = _approve(client, order_id, item_ids)

        assert response.status_code == 409
        assert "changed concurrently" in response.json()["error"]
        assert _user_order(client, "user-api-v1", order_id)["status"] == "Pending"

        assert _approve(client, order_id, item_ids).status_code == 200

    def test_missing_order_returns_404(self, client):
        response = client.post(
            "/orders/no-such-order/response",
            json={"admin_id": "admin-api-001", "reply": "Deny"},
        )
        assert response.status_code == 404


class TestCancelOrderAPI:
    def test_cancel_returns_200(self, client):
        item_ids = _register_items(client, "equip-api-001", 2)
        order_id = _place_order(client, user_id="user-api-c1")
        _approve(client, order_id, item_ids)

        response = client.post(
            f"/orders/{order_id}/cancel",
            json={"admin_id": "admin-api-001", "description": "Event postponed"},
        )

        assert response.status_code == 200
        assert _user_order(client, "user-api-c1", order_id)["status"] == "Canceled"

    def test_cancel_twice_returns_422(self, client):
        order_id = _place_order(client)
        client.post(f"/orders/{order_id}/cancel", json={"admin_id": "admin-api-001"})

        response = client.post(f"/orders/{order_id}/cancel", json={"admin_id": "admin-api-001"})

        assert response.status_code == 422

    def test_missing_order_returns_404(self, client):
        response = client.post("/orders/no-such-order/cancel", json={"admin_id": "admin-api-001"})
        assert response.status_code == 404


class TestItemLogsAPI:
    def test_logs_follow_allocation_and_release(self, client):
        item_ids = _register_items(client, "equip-api-001", 2)
        order_id = _place_order(client)
        _approve(client, order_id, item_ids)
        client.post(
            f"/orders/{order_id}/cancel",
            json={"admin_id": "admin-api-002", "description": "No longer needed"},
        )

        response = client.get(f"/items/{item_ids[0]}/logs")

        assert response.status_code == 200
        logs = response.json()
        assert {log["condition"] for log in logs} == {"PendingHandout", "InStock"}
        release = next(log for log in logs if log["condition"] == "InStock")
        assert release["admin_id"] == "admin-api-002"
        assert release["description"] == "No longer needed"

    def test_new_item_has_no_logs(self, client):
        (item_id,) = _register_items(client, "equip-api-001", 1)
        response = client.get(f"/items/{item_id}/logs")
        assert response.status_code == 200
        assert response.json() == []
