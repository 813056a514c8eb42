"""Lending load test scenarios.

Two journeys:

- AllocationJourney: one user owns its equipment type end to end
  (register items, place, approve, read logs, cancel). Every step must
  succeed.
- ContendedApprovalUser: many users share one scarce equipment type and
  race to approve orders against the same items. Stock and conflict
  rejections are expected; anything else is a failure.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import admin_id, cancel_reason, item_data, order_data, unique_equipment_id
from loadtests.helpers.response import extract_error_detail, is_contention_rejection
from loadtests.helpers.state import LendingState

SHARED_EQUIPMENT_ID = "EQ-LT-shared-projector"
SHARED_STOCK = 10


class AllocationJourney(SequentialTaskSet):
    """Register Items -> Place Order -> Approve -> Item Logs -> Cancel."""

    def on_start(self):
        self.state = LendingState(equipment_id=unique_equipment_id())

    @task
    def register_items(self):
        for _ in range(3):
            with self.client.post(
                "/items",
                json=item_data(self.state.equipment_id),
                catch_response=True,
                name="POST /items",
            ) as resp:
                if resp.status_code == 201:
                    self.state.item_ids.append(resp.json()["item_id"])
                else:
                    resp.failure(f"Register item failed: {resp.status_code} - {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def place_order(self):
        payload = order_data(self.state.equipment_id, quantity=random.randint(1, 3))
        with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["order_id"]
                self.state.user_id = payload["user_id"]
                self.state.quantity = payload["quantity"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def approve(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/response",
            json={
                "admin_id": admin_id(),
                "reply": "Approve",
                "item_ids": self.state.item_ids[: self.state.quantity],
            },
            catch_response=True,
            name="POST /orders/{id}/response",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "Approved"
            else:
                resp.failure(f"Approve failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def item_logs(self):
        item_id = self.state.item_ids[0]
        with self.client.get(f"/items/{item_id}/logs", catch_response=True, name="GET /items/{id}/logs") as resp:
            if resp.status_code != 200 or len(resp.json()) != 1:
                resp.failure(f"Item logs unexpected: {resp.status_code} - {resp.text[:200]}")

    @task
    def user_orders(self):
        with self.client.get(
            f"/orders/by-user/{self.state.user_id}",
            catch_response=True,
            name="GET /orders/by-user/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"User orders failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def cancel(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/cancel",
            json={"admin_id": admin_id(), "description": cancel_reason()},
            catch_response=True,
            name="POST /orders/{id}/cancel",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "Canceled"
            else:
                resp.failure(f"Cancel failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class LendingUser(HttpUser):
    """Administrators working through independent orders."""

    wait_time = between(1, 3)
    tasks = [AllocationJourney]


class ContendedApprovalUser(HttpUser):
    """Administrators racing to approve orders against one scarce stock.

    The shared pool is registered once by the locustfile at test start.
    """

    wait_time = between(0.1, 0.5)

    @task
    def place_and_approve(self):
        payload = order_data(SHARED_EQUIPMENT_ID, quantity=1)
        resp = self.client.post("/orders", json=payload, name="POST /orders (contended)")
        if resp.status_code != 201:
            return
        order_id = resp.json()["order_id"]

        # A random pick from the shared pool forces collisions between admins
        known = getattr(self.environment, "shared_item_ids", [])
        if not known:
            return
        item_id = random.choice(known)

        with self.client.post(
            f"/orders/{order_id}/response",
            json={"admin_id": admin_id(), "reply": "Approve", "item_ids": [item_id]},
            catch_response=True,
            name="POST /orders/{id}/response (contended)",
        ) as approve:
            if approve.status_code == 200:
                self._release_later(order_id)
            elif is_contention_rejection(approve):
                approve.success()
            else:
                approve.failure(f"Unexpected rejection: {approve.status_code} - {extract_error_detail(approve)}")

    def _release_later(self, order_id):
        if random.random() < 0.5:
            self.client.post(
                f"/orders/{order_id}/cancel",
                json={"admin_id": admin_id(), "description": cancel_reason()},
                name="POST /orders/{id}/cancel (contended)",
            )
