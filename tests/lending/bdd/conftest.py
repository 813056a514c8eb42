"""Shared BDD fixtures and step definitions for the lending domain."""

import json
from datetime import UTC, datetime

import pytest
from lending.item.item import Item
from lending.item.log import ItemLog
from lending.order.canceled_order import CanceledOrder
from lending.order.decision import RespondToOrder
from lending.order.order import Order
from lending.order.placement import PlaceOrder
from protean import current_domain
from protean.exceptions import InvalidOperationError, ValidationError
from pytest_bdd import given, parsers, then

_ERROR_CLASSES = {
    "validation": ValidationError,
    "precondition": InvalidOperationError,
}


@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


@pytest.fixture()
def items():
    """Item ids registered by Given steps, keyed by equipment id."""
    return {}


def _count(aggregate_cls):
    return current_domain.repository_for(aggregate_cls)._dao.query.all().total


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('{count:d} items of equipment "{equipment_id}" are in stock'))
def items_in_stock(stock, items, count, equipment_id):
    items.setdefault(equipment_id, []).extend(stock(equipment_id, count))


@given(
    parsers.cfparse('a pending order for {quantity:d} items of equipment "{equipment_id}"'),
    target_fixture="order_id",
)
def pending_order(quantity, equipment_id):
    return current_domain.process(
        PlaceOrder(
            user_id="user-bdd",
            equipment_id=equipment_id,
            quantity=quantity,
            estimated_pickup_time=datetime(2026, 11, 2, 10, 0, tzinfo=UTC),
            day=2,
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('the order was approved with the first {count:d} items of "{equipment_id}"'))
def order_was_approved(order_id, items, count, equipment_id):
    current_domain.process(
        RespondToOrder(
            order_id=order_id,
            admin_id="admin-bdd",
            reply="Approve",
            item_ids=json.dumps(items[equipment_id][:count]),
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_id, status):
    order = current_domain.repository_for(Order).get(order_id)
    assert order.status == status


@then(parsers.cfparse('the order has {count:d} details in status "{status}"'))
def order_has_details(order_id, count, status):
    order = current_domain.repository_for(Order).get(order_id)
    assert len(order.details) == count
    assert all(d.status == status for d in order.details)


@then("the order has no details")
def order_has_no_details(order_id):
    order = current_domain.repository_for(Order).get(order_id)
    assert len(order.details) == 0


@then(parsers.cfparse('{count:d} items of equipment "{equipment_id}" are in condition "{condition}"'))
def items_in_condition(items, count, equipment_id, condition):
    repo = current_domain.repository_for(Item)
    found = [repo.get(item_id).condition for item_id in items[equipment_id]]
    assert found.count(condition) == count, f"Conditions: {found}"


@then(parsers.cfparse("{count:d} item log entries exist"))
def item_log_entries(count):
    assert _count(ItemLog) == count


@then(parsers.cfparse("{count:d} canceled order records exist"))
def canceled_order_records(count):
    assert _count(CanceledOrder) == count


@then(parsers.cfparse("the action fails with a {kind} error"))
def action_fails(error, kind):
    assert error["exc"] is not None, f"Expected a {kind} error but none was raised"
    assert isinstance(error["exc"], _ERROR_CLASSES[kind])
