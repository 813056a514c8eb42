"""Order aggregate (CQRS) — the core of the lending domain.

An Order is one user's request for a quantity of an equipment type. An
administrator decides it: approval binds exactly `quantity` physical items
to the order as OrderDetail entities, denial closes it. Cancellation
releases every bound item, unless one has already been handed out.

State Machine (4 states):
    PENDING → APPROVED | DENIED | CANCELED
    APPROVED → CANCELED
    DENIED, CANCELED → (terminal)

OrderDetail State Machine:
    PENDING → TAKEN | CANCELED
"""

import json
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import atomic_change, invariant
from protean.exceptions import InvalidOperationError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from lending.domain import lending
from lending.order.events import OrderApproved, OrderCanceled, OrderDenied, OrderPlaced


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    DENIED = "Denied"
    CANCELED = "Canceled"


class OrderDetailStatus(Enum):
    PENDING = "Pending"
    TAKEN = "Taken"
    CANCELED = "Canceled"


class Reply(Enum):
    APPROVE = "Approve"
    DENY = "Deny"


# ---------------------------------------------------------------------------
# State Machines
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.APPROVED, OrderStatus.DENIED, OrderStatus.CANCELED},
    OrderStatus.APPROVED: {OrderStatus.CANCELED},
    OrderStatus.DENIED: set(),  # Terminal
    OrderStatus.CANCELED: set(),  # Terminal
}

_VALID_DETAIL_TRANSITIONS = {
    OrderDetailStatus.PENDING: {OrderDetailStatus.TAKEN, OrderDetailStatus.CANCELED},
    OrderDetailStatus.TAKEN: set(),
    OrderDetailStatus.CANCELED: set(),
}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@lending.entity(part_of="Order")
class OrderDetail:
    """Binding of one physical item to an approved order."""

    item_id = Identifier(required=True)
    status = String(
        choices=OrderDetailStatus,
        default=OrderDetailStatus.PENDING.value,
    )

    def transition_to(self, target_status):
        current = OrderDetailStatus(self.status)
        if target_status not in _VALID_DETAIL_TRANSITIONS[current]:
            raise InvalidOperationError(
                {"detail": [f"Order detail for item {self.item_id} cannot move from {current.value} to {target_status.value}"]}
            )
        self.status = target_status.value


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@lending.aggregate
class Order:
    """A user's request for a quantity of one equipment type."""

    user_id = Identifier(required=True)
    equipment_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    estimated_pickup_time = DateTime(required=True)
    day = Integer(required=True, min_value=1)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    details = HasMany(OrderDetail)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def approved_order_binds_exactly_quantity_items(self):
        if self.status == OrderStatus.APPROVED.value and len(self.details) != self.quantity:
            raise ValidationError(
                {"details": [f"An approved order must bind exactly {self.quantity} items, found {len(self.details)}"]}
            )

    @invariant.post
    def items_bound_at_most_once(self):
        item_ids = [str(d.item_id) for d in self.details]
        if len(item_ids) != len(set(item_ids)):
            raise ValidationError({"details": ["An item can be bound to an order only once"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, equipment_id, quantity, estimated_pickup_time, day):
        """Open a new request. Status and timestamps are always set here."""
        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            equipment_id=equipment_id,
            quantity=quantity,
            estimated_pickup_time=estimated_pickup_time,
            day=day,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                equipment_id=str(equipment_id),
                quantity=quantity,
                estimated_pickup_time=estimated_pickup_time,
                day=day,
                status=OrderStatus.PENDING.value,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise InvalidOperationError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def is_pending(self):
        return OrderStatus(self.status) == OrderStatus.PENDING

    def approve(self, admin_id, item_ids):
        """Bind the given items to this order and mark it approved.

        Returns the new OrderDetail entities, in the order of `item_ids`.
        """
        self._assert_can_transition(OrderStatus.APPROVED)

        now = datetime.now(UTC)
        details = [
            OrderDetail(
                id=str(uuid4()),
                item_id=str(item_id),
                status=OrderDetailStatus.PENDING.value,
            )
            for item_id in item_ids
        ]

        with atomic_change(self):
            for detail in details:
                self.add_details(detail)
            self.status = OrderStatus.APPROVED.value
            self.updated_at = now

        self.raise_(
            OrderApproved(
                order_id=str(self.id),
                admin_id=str(admin_id),
                equipment_id=str(self.equipment_id),
                item_ids=json.dumps([d.item_id for d in details]),
                approved_at=now,
            )
        )
        return details

    def deny(self, admin_id):
        self._assert_can_transition(OrderStatus.DENIED)

        now = datetime.now(UTC)
        self.status = OrderStatus.DENIED.value
        self.updated_at = now

        self.raise_(
            OrderDenied(
                order_id=str(self.id),
                admin_id=str(admin_id),
                denied_at=now,
            )
        )

    def cancel(self, admin_id, reason=None):
        """Cancel the order and mark every bound detail canceled.

        Forbidden once any bound item has been handed out. Returns the
        details that were released, empty when nothing was allocated.
        """
        if any(OrderDetailStatus(d.status) == OrderDetailStatus.TAKEN for d in self.details):
            raise InvalidOperationError({"order": ["Cannot cancel an order whose items were already handed out"]})

        self._assert_can_transition(OrderStatus.CANCELED)

        now = datetime.now(UTC)
        released = list(self.details)

        with atomic_change(self):
            for detail in released:
                detail.transition_to(OrderDetailStatus.CANCELED)
            self.status = OrderStatus.CANCELED.value
            self.updated_at = now

        self.raise_(
            OrderCanceled(
                order_id=str(self.id),
                user_id=str(self.user_id),
                admin_id=str(admin_id),
                reason=reason,
                released_item_ids=json.dumps([d.item_id for d in released]),
                canceled_at=now,
            )
        )
        return released

    def mark_handed_out(self, item_id):
        """Record that a bound item left the store with the borrower."""
        detail = next((d for d in self.details if str(d.item_id) == str(item_id)), None)
        if detail is None:
            raise ValidationError({"item_id": [f"Item {item_id} is not bound to this order"]})
        detail.transition_to(OrderDetailStatus.TAKEN)
        self.updated_at = datetime.now(UTC)
