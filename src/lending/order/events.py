"""Domain events for the Order aggregate.

Events are versioned, immutable facts consumed by projectors (UserOrders)
and by other contexts that care about equipment leaving or re-entering
stock.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from lending.domain import lending


@lending.event(part_of="Order")
class OrderPlaced:
    """A user requested units of an equipment type."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    equipment_id = Identifier(required=True)
    quantity = Integer(required=True)
    estimated_pickup_time = DateTime(required=True)
    day = Integer(required=True)
    status = String(required=True)
    placed_at = DateTime(required=True)


@lending.event(part_of="Order")
class OrderApproved:
    """An administrator bound specific items to the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    equipment_id = Identifier(required=True)
    item_ids = Text(required=True)  # JSON array
    approved_at = DateTime(required=True)


@lending.event(part_of="Order")
class OrderDenied:
    __version__ = 1

    order_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    denied_at = DateTime(required=True)


@lending.event(part_of="Order")
class OrderCanceled:
    """The order was canceled; any bound items go back to stock."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    reason = Text()
    released_item_ids = Text()  # JSON array, empty when nothing was allocated
    canceled_at = DateTime(required=True)
