"""Domain events for the Item aggregate."""

from protean.fields import DateTime, Identifier, String

from lending.domain import lending


@lending.event(part_of="Item")
class ItemRegistered:
    """A physical unit was put into stock."""

    __version__ = 1

    item_id = Identifier(required=True)
    equipment_id = Identifier(required=True)
    serial_number = String()
    condition = String(required=True)
    registered_at = DateTime(required=True)


@lending.event(part_of="Item")
class ItemConditionChanged:
    """An item moved between InStock, PendingHandout and Taken."""

    __version__ = 1

    item_id = Identifier(required=True)
    equipment_id = Identifier(required=True)
    order_id = Identifier()
    previous_condition = String(required=True)
    new_condition = String(required=True)
    changed_at = DateTime(required=True)
