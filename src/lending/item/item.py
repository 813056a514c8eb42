"""Item aggregate (CQRS) — one physical, individually tracked unit.

Items belong to exactly one equipment type for their whole life. Only the
lending engine moves them between conditions:

State Machine (3 states):
    IN_STOCK → PENDING_HANDOUT            (allocated to an approved order)
    PENDING_HANDOUT → IN_STOCK | TAKEN    (order canceled / handed out)
    TAKEN → IN_STOCK                      (returned)
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import InvalidOperationError
from protean.fields import DateTime, Identifier, String

from lending.domain import lending
from lending.item.events import ItemConditionChanged, ItemRegistered


class ItemCondition(Enum):
    IN_STOCK = "InStock"
    PENDING_HANDOUT = "PendingHandout"
    TAKEN = "Taken"


_VALID_TRANSITIONS = {
    ItemCondition.IN_STOCK: {ItemCondition.PENDING_HANDOUT},
    ItemCondition.PENDING_HANDOUT: {ItemCondition.IN_STOCK, ItemCondition.TAKEN},
    ItemCondition.TAKEN: {ItemCondition.IN_STOCK},
}


@lending.aggregate
class Item:
    """A physical unit of an equipment type."""

    equipment_id = Identifier(required=True)
    serial_number = String(max_length=100)
    condition = String(choices=ItemCondition, default=ItemCondition.IN_STOCK.value)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, equipment_id, serial_number=None):
        """Put a new unit of an equipment type into stock."""
        now = datetime.now(UTC)
        item = cls(
            equipment_id=equipment_id,
            serial_number=serial_number,
            condition=ItemCondition.IN_STOCK.value,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            ItemRegistered(
                item_id=str(item.id),
                equipment_id=str(equipment_id),
                serial_number=serial_number,
                condition=ItemCondition.IN_STOCK.value,
                registered_at=now,
            )
        )
        return item

    def is_in_stock(self):
        return ItemCondition(self.condition) == ItemCondition.IN_STOCK

    def _assert_can_transition(self, target_condition):
        current = ItemCondition(self.condition)
        if target_condition not in _VALID_TRANSITIONS[current]:
            raise InvalidOperationError(
                {"condition": [f"Item {self.id} cannot move from {current.value} to {target_condition.value}"]}
            )

    def _change_condition(self, target_condition, order_id=None):
        self._assert_can_transition(target_condition)

        previous = self.condition
        now = datetime.now(UTC)
        self.condition = target_condition.value
        self.updated_at = now

        self.raise_(
            ItemConditionChanged(
                item_id=str(self.id),
                equipment_id=str(self.equipment_id),
                order_id=str(order_id) if order_id else None,
                previous_condition=previous,
                new_condition=target_condition.value,
                changed_at=now,
            )
        )

    def hold_for_handout(self, order_id):
        """Reserve this unit for an approved order."""
        self._change_condition(ItemCondition.PENDING_HANDOUT, order_id=order_id)

    def release_to_stock(self, order_id):
        """Return a held unit to stock after its order was canceled."""
        self._change_condition(ItemCondition.IN_STOCK, order_id=order_id)


@lending.repository(part_of=Item)
class ItemRepository:
    """Stock queries used by the allocation decision."""

    def count_in_stock(self, equipment_id) -> int:
        """Live count of units of an equipment type currently in stock."""
        return (
            self._dao.query.filter(
                equipment_id=str(equipment_id),
                condition=ItemCondition.IN_STOCK.value,
            )
            .all()
            .total
        )
