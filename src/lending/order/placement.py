"""Order intake — command and handler for placing a new order."""

from protean import handle
from protean.fields import DateTime, Identifier, Integer
from protean.utils.globals import current_domain

from lending.domain import lending
from lending.order.order import Order


@lending.command(part_of="Order")
class PlaceOrder:
    """Request `quantity` units of an equipment type.

    Status and creation time are not part of the command: the aggregate
    always starts an order as Pending, stamped with server time.
    """

    user_id = Identifier(required=True)
    equipment_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    estimated_pickup_time = DateTime(required=True)
    day = Integer(required=True, min_value=1)


@lending.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            user_id=command.user_id,
            equipment_id=command.equipment_id,
            quantity=command.quantity,
            estimated_pickup_time=command.estimated_pickup_time,
            day=command.day,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
