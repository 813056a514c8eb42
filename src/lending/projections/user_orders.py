"""UserOrders — every order a user has placed, in any status."""

from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from lending.domain import lending
from lending.order.events import OrderApproved, OrderCanceled, OrderDenied, OrderPlaced
from lending.order.order import Order


@lending.projection
class UserOrders:
    order_id = Identifier(identifier=True, required=True)
    user_id = Identifier(required=True)
    equipment_id = Identifier(required=True)
    quantity = Integer(required=True)
    estimated_pickup_time = DateTime()
    day = Integer()
    status = String(required=True)
    created_at = DateTime()
    updated_at = DateTime()


@lending.projector(projector_for=UserOrders, aggregates=[Order])
class UserOrdersProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        current_domain.repository_for(UserOrders).add(
            UserOrders(
                order_id=event.order_id,
                user_id=event.user_id,
                equipment_id=event.equipment_id,
                quantity=event.quantity,
                estimated_pickup_time=event.estimated_pickup_time,
                day=event.day,
                status=event.status,
                created_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    def _update_status(self, order_id, status, updated_at):
        repo = current_domain.repository_for(UserOrders)
        record = repo.get(order_id)
        record.status = status
        record.updated_at = updated_at
        repo.add(record)

    @on(OrderApproved)
    def on_order_approved(self, event):
        self._update_status(event.order_id, "Approved", event.approved_at)

    @on(OrderDenied)
    def on_order_denied(self, event):
        self._update_status(event.order_id, "Denied", event.denied_at)

    @on(OrderCanceled)
    def on_order_canceled(self, event):
        self._update_status(event.order_id, "Canceled", event.canceled_at)


def orders_for_user(user_id):
    """Orders placed by `user_id`, newest first."""
    return (
        current_domain.repository_for(UserOrders)
        ._dao.query.filter(user_id=str(user_id))
        .order_by("-created_at")
        .all()
        .items
    )
