"""CanceledOrder aggregate (CQRS) — one audit record per successful cancellation."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Text

from lending.domain import lending


@lending.aggregate
class CanceledOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    canceled_by = Identifier(required=True)
    description = Text()
    cancel_time = DateTime(required=True)

    @classmethod
    def record(cls, order, canceled_by, description=None):
        return cls(
            order_id=str(order.id),
            user_id=str(order.user_id),
            canceled_by=str(canceled_by),
            description=description,
            cancel_time=datetime.now(UTC),
        )
