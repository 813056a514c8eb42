"""OrderResponse aggregate (CQRS) — record of an administrator's decision."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String

from lending.domain import lending
from lending.order.order import Reply


@lending.aggregate
class OrderResponse:
    order_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    reply = String(choices=Reply, required=True)
    responded_at = DateTime(required=True)

    @classmethod
    def record(cls, order_id, admin_id, reply):
        return cls(
            order_id=str(order_id),
            admin_id=str(admin_id),
            reply=reply.value if isinstance(reply, Reply) else reply,
            responded_at=datetime.now(UTC),
        )
