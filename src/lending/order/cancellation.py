"""Order cancellation — command and handler.

Cancels the order, writes the CanceledOrder record and, when items were
already allocated, returns each of them to stock with an ItemLog entry.
Everything commits in the handler's unit of work.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from lending.domain import lending
from lending.item.item import Item, ItemCondition
from lending.item.log import ItemLog
from lending.order.canceled_order import CanceledOrder
from lending.order.order import Order

logger = structlog.get_logger(__name__)


@lending.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    description = Text()


@lending.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order_repo = current_domain.repository_for(Order)
        order = order_repo.get(command.order_id)

        released = order.cancel(admin_id=command.admin_id, reason=command.description)

        current_domain.repository_for(CanceledOrder).add(
            CanceledOrder.record(order, canceled_by=command.admin_id, description=command.description)
        )

        item_repo = current_domain.repository_for(Item)
        log_repo = current_domain.repository_for(ItemLog)
        for detail in released:
            item = item_repo.get(detail.item_id)
            item.release_to_stock(order_id=order.id)
            item_repo.add(item)
            log_repo.add(
                ItemLog.record(
                    order_detail_id=detail.id,
                    admin_id=command.admin_id,
                    item_id=item.id,
                    condition=ItemCondition.IN_STOCK,
                    description=command.description,
                )
            )

        order_repo.add(order)

        logger.info(
            "Order canceled",
            order_id=str(order.id),
            admin_id=str(command.admin_id),
            released_items=len(released),
        )
