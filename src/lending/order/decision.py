"""RespondToOrder — an administrator approves or denies a pending order.

Approval binds specific physical items to the order. All checks run before
anything is written; the handler's unit of work then commits the decision
record, the item holds, the order details, the item logs and the new order
status together, or nothing at all.

Checks, in order:
    1. The order exists and is still Pending.
    2. Item ids are de-duplicated (a repeated id counts once).
    3. Deny skips the remaining checks.
    4. Approve:
       a. the number of unique ids equals the ordered quantity exactly,
       b. every id names an item of the order's equipment type,
       c. a live count of that type's in-stock items covers the quantity,
       d. every named item is itself in stock.
"""

import json

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from lending.domain import lending
from lending.item.item import Item, ItemCondition
from lending.item.log import ItemLog
from lending.order.order import Order, Reply
from lending.order.response import OrderResponse

logger = structlog.get_logger(__name__)


@lending.command(part_of="Order")
class RespondToOrder:
    order_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    reply = String(required=True, choices=Reply)
    item_ids = Text()  # JSON array of item ids, only read on Approve


def unique_item_ids(raw_item_ids):
    """Parse a JSON array of ids and drop repeats, keeping first-seen order."""
    item_ids = json.loads(raw_item_ids) if raw_item_ids else []
    if not isinstance(item_ids, list):
        raise ValidationError({"item_ids": ["Item ids must be a JSON array"]})
    return list(dict.fromkeys(str(item_id) for item_id in item_ids))


@lending.command_handler(part_of=Order)
class RespondToOrderHandler:
    @handle(RespondToOrder)
    def respond_to_order(self, command):
        order_repo = current_domain.repository_for(Order)
        order = order_repo.get(command.order_id)

        if not order.is_pending():
            raise InvalidOperationError({"status": [f"Order {order.id} was already decided ({order.status})"]})

        reply = Reply(command.reply)

        if reply == Reply.DENY:
            current_domain.repository_for(OrderResponse).add(
                OrderResponse.record(order_id=order.id, admin_id=command.admin_id, reply=reply)
            )
            order.deny(admin_id=command.admin_id)
            order_repo.add(order)
            logger.info("Order denied", order_id=str(order.id), admin_id=str(command.admin_id))
            return

        item_ids = unique_item_ids(command.item_ids)
        items = self._resolve_items(order, item_ids)

        item_repo = current_domain.repository_for(Item)
        in_stock = item_repo.count_in_stock(order.equipment_id)
        if in_stock < order.quantity:
            logger.warning(
                "Approval rejected, insufficient stock",
                order_id=str(order.id),
                equipment_id=str(order.equipment_id),
                in_stock=in_stock,
                requested=order.quantity,
            )
            raise InvalidOperationError(
                {"stock": [f"Insufficient stock: {in_stock} in stock, {order.quantity} requested"]}
            )

        unavailable = [str(item.id) for item in items if not item.is_in_stock()]
        if unavailable:
            raise InvalidOperationError({"item_ids": [f"Items not in stock: {', '.join(unavailable)}"]})

        # Decision record first, then the allocation, all in this unit of work
        current_domain.repository_for(OrderResponse).add(
            OrderResponse.record(order_id=order.id, admin_id=command.admin_id, reply=reply)
        )

        details = order.approve(admin_id=command.admin_id, item_ids=item_ids)

        log_repo = current_domain.repository_for(ItemLog)
        for item, detail in zip(items, details, strict=True):
            item.hold_for_handout(order_id=order.id)
            item_repo.add(item)
            log_repo.add(
                ItemLog.record(
                    order_detail_id=detail.id,
                    admin_id=command.admin_id,
                    item_id=item.id,
                    condition=ItemCondition.PENDING_HANDOUT,
                )
            )

        order_repo.add(order)

        logger.info(
            "Order approved",
            order_id=str(order.id),
            admin_id=str(command.admin_id),
            item_count=len(items),
        )

    def _resolve_items(self, order, item_ids):
        """Load the proposed items and check them against the order.

        Returns the items in the same order as `item_ids`.
        """
        if len(item_ids) != order.quantity:
            raise ValidationError(
                {"item_ids": [f"Order requests {order.quantity} items, {len(item_ids)} unique items were allocated"]}
            )

        item_repo = current_domain.repository_for(Item)
        items = []
        for item_id in item_ids:
            try:
                items.append(item_repo.get(item_id))
            except ObjectNotFoundError:
                raise ValidationError({"item_ids": [f"Unknown item {item_id}"]}) from None

        mismatched = [str(item.id) for item in items if str(item.equipment_id) != str(order.equipment_id)]
        if mismatched:
            raise ValidationError(
                {"item_ids": [f"Items {', '.join(mismatched)} are not of equipment {order.equipment_id}"]}
            )

        return items
