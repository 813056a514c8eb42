"""FastAPI routes for the Lending bounded context.

Each route translates between Pydantic schemas (external contract) and
Protean commands (internal domain concepts).
"""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from lending.api.schemas import (
    CancelOrderRequest,
    ItemIdResponse,
    ItemLogResponse,
    OrderIdResponse,
    PlaceOrderRequest,
    RegisterItemRequest,
    RespondToOrderRequest,
    StatusResponse,
    UserOrderResponse,
)
from lending.item.log import ItemLog
from lending.item.registration import RegisterItem
from lending.order.cancellation import CancelOrder
from lending.order.decision import RespondToOrder
from lending.order.placement import PlaceOrder
from lending.projections.user_orders import orders_for_user

order_router = APIRouter(prefix="/orders", tags=["orders"])
item_router = APIRouter(prefix="/items", tags=["items"])


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    """Request units of an equipment type. The order always starts Pending."""
    command = PlaceOrder(
        user_id=body.user_id,
        equipment_id=body.equipment_id,
        quantity=body.quantity,
        estimated_pickup_time=body.estimated_pickup_time,
        day=body.day,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)


@order_router.get("/by-user/{user_id}", response_model=list[UserOrderResponse])
async def list_user_orders(user_id: str) -> list[UserOrderResponse]:
    """All orders of a user, whatever their status."""
    return [
        UserOrderResponse(
            order_id=str(record.order_id),
            user_id=str(record.user_id),
            equipment_id=str(record.equipment_id),
            quantity=record.quantity,
            estimated_pickup_time=record.estimated_pickup_time,
            day=record.day,
            status=record.status,
            created_at=record.created_at,
        )
        for record in orders_for_user(user_id)
    ]


@order_router.post("/{order_id}/response", response_model=StatusResponse)
async def respond_to_order(order_id: str, body: RespondToOrderRequest) -> StatusResponse:
    """Approve (binding the listed items) or deny a pending order."""
    command = RespondToOrder(
        order_id=order_id,
        admin_id=body.admin_id,
        reply=body.reply,
        item_ids=json.dumps(body.item_ids),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    """Cancel an order, returning any allocated items to stock."""
    command = CancelOrder(
        order_id=order_id,
        admin_id=body.admin_id,
        description=body.description,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------
@item_router.post("", status_code=201, response_model=ItemIdResponse)
async def register_item(body: RegisterItemRequest) -> ItemIdResponse:
    command = RegisterItem(
        equipment_id=body.equipment_id,
        serial_number=body.serial_number,
    )
    item_id = current_domain.process(command, asynchronous=False)
    return ItemIdResponse(item_id=item_id)


@item_router.get("/{item_id}/logs", response_model=list[ItemLogResponse])
async def list_item_logs(item_id: str) -> list[ItemLogResponse]:
    """The item's audit trail, oldest entry first."""
    logs = current_domain.repository_for(ItemLog).for_item(item_id)
    return [
        ItemLogResponse(
            log_id=str(log.id),
            order_detail_id=str(log.order_detail_id),
            admin_id=str(log.admin_id),
            item_id=str(log.item_id),
            condition=log.condition,
            description=log.description,
            created_at=log.created_at,
        )
        for log in logs
    ]
