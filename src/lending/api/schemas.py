"""Pydantic request/response schemas for the Lending API.

These are separate from Protean commands (anti-corruption pattern).
Unknown request fields are ignored, so a client cannot smuggle an order
status or timestamp into a command.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    user_id: str
    equipment_id: str
    quantity: int = Field(ge=1)
    estimated_pickup_time: datetime
    day: int = Field(ge=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "user-42",
                    "equipment_id": "equip-projector",
                    "quantity": 2,
                    "estimated_pickup_time": "2026-11-02T10:00:00Z",
                    "day": 3,
                }
            ]
        }
    }


class RespondToOrderRequest(BaseModel):
    admin_id: str
    reply: str  # "Approve" or "Deny"
    item_ids: list[str] = Field(default_factory=list)


class CancelOrderRequest(BaseModel):
    admin_id: str
    description: str | None = None


class RegisterItemRequest(BaseModel):
    equipment_id: str
    serial_number: str | None = Field(default=None, max_length=100)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class ItemIdResponse(BaseModel):
    item_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class UserOrderResponse(BaseModel):
    order_id: str
    user_id: str
    equipment_id: str
    quantity: int
    estimated_pickup_time: datetime | None = None
    day: int | None = None
    status: str
    created_at: datetime | None = None


class ItemLogResponse(BaseModel):
    log_id: str
    order_detail_id: str
    admin_id: str
    item_id: str
    condition: str
    description: str | None = None
    created_at: datetime
