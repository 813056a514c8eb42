"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the lending API's Pydantic
request schemas and the domain's validation rules.
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()


def unique_equipment_id(prefix: str = "EQ") -> str:
    """Generate equipment type ids like 'EQ-LT-a1b2c3d4'."""
    return f"{prefix}-LT-{uuid.uuid4().hex[:8]}"


def user_id() -> str:
    return f"user-{fake.user_name()[:20]}-{uuid.uuid4().hex[:4]}"


def admin_id() -> str:
    return f"admin-{random.randint(1, 5):02d}"


def item_data(equipment_id: str) -> dict:
    """Generate RegisterItemRequest payload."""
    return {
        "equipment_id": equipment_id,
        "serial_number": f"SN-{fake.bothify('??-#####').upper()}",
    }


def order_data(equipment_id: str, quantity: int | None = None) -> dict:
    """Generate PlaceOrderRequest payload with a pickup time in the coming week."""
    pickup = datetime.now(UTC) + timedelta(hours=random.randint(2, 7 * 24))
    return {
        "user_id": user_id(),
        "equipment_id": equipment_id,
        "quantity": quantity or random.randint(1, 3),
        "estimated_pickup_time": pickup.isoformat(),
        "day": random.randint(1, 14),
    }


def cancel_reason() -> str:
    return random.choice(
        [
            "Event postponed",
            "Requested the wrong equipment",
            "No longer needed",
            fake.sentence(nb_words=6),
        ]
    )
