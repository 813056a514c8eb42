"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class LendingState:
    """Tracks state for a single simulated lending journey."""

    equipment_id: str | None = None
    item_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    user_id: str | None = None
    quantity: int = 0
    current_status: str = "Pending"
