"""ItemLog aggregate (CQRS) — append-only audit trail of item conditions.

One entry is written for every condition change the lending engine makes,
pointing at the order detail that caused it and the administrator who acted.
Entries are never updated or deleted.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String, Text

from lending.domain import lending
from lending.item.item import ItemCondition


@lending.aggregate
class ItemLog:
    order_detail_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    item_id = Identifier(required=True)
    condition = String(choices=ItemCondition, required=True)
    description = Text()
    created_at = DateTime(required=True)

    @classmethod
    def record(cls, order_detail_id, admin_id, item_id, condition, description=None):
        return cls(
            order_detail_id=str(order_detail_id),
            admin_id=str(admin_id),
            item_id=str(item_id),
            condition=condition.value if isinstance(condition, ItemCondition) else condition,
            description=description,
            created_at=datetime.now(UTC),
        )


@lending.repository(part_of=ItemLog)
class ItemLogRepository:
    def for_item(self, item_id) -> list[ItemLog]:
        """All entries for an item, oldest first."""
        return self._dao.query.filter(item_id=str(item_id)).order_by("created_at").all().items
