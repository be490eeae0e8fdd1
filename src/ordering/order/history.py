"""Order history — append-only audit trail of status changes.

One entry is written when the order is created (``old_status`` empty) and
one per successful transition. Entries are never updated or removed.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering


@ordering.aggregate
class OrderHistoryEntry:
    order_id = Identifier(required=True)
    sequence = Integer(required=True, min_value=1)
    old_status = String(max_length=20)  # Empty for the creation entry
    new_status = String(required=True, max_length=20)
    notes = Text()
    changed_by = Identifier()
    changed_by_name = String(max_length=255)
    created_at = DateTime()


@ordering.repository(part_of=OrderHistoryEntry)
class OrderHistoryRepository:
    def for_order(self, order_id) -> list[OrderHistoryEntry]:
        """All entries of an order, newest first."""
        entries = self._dao.query.filter(order_id=str(order_id)).all().items
        return sorted(entries, key=lambda entry: entry.sequence, reverse=True)

    def append(
        self,
        order_id,
        new_status,
        old_status=None,
        notes=None,
        changed_by=None,
        changed_by_name=None,
    ) -> OrderHistoryEntry:
        existing = self._dao.query.filter(order_id=str(order_id)).all().items
        entry = OrderHistoryEntry(
            order_id=str(order_id),
            sequence=max((e.sequence for e in existing), default=0) + 1,
            old_status=old_status,
            new_status=new_status,
            notes=notes,
            changed_by=str(changed_by) if changed_by else None,
            changed_by_name=changed_by_name,
            created_at=datetime.now(UTC),
        )
        self.add(entry)
        return entry


def history_for_order(order_id) -> list[OrderHistoryEntry]:
    return current_domain.repository_for(OrderHistoryEntry).for_order(order_id)
