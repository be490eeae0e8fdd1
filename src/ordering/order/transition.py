"""Order status transition — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from notifications.notification_type import NotificationType
from ordering.domain import ordering
from ordering.order.history import OrderHistoryEntry
from ordering.order.notifying import notify_customer
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class TransitionOrder:
    order_id = Identifier(required=True)
    new_status = String(required=True, max_length=20)
    notes = Text()
    changed_by = Identifier()
    changed_by_name = String(max_length=255)
    expected_status = String(max_length=20)  # Optional compare-and-swap guard


@ordering.command_handler(part_of=Order)
class TransitionOrderHandler:
    @handle(TransitionOrder)
    def transition_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        old_status = order.transition(
            command.new_status,
            notes=command.notes,
            changed_by=command.changed_by,
            expected_status=command.expected_status,
        )
        repo.add(order)
        current_domain.repository_for(OrderHistoryEntry).append(
            order.id,
            new_status=order.status,
            old_status=old_status,
            notes=command.notes,
            changed_by=command.changed_by,
            changed_by_name=command.changed_by_name,
        )
        logger.info(
            "Order status changed",
            order_id=str(order.id),
            order_number=order.order_number,
            old_status=old_status,
            new_status=order.status,
        )

        notify_customer(order, NotificationType.for_status(order.status), notes=command.notes)
        return order.status
