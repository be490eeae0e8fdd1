"""Customer notification on order creation and status changes.

Delivery is best-effort. A failed or raising notifier is logged and
recorded in the ``NotificationLog`` but never undoes the state change that
triggered it.
"""

from datetime import UTC, datetime
from enum import Enum

import structlog
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from notifications.channel import get_notifier
from notifications.notification_type import NotificationType
from ordering.domain import ordering
from ordering.errors import NotificationDeliveryFailure

logger = structlog.get_logger(__name__)


class DeliveryStatus(Enum):
    SENT = "sent"
    FAILED = "failed"


@ordering.aggregate
class NotificationLog:
    """Record of one notification attempt, kept for operators."""

    order_id = Identifier(required=True)
    notification_type = String(required=True, choices=NotificationType)
    recipient_email = String(required=True, max_length=255)
    status = String(required=True, choices=DeliveryStatus)
    message_id = String(max_length=100)
    error = String(max_length=500)
    created_at = DateTime()


@ordering.repository(part_of=NotificationLog)
class NotificationLogRepository:
    def for_order(self, order_id) -> list[NotificationLog]:
        logs = self._dao.query.filter(order_id=str(order_id)).all().items
        return sorted(logs, key=lambda log: log.created_at)

    def failures(self) -> list[NotificationLog]:
        return self._dao.query.filter(status=DeliveryStatus.FAILED.value).all().items


def _deliver(notification_type: NotificationType, order, notes=None) -> dict:
    result = get_notifier().notify(
        notification_type.value,
        order.customer_email,
        order.customer_name,
        order.notification_data(notes),
    )
    if not result.get("sent"):
        raise NotificationDeliveryFailure(result.get("error") or "Notifier reported failure")
    return result


def notify_customer(order, notification_type: NotificationType, notes=None) -> NotificationLog:
    """Notify the order's customer and record the attempt."""
    log = NotificationLog(
        order_id=str(order.id),
        notification_type=notification_type.value,
        recipient_email=order.customer_email,
        status=DeliveryStatus.SENT.value,
        created_at=datetime.now(UTC),
    )

    try:
        result = _deliver(notification_type, order, notes)
        log.message_id = result.get("message_id")
    except Exception as exc:
        log.status = DeliveryStatus.FAILED.value
        log.error = str(exc)[:500]
        logger.warning(
            "Customer notification failed",
            order_id=str(order.id),
            order_number=order.order_number,
            notification_type=notification_type.value,
            error=str(exc),
        )
    else:
        logger.info(
            "Customer notified",
            order_id=str(order.id),
            order_number=order.order_number,
            notification_type=notification_type.value,
        )

    current_domain.repository_for(NotificationLog).add(log)
    return log
