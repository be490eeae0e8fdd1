"""Notification types sent to customers about their quote requests."""

from enum import Enum


class NotificationType(Enum):
    ORDER_CREATED = "order_created"
    ORDER_CONFIRMED = "order_confirmed"
    ORDER_PROCESSING = "order_processing"
    ORDER_SHIPPED = "order_shipped"
    ORDER_DELIVERED = "order_delivered"
    ORDER_CANCELLED = "order_cancelled"

    @classmethod
    def for_status(cls, status: str) -> "NotificationType":
        """Notification type announcing a move to ``status``."""
        return cls(f"order_{status}")
