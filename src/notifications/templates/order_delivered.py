"""Delivery completed — sent when an order reaches the customer."""

from notifications.notification_type import NotificationType


class OrderDeliveredTemplate:
    notification_type = NotificationType.ORDER_DELIVERED.value

    @staticmethod
    def render(recipient_name: str, data: dict) -> dict:
        order_number = data.get("order_number", "your order")
        return {
            "subject": f"Delivery completed - {order_number}",
            "body": f"Dear {recipient_name},\n\nyour order {order_number} has been delivered. Thank you!",
        }
