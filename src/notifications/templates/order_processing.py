"""Request in progress — sent when work on a quote request starts."""

from notifications.notification_type import NotificationType


class OrderProcessingTemplate:
    notification_type = NotificationType.ORDER_PROCESSING.value

    @staticmethod
    def render(recipient_name: str, data: dict) -> dict:
        order_number = data.get("order_number", "your request")
        return {
            "subject": f"Request in progress - {order_number}",
            "body": f"Dear {recipient_name},\n\nyour request {order_number} is now being processed.",
        }
