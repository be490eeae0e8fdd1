"""Cancellation notice — sent when a quote request is cancelled."""

from notifications.notification_type import NotificationType


class OrderCancelledTemplate:
    notification_type = NotificationType.ORDER_CANCELLED.value

    @staticmethod
    def render(recipient_name: str, data: dict) -> dict:
        order_number = data.get("order_number", "your request")
        body = f"Dear {recipient_name},\n\nyour request {order_number} has been cancelled."
        if data.get("notes"):
            body += f"\n\nReason: {data['notes']}"
        return {"subject": f"Cancellation - {order_number}", "body": body}
