"""Shipping confirmation — sent when an order leaves the warehouse."""

from notifications.notification_type import NotificationType


class OrderShippedTemplate:
    notification_type = NotificationType.ORDER_SHIPPED.value

    @staticmethod
    def render(recipient_name: str, data: dict) -> dict:
        order_number = data.get("order_number", "your order")
        body = f"Dear {recipient_name},\n\nyour order {order_number} has been shipped."
        if data.get("notes"):
            body += f"\n\n{data['notes']}"
        return {"subject": f"Shipping confirmation - {order_number}", "body": body}
