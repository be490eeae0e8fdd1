"""Offer prepared — sent when a quote request is confirmed."""

from notifications.notification_type import NotificationType


class OrderConfirmedTemplate:
    notification_type = NotificationType.ORDER_CONFIRMED.value

    @staticmethod
    def render(recipient_name: str, data: dict) -> dict:
        order_number = data.get("order_number", "your request")
        return {
            "subject": f"Offer prepared - {order_number}",
            "body": (
                f"Dear {recipient_name},\n\n"
                f"we have prepared an offer for your request {order_number}. "
                "You can review it in the customer portal."
            ),
        }
