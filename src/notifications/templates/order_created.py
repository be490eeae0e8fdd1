"""Quote request received — sent when a cart is submitted."""

from notifications.notification_type import NotificationType
from notifications.templates.formatting import format_amount


def _address_lines(address: dict | None) -> str:
    if not address:
        return "-"
    parts = [address.get("street"), f"{address.get('postal_code', '')} {address.get('city', '')}".strip()]
    return ", ".join(p for p in parts if p)


class OrderCreatedTemplate:
    notification_type = NotificationType.ORDER_CREATED.value

    @staticmethod
    def render(recipient_name: str, data: dict) -> dict:
        order_number = data.get("order_number", "")
        lines = []
        for item in data.get("items", []):
            line = f"- {item['quantity']} x {item['product_name']}: {format_amount(item['total_price'])}"
            if item.get("discount_percentage"):
                line += f" (incl. {item['discount_percentage']:g}% discount)"
            lines.append(line)

        body = (
            f"Dear {recipient_name},\n\n"
            f"we have received your quote request {order_number}.\n\n"
            + "\n".join(lines)
            + f"\n\nNet total: {format_amount(data.get('total_amount'))}\n"
            f"Billing address: {_address_lines(data.get('billing_address'))}\n"
            f"Shipping address: {_address_lines(data.get('shipping_address'))}\n"
        )
        if data.get("notes"):
            body += f"\nYour message: {data['notes']}\n"
        body += "\nWe will get back to you with an offer shortly."

        return {"subject": f"Quote request received - {order_number}", "body": body}
