"""Template registry — maps NotificationType to template classes.

Each template renders a subject and plain-text body from the notification
data sent by the order lifecycle.
"""

from notifications.notification_type import NotificationType
from notifications.templates.order_cancelled import OrderCancelledTemplate
from notifications.templates.order_confirmed import OrderConfirmedTemplate
from notifications.templates.order_created import OrderCreatedTemplate
from notifications.templates.order_delivered import OrderDeliveredTemplate
from notifications.templates.order_processing import OrderProcessingTemplate
from notifications.templates.order_shipped import OrderShippedTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_CREATED.value: OrderCreatedTemplate,
    NotificationType.ORDER_CONFIRMED.value: OrderConfirmedTemplate,
    NotificationType.ORDER_PROCESSING.value: OrderProcessingTemplate,
    NotificationType.ORDER_SHIPPED.value: OrderShippedTemplate,
    NotificationType.ORDER_DELIVERED.value: OrderDeliveredTemplate,
    NotificationType.ORDER_CANCELLED.value: OrderCancelledTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls

