"""Order creation — command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from notifications.notification_type import NotificationType
from ordering.domain import ordering
from ordering.order.history import OrderHistoryEntry
from ordering.order.notifying import notify_customer
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


@ordering.command(part_of="Order")
class CreateOrder:
    customer_id = Identifier(required=True)
    customer_email = String(required=True, max_length=255)
    customer_name = String(max_length=255)
    company_name = String(max_length=255)
    items = Text(required=True)  # JSON: cart snapshot lines
    billing_address = Text()  # JSON: address dict
    shipping_address = Text()  # JSON: address dict
    use_different_shipping = Boolean(default=False)
    notes = Text()


@ordering.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        order = Order.create(
            customer_id=command.customer_id,
            customer_email=command.customer_email,
            lines=_loads(command.items),
            customer_name=command.customer_name,
            company_name=command.company_name,
            billing_address=_loads(command.billing_address),
            shipping_address=_loads(command.shipping_address),
            use_different_shipping=command.use_different_shipping,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(OrderHistoryEntry).append(
            order.id,
            new_status=OrderStatus.PENDING.value,
            notes=command.notes,
            changed_by=command.customer_id,
            changed_by_name=command.customer_name,
        )
        logger.info(
            "Order created",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(command.customer_id),
            items=len(order.items),
            total_amount=order.total_amount,
        )

        notify_customer(order, NotificationType.ORDER_CREATED)
        return str(order.id)
