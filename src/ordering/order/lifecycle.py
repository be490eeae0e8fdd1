"""Order lifecycle — the public surface for creating and moving quote requests.

``OrderLifecycle`` wraps the command handlers so callers deal in ``Order``
objects rather than commands. Every call runs synchronously through
``current_domain.process``; a rejected transition raises and leaves the
order, its history and the notification log untouched.
"""

import json
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.cart.manager import CartManager
from ordering.errors import CatalogUnavailable
from ordering.order.creation import CreateOrder
from ordering.order.history import OrderHistoryEntry
from ordering.order.order import Order
from ordering.order.transition import TransitionOrder

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ShippingInfo:
    """Customer and address details captured on the checkout form."""

    customer_id: str
    customer_email: str
    customer_name: str | None = None
    company_name: str | None = None
    billing_address: dict | None = None
    shipping_address: dict | None = None
    use_different_shipping: bool = False


class OrderLifecycle:
    def create_order(self, cart_snapshot: list[dict], shipping_info: ShippingInfo, notes: str | None = None) -> Order:
        """Create a pending order from an already reconciled cart snapshot.

        The cart itself is not cleared; that is left to the caller once the
        order exists.
        """
        command = CreateOrder(
            customer_id=shipping_info.customer_id,
            customer_email=shipping_info.customer_email,
            customer_name=shipping_info.customer_name,
            company_name=shipping_info.company_name,
            items=json.dumps(cart_snapshot),
            billing_address=json.dumps(shipping_info.billing_address) if shipping_info.billing_address else None,
            shipping_address=json.dumps(shipping_info.shipping_address) if shipping_info.shipping_address else None,
            use_different_shipping=shipping_info.use_different_shipping,
            notes=notes,
        )
        order_id = current_domain.process(command, asynchronous=False)
        return self.get(order_id)

    def transition(
        self,
        order,
        new_status,
        notes=None,
        changed_by=None,
        changed_by_name=None,
        expected_status=None,
    ) -> Order:
        """Move ``order`` (an ``Order`` or its id) to ``new_status``.

        Raises:
            InvalidTransition: the target is not reachable from the current status.
            ConcurrentTransition: ``expected_status`` no longer matches.
            ObjectNotFoundError: no such order.
        """
        order_id = order.id if isinstance(order, Order) else order
        current_domain.process(
            TransitionOrder(
                order_id=str(order_id),
                new_status=new_status.value if hasattr(new_status, "value") else new_status,
                notes=notes,
                changed_by=changed_by,
                changed_by_name=changed_by_name,
                expected_status=expected_status.value if hasattr(expected_status, "value") else expected_status,
            ),
            asynchronous=False,
        )
        return self.get(order_id)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get(self, order_id) -> Order:
        return current_domain.repository_for(Order).get(order_id)

    def history(self, order_id) -> list[OrderHistoryEntry]:
        """Audit trail of an order, newest first."""
        self.get(order_id)
        return current_domain.repository_for(OrderHistoryEntry).for_order(order_id)

    def orders_for_customer(self, customer_id) -> list[Order]:
        """Orders placed by a customer, newest first."""
        return current_domain.repository_for(Order).for_customer(customer_id)

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    async def checkout(self, manager: CartManager, shipping_info: ShippingInfo, notes: str | None = None) -> Order:
        """Reconcile the cart, submit it as an order and clear it.

        Raises:
            CatalogUnavailable: availability could not be checked, nothing was submitted.
            ValidationError: the cart is empty after reconciliation.
        """
        if manager.reconciler is not None:
            report = await manager.reconcile()
            if report is None:
                raise CatalogUnavailable("Cart could not be checked against the catalogue")

        if manager.cart.is_empty:
            raise ValidationError({"items": ["Cannot create an order from an empty cart"]})

        order = self.create_order(manager.snapshot(), shipping_info, notes)
        manager.clear()
        logger.info(
            "Cart submitted",
            session_id=manager.cart.session_id,
            order_id=str(order.id),
            order_number=order.order_number,
        )
        return order
