"""Order aggregate — a non-binding quote request created from a cart.

Line items are snapshots taken at submission time and never change
afterwards. The order only moves through its status graph:

    pending → confirmed → processing → shipped → delivered
    cancelled (from pending, confirmed, processing, shipped)

``delivered`` and ``cancelled`` are terminal. Steps along the success path
cannot be skipped or reversed. Orders are never deleted.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from ordering.domain import ordering
from ordering.errors import ConcurrentTransition, InvalidTransition
from ordering.order.events import OrderCreated, OrderStatusChanged
from ordering.order.numbering import generate_order_number
from ordering.pricing import discounted_price


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ItemType(Enum):
    PRODUCT = "product"
    VEHICLE = "vehicle"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = frozenset(s for s, targets in _VALID_TRANSITIONS.items() if not targets)


def parse_status(value, field: str = "status") -> OrderStatus:
    """Return the ``OrderStatus`` named by ``value``, or raise a ``ValidationError`` on ``field``."""
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({field: [f"Unknown order status: {value}"]}) from None


def allowed_transitions(status) -> set[OrderStatus]:
    return set(_VALID_TRANSITIONS[parse_status(status)])


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class Address:
    """A postal address captured at submission time.

    It is copied onto the order, so later profile changes do not affect it.
    """

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(max_length=100)

    def to_payload(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "postal_code": self.postal_code,
            "country": self.country,
        }


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A priced line of the quote request.

    ``unit_price`` is the discounted unit price; ``original_unit_price`` and
    ``discount_percentage`` record how it was derived.
    """

    item_type = String(choices=ItemType, default=ItemType.PRODUCT.value)
    item_ref = Identifier()  # product or vehicle id; catalogue may delete it later
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    original_unit_price = Float()
    discount_percentage = Float()
    total_price = Float(required=True, min_value=0.0)

    def to_payload(self) -> dict:
        return {
            "item_type": self.item_type,
            "item_ref": str(self.item_ref) if self.item_ref else None,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "original_unit_price": self.original_unit_price,
            "discount_percentage": self.discount_percentage,
            "total_price": self.total_price,
        }


def build_item(line: dict) -> OrderItem:
    """Price one cart line into an immutable order item."""
    item_type = ItemType(line.get("item_type", ItemType.PRODUCT.value))
    quantity = 1 if item_type == ItemType.VEHICLE else int(line["quantity"])
    original = float(line["price"])
    discount = line.get("discount_percentage")
    unit_price = discounted_price(original, discount)
    return OrderItem(
        item_type=item_type.value,
        item_ref=line.get("item_id"),
        product_name=line["name"],
        quantity=quantity,
        unit_price=unit_price,
        original_unit_price=original,
        discount_percentage=discount if discount and discount > 0 else None,
        total_price=unit_price * quantity,
    )


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    customer_id = Identifier(required=True)
    customer_email = String(required=True, max_length=255)
    customer_name = String(max_length=255)
    company_name = String(max_length=255)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    total_amount = Float(default=0.0)
    billing_address = ValueObject(Address)
    shipping_address = ValueObject(Address)
    use_different_shipping = Boolean(default=False)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        customer_id,
        customer_email,
        lines,
        customer_name=None,
        company_name=None,
        billing_address=None,
        shipping_address=None,
        use_different_shipping=False,
        notes=None,
    ):
        """Create a pending order from a reconciled cart snapshot.

        Args:
            lines: Cart snapshot, a list of dicts with item_type, item_id,
                   name, quantity, price, discount_percentage.
            billing_address: Dict with street, city, postal_code, country.
            shipping_address: Used only when ``use_different_shipping`` is
                   set; otherwise the billing address is shipped to.
        """
        if not lines:
            raise ValidationError({"items": ["Cannot create an order from an empty cart"]})

        items = [build_item(line) for line in lines]
        billing = Address(**billing_address) if billing_address else None
        if use_different_shipping and shipping_address:
            shipping = Address(**shipping_address)
        else:
            shipping = billing

        now = datetime.now(UTC)
        order = cls(
            order_number=generate_order_number(now),
            customer_id=customer_id,
            customer_email=customer_email,
            customer_name=customer_name,
            company_name=company_name,
            status=OrderStatus.PENDING.value,
            items=items,
            total_amount=sum(item.total_price for item in items),
            billing_address=billing,
            shipping_address=shipping,
            use_different_shipping=bool(use_different_shipping and shipping_address),
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                items=json.dumps([item.to_payload() for item in items]),
                total_amount=order.total_amount,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def can_transition_to(self, target) -> bool:
        try:
            target = OrderStatus(target)
        except ValueError:
            return False
        return target in _VALID_TRANSITIONS[OrderStatus(self.status)]

    def transition(self, new_status, notes=None, changed_by=None, expected_status=None) -> str:
        """Move the order to ``new_status`` and return the previous status.

        Raises:
            ConcurrentTransition: ``expected_status`` was given and no longer
                matches the current status.
            InvalidTransition: ``new_status`` is unknown or not reachable.
        """
        current = OrderStatus(self.status)
        if expected_status is not None:
            expected = parse_status(expected_status, field="expected_status")
            if expected != current:
                raise ConcurrentTransition(expected.value, current.value)

        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise InvalidTransition(current.value, str(new_status)) from None
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidTransition(current.value, target.value)

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                old_status=current.value,
                new_status=target.value,
                notes=notes,
                changed_by=str(changed_by) if changed_by else None,
                changed_at=now,
            )
        )
        return current.value

    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATES

    # -------------------------------------------------------------------
    # Notification payload
    # -------------------------------------------------------------------
    def notification_data(self, notes=None) -> dict:
        return {
            "order_id": str(self.id),
            "order_number": self.order_number,
            "status": self.status,
            "company_name": self.company_name,
            "items": [item.to_payload() for item in self.items],
            "total_amount": self.total_amount,
            "billing_address": self.billing_address.to_payload() if self.billing_address else None,
            "shipping_address": self.shipping_address.to_payload() if self.shipping_address else None,
            "notes": notes if notes is not None else self.notes,
        }


@ordering.repository(part_of=Order)
class OrderRepository:
    def for_customer(self, customer_id) -> list[Order]:
        """Orders placed by a customer, newest first."""
        orders = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return sorted(orders, key=lambda order: order.created_at)[::-1]
