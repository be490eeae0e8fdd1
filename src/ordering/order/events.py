"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """A cart was submitted as a quote request."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line item snapshots
    total_amount = Float(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along the status graph."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    old_status = String(required=True)
    new_status = String(required=True)
    notes = Text()
    changed_by = Identifier()
    changed_at = DateTime(required=True)
