"""Error taxonomy for the Ordering domain.

Domain rule violations are ``ValidationError`` subclasses so they carry the
usual ``{field: [message]}`` map and surface as 400s over HTTP. Missing
aggregates are reported by Protean's ``ObjectNotFoundError``. Collaborator
failures are plain exceptions and never cross the cart or lifecycle
boundary.
"""

from protean.exceptions import ValidationError


class CapacityExceeded(ValidationError):
    """Requested quantity exceeds the available stock."""

    def __init__(self, product_id, requested, available):
        self.product_id = str(product_id)
        self.requested = requested
        self.available = available
        super().__init__({"quantity": [f"Only {available} units of {product_id} are available (requested {requested})"]})


class DuplicateItem(ValidationError):
    """Vehicle is already present in the cart."""

    def __init__(self, vehicle_id):
        self.vehicle_id = str(vehicle_id)
        super().__init__({"vehicle_id": [f"Vehicle {vehicle_id} is already in the cart"]})


class ItemUnavailable(ValidationError):
    """Item is sold, inactive or otherwise not purchasable."""

    def __init__(self, item_id, reason):
        self.item_id = str(item_id)
        self.reason = reason
        super().__init__({"item_id": [f"{item_id} is not available: {reason}"]})


class LineNotFound(ValidationError):
    """Cart line referenced by id does not exist."""

    def __init__(self, item_id):
        self.item_id = str(item_id)
        super().__init__({"item_id": [f"{item_id} is not in the cart"]})


class InvalidTransition(ValidationError):
    """Order status change is not allowed by the transition table."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})


class ConcurrentTransition(ValidationError):
    """Order changed status since the caller last read it."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__({"status": [f"Order status is {actual}, expected {expected}"]})


class NotAuthorized(ValidationError):
    """Actor is not allowed to perform the operation."""

    def __init__(self, message):
        super().__init__({"actor": [message]})


class CatalogUnavailable(Exception):
    """Catalogue lookup failed or timed out."""


class NotificationDeliveryFailure(Exception):
    """Notification collaborator reported (or raised) a delivery failure."""
