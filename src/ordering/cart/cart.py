"""Client cart aggregate — merchandise and vehicle lines held for a quote request.

The cart lives on the client. It is never stored in a repository: the
``CartStore`` serializes it to a key-value store after every mutation and
rehydrates it on session start. Line items carry a denormalized snapshot of
the catalogue record taken when the item was added; only reconciliation
refreshes it.

Methods on the aggregate raise domain errors; ``CartManager`` turns them
into boolean results for the UI.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from ordering.domain import ordering
from ordering.errors import CapacityExceeded, DuplicateItem, ItemUnavailable, LineNotFound
from ordering.pricing import PriceSummary, discounted_price, summarize


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Cart")
class ProductSnapshot:
    """Catalogue fields of a product, frozen at the time it was put in the cart."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    discount_percentage = Float()
    stock_quantity = Integer(required=True, min_value=0)
    is_active = Boolean(default=True)
    tax_rate = Float(default=0.0)

    @classmethod
    def from_record(cls, record: dict) -> "ProductSnapshot":
        """Build a snapshot from a catalogue product record."""
        return cls(
            product_id=str(record["id"]),
            name=record["name"],
            price=record["price"],
            discount_percentage=record.get("discount_percentage"),
            stock_quantity=record["stock_quantity"],
            is_active=record.get("is_active", True),
            tax_rate=record.get("tax_rate") or 0.0,
        )

    @property
    def unit_price(self) -> float:
        return discounted_price(self.price, self.discount_percentage)


@ordering.value_object(part_of="Cart")
class VehicleSnapshot:
    """Catalogue fields of a vehicle, frozen at the time it was put in the cart."""

    vehicle_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    discount_percentage = Float()
    is_sold = Boolean(default=False)
    tax_rate = Float(default=0.0)

    @classmethod
    def from_record(cls, record: dict) -> "VehicleSnapshot":
        """Build a snapshot from a catalogue vehicle record."""
        return cls(
            vehicle_id=str(record["id"]),
            name=record["name"],
            price=record["price"],
            discount_percentage=record.get("discount_percentage"),
            is_sold=bool(record.get("is_sold")),
            tax_rate=record.get("tax_rate") or 0.0,
        )

    @property
    def unit_price(self) -> float:
        return discounted_price(self.price, self.discount_percentage)


@ordering.value_object(part_of="Cart")
class CartTotals:
    total_items = Integer(default=0)
    total_price = Float(default=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Cart")
class CartLineItem:
    """A quantity of one product."""

    product = ValueObject(ProductSnapshot, required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    @property
    def product_id(self) -> str:
        return str(self.product.product_id)

    @property
    def unit_price(self) -> float:
        return self.product.price

    @property
    def discount_percentage(self):
        return self.product.discount_percentage

    @property
    def tax_rate(self):
        return self.product.tax_rate

    @property
    def line_total(self) -> float:
        return self.product.unit_price * self.quantity


@ordering.entity(part_of="Cart")
class VehicleCartLineItem:
    """Exactly one vehicle. Vehicles have no quantity of their own."""

    vehicle = ValueObject(VehicleSnapshot, required=True)
    added_at = DateTime()

    @property
    def quantity(self) -> int:
        return 1

    @property
    def vehicle_id(self) -> str:
        return str(self.vehicle.vehicle_id)

    @property
    def unit_price(self) -> float:
        return self.vehicle.price

    @property
    def discount_percentage(self):
        return self.vehicle.discount_percentage

    @property
    def tax_rate(self):
        return self.vehicle.tax_rate

    @property
    def line_total(self) -> float:
        return self.vehicle.unit_price


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Cart:
    session_id = String(max_length=255)
    items = HasMany(CartLineItem)
    vehicles = HasMany(VehicleCartLineItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def products_must_be_unique(self):
        ids = [item.product_id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValidationError({"items": ["A product may appear only once in the cart"]})

    @invariant.post
    def vehicles_must_be_unique(self):
        ids = [line.vehicle_id for line in self.vehicles]
        if len(ids) != len(set(ids)):
            raise ValidationError({"vehicles": ["A vehicle may appear only once in the cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id=None):
        now = datetime.now(UTC)
        return cls(session_id=session_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def _line_for(self, product_id):
        return next((i for i in self.items if i.product_id == str(product_id)), None)

    def _vehicle_line_for(self, vehicle_id):
        return next((v for v in self.vehicles if v.vehicle_id == str(vehicle_id)), None)

    def quantity_of(self, product_id) -> int:
        line = self._line_for(product_id)
        return line.quantity if line else 0

    def has_vehicle(self, vehicle_id) -> bool:
        return self._vehicle_line_for(vehicle_id) is not None

    def product_ids(self) -> list[str]:
        return [item.product_id for item in self.items]

    def vehicle_ids(self) -> list[str]:
        return [line.vehicle_id for line in self.vehicles]

    @property
    def is_empty(self) -> bool:
        return not self.items and not self.vehicles

    # -------------------------------------------------------------------
    # Merchandise
    # -------------------------------------------------------------------
    def add_merchandise(self, product: ProductSnapshot, quantity: int = 1):
        """Add ``quantity`` units of ``product``, merging into an existing line.

        The combined quantity may not exceed ``product.stock_quantity``.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self._line_for(product.product_id)
        current = existing.quantity if existing else 0
        if current + quantity > product.stock_quantity:
            raise CapacityExceeded(product.product_id, current + quantity, product.stock_quantity)

        now = datetime.now(UTC)
        if existing:
            existing.quantity = current + quantity
        else:
            self.add_items(CartLineItem(product=product, quantity=quantity, added_at=now))
        self.updated_at = now

    def update_quantity(self, product_id, quantity: int):
        """Set the quantity of a line. Zero or less removes the line."""
        if quantity <= 0:
            self.remove_merchandise(product_id)
            return

        line = self._line_for(product_id)
        if line is None:
            raise LineNotFound(product_id)
        if quantity > line.product.stock_quantity:
            raise CapacityExceeded(product_id, quantity, line.product.stock_quantity)

        line.quantity = quantity
        self.updated_at = datetime.now(UTC)

    def remove_merchandise(self, product_id) -> bool:
        """Remove a product line. Returns whether anything was removed."""
        line = self._line_for(product_id)
        if line is None:
            return False
        self.remove_items(line)
        self.updated_at = datetime.now(UTC)
        return True

    # -------------------------------------------------------------------
    # Vehicles
    # -------------------------------------------------------------------
    def add_vehicle(self, vehicle: VehicleSnapshot):
        if vehicle.is_sold:
            raise ItemUnavailable(vehicle.vehicle_id, "sold")
        if self.has_vehicle(vehicle.vehicle_id):
            raise DuplicateItem(vehicle.vehicle_id)

        now = datetime.now(UTC)
        self.add_vehicles(VehicleCartLineItem(vehicle=vehicle, added_at=now))
        self.updated_at = now

    def remove_vehicle(self, vehicle_id) -> bool:
        line = self._vehicle_line_for(vehicle_id)
        if line is None:
            return False
        self.remove_vehicles(line)
        self.updated_at = datetime.now(UTC)
        return True

    def clear(self):
        for line in list(self.items):
            self.remove_items(line)
        for line in list(self.vehicles):
            self.remove_vehicles(line)
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Reconciliation hooks
    # -------------------------------------------------------------------
    def refresh_merchandise(self, product_id, snapshot: ProductSnapshot, quantity: int):
        """Replace a line's snapshot and quantity with reconciled values."""
        line = self._line_for(product_id)
        if line is None:
            raise LineNotFound(product_id)
        line.product = snapshot
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)

    def drop_merchandise(self, product_id) -> int:
        """Drop a stale line during reconciliation. Returns the units removed."""
        line = self._line_for(product_id)
        if line is None:
            return 0
        quantity = line.quantity
        self.remove_merchandise(product_id)
        return quantity

    def drop_vehicle(self, vehicle_id) -> int:
        return 1 if self.remove_vehicle(vehicle_id) else 0

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def totals(self) -> CartTotals:
        total_items = sum(item.quantity for item in self.items) + len(self.vehicles)
        total_price = sum(item.line_total for item in self.items) + sum(line.line_total for line in self.vehicles)
        return CartTotals(total_items=total_items, total_price=total_price)

    def checkout_summary(self) -> PriceSummary:
        """Net, tax, discount and gross totals over every line."""
        return summarize([*self.items, *self.vehicles])

    def snapshot(self) -> list[dict]:
        """Plain line data captured when the cart is submitted as a quote request."""
        lines = [
            {
                "item_type": "product",
                "item_id": item.product_id,
                "name": item.product.name,
                "quantity": item.quantity,
                "price": item.product.price,
                "discount_percentage": item.product.discount_percentage,
                "tax_rate": item.product.tax_rate,
            }
            for item in self.items
        ]
        lines.extend(
            {
                "item_type": "vehicle",
                "item_id": line.vehicle_id,
                "name": line.vehicle.name,
                "quantity": 1,
                "price": line.vehicle.price,
                "discount_percentage": line.vehicle.discount_percentage,
                "tax_rate": line.vehicle.tax_rate,
            }
            for line in self.vehicles
        )
        return lines
