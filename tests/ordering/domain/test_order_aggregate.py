"""Tests for the Order aggregate — creation from a cart snapshot."""

import json
import re

import pytest
from ordering.order.events import OrderCreated
from ordering.order.order import Order, OrderStatus, build_item
from protean.exceptions import ValidationError

BILLING = {"street": "Hauptstr. 1", "city": "Berlin", "postal_code": "10115", "country": "DE"}
SHIPPING = {"street": "Lagerweg 7", "city": "Hamburg", "postal_code": "20095", "country": "DE"}


def _lines():
    return [
        {
            "item_type": "product",
            "item_id": "prod-A",
            "name": "Brake pad set",
            "quantity": 3,
            "price": 100.0,
            "discount_percentage": 10.0,
        },
        {
            "item_type": "vehicle",
            "item_id": "veh-V",
            "name": "Transporter",
            "quantity": 1,
            "price": 20000.0,
            "discount_percentage": None,
        },
    ]


def _make_order(**overrides):
    kwargs = {
        "customer_id": "cust-001",
        "customer_email": "buyer@example.com",
        "lines": _lines(),
        "customer_name": "Erika",
        "company_name": "Mustermann GmbH",
        "billing_address": BILLING,
        "notes": "Please call before delivery",
    }
    kwargs.update(overrides)
    return Order.create(**kwargs)


class TestOrderCreation:
    def test_starts_pending(self):
        order = _make_order()
        assert order.status == OrderStatus.PENDING.value

    def test_order_number_format(self):
        order = _make_order()
        assert re.fullmatch(r"ANF-\d{8}-[0-9A-F]{6}", order.order_number)

    def test_items_capture_discount(self):
        order = _make_order()
        brake = next(i for i in order.items if i.product_name == "Brake pad set")
        assert brake.original_unit_price == 100.0
        assert brake.discount_percentage == 10.0
        assert brake.unit_price == pytest.approx(90.0)
        assert brake.total_price == pytest.approx(270.0)

    def test_vehicle_item_has_quantity_one(self):
        order = _make_order()
        vehicle = next(i for i in order.items if i.item_type == "vehicle")
        assert vehicle.quantity == 1
        assert vehicle.discount_percentage is None

    def test_total_amount_is_net_total(self):
        order = _make_order()
        assert order.total_amount == pytest.approx(20270.0)

    def test_empty_cart_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_order(lines=[])
        assert "items" in exc.value.messages

    def test_shipping_defaults_to_billing(self):
        order = _make_order(shipping_address=SHIPPING)
        assert order.use_different_shipping is False
        assert order.shipping_address.city == "Berlin"

    def test_different_shipping_address(self):
        order = _make_order(shipping_address=SHIPPING, use_different_shipping=True)
        assert order.use_different_shipping is True
        assert order.shipping_address.city == "Hamburg"
        assert order.billing_address.city == "Berlin"

    def test_raises_order_created(self):
        order = _make_order()
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderCreated)
        assert event.order_number == order.order_number
        assert len(json.loads(event.items)) == 2


class TestOrderItems:
    def test_build_item_without_discount(self):
        item = build_item({"item_id": "p", "name": "Bolt", "quantity": 4, "price": 2.5})
        assert item.item_type == "product"
        assert item.unit_price == 2.5
        assert item.total_price == 10.0
        assert item.discount_percentage is None

    def test_later_snapshot_changes_do_not_affect_order(self):
        lines = _lines()
        order = _make_order(lines=lines)
        lines[0]["price"] = 1.0
        assert order.items[0].original_unit_price == 100.0


class TestNotificationData:
    def test_contains_breakdown_addresses_and_notes(self):
        order = _make_order()
        data = order.notification_data()
        assert data["order_number"] == order.order_number
        assert len(data["items"]) == 2
        assert data["billing_address"]["city"] == "Berlin"
        assert data["notes"] == "Please call before delivery"

    def test_transition_notes_override_order_notes(self):
        order = _make_order()
        assert order.notification_data("Tracking 123")["notes"] == "Tracking 123"
