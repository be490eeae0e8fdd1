"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from notifications.channel import get_notifier
from ordering.cart.cart import Cart, ProductSnapshot, VehicleSnapshot
from ordering.cart.manager import CartManager
from ordering.cart.reconciliation import CartReconciler
from ordering.order.lifecycle import OrderLifecycle, ShippingInfo
from pytest_bdd import given, parsers, then


@pytest.fixture()
def lifecycle():
    return OrderLifecycle()


@pytest.fixture()
def error():
    """Container for a captured rejection."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps: Catalogue
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the catalogue lists product "{product_id}" at {price:g} with {stock:d} in stock'))
def catalogue_product(catalog, product_id, price, stock):
    catalog.add_product(product_id, name=f"Product {product_id}", price=price, stock_quantity=stock)


@given(parsers.cfparse('the catalogue lists vehicle "{vehicle_id}" at {price:g}'))
def catalogue_vehicle(catalog, vehicle_id, price):
    catalog.add_vehicle(vehicle_id, name=f"Vehicle {vehicle_id}", price=price)


@given("the catalogue is unreachable")
def catalogue_down(catalog):
    catalog.configure(should_succeed=False, failure_reason="catalogue offline")


# ---------------------------------------------------------------------------
# Given steps: Cart
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="manager")
def empty_cart(store, catalog):
    return CartManager(Cart.create(session_id="sess-001"), store, CartReconciler(catalog))


@given(parsers.cfparse('the cart holds {qty:d} of product "{product_id}"'))
def cart_holds_product(manager, catalog, qty, product_id):
    assert manager.add_merchandise(ProductSnapshot.from_record(catalog.products[product_id]), qty)
    manager.drain_notices()


@given(parsers.cfparse('the cart holds vehicle "{vehicle_id}"'))
def cart_holds_vehicle(manager, catalog, vehicle_id):
    assert manager.add_vehicle(VehicleSnapshot.from_record(catalog.vehicles[vehicle_id]))
    manager.drain_notices()


# ---------------------------------------------------------------------------
# Given steps: Order
# ---------------------------------------------------------------------------
@given("a pending order", target_fixture="order")
def pending_order(lifecycle):
    shipping_info = ShippingInfo(
        customer_id="cust-001",
        customer_email="einkauf@example.de",
        customer_name="Erika Mustermann",
        company_name="Mustermann Logistik GmbH",
        billing_address={"street": "Hauptstr. 1", "city": "Berlin", "postal_code": "10115", "country": "DE"},
    )
    lines = [{"item_type": "product", "item_id": "prod-001", "name": "Brake pad set", "quantity": 2, "price": 50.0}]
    order = lifecycle.create_order(lines, shipping_info)
    get_notifier().reset()
    return order


# ---------------------------------------------------------------------------
# Then steps: Cart
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart holds {count:d} units"))
def cart_unit_count(manager, count):
    assert manager.totals().total_items == count


@then(parsers.cfparse('the user is told "{message}"'))
def user_is_told(manager, message):
    messages = [notice.message for notice in manager.drain_notices()]
    assert any(m.startswith(message) for m in messages), f"No notice starting with {message!r}: {messages}"


# ---------------------------------------------------------------------------
# Then steps: Order
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(lifecycle, order, status):
    assert lifecycle.get(order.id).status == status


@then("the transition is rejected")
def transition_rejected(error):
    assert error["exc"] is not None, "Expected the transition to be rejected"
