"""BDD tests for reconciling the cart against the catalogue."""

import asyncio

from pytest_bdd import given, parsers, scenarios, when

scenarios("features/cart_reconciliation.feature")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('product "{product_id}" is deleted from the catalogue'))
def product_deleted(catalog, product_id):
    catalog.remove_product(product_id)


@given(parsers.cfparse('vehicle "{vehicle_id}" is sold'))
def vehicle_sold(catalog, vehicle_id):
    catalog.mark_vehicle_sold(vehicle_id)


@given(parsers.cfparse('only {stock:d} of product "{product_id}" is left in stock'))
def stock_reduced(catalog, stock, product_id):
    catalog.update_product(product_id, stock_quantity=stock)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the cart is reconciled")
def reconcile(manager):
    asyncio.run(manager.reconcile())
