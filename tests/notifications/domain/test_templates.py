"""Tests for notification templates — rendering and registry."""

import pytest
from notifications.notification_type import NotificationType
from notifications.templates import TEMPLATE_REGISTRY, get_template
from notifications.templates.formatting import format_amount
from notifications.templates.order_cancelled import OrderCancelledTemplate
from notifications.templates.order_created import OrderCreatedTemplate
from notifications.templates.order_shipped import OrderShippedTemplate

ORDER_DATA = {
    "order_id": "ord-001",
    "order_number": "ANF-20240309-1A2B3C",
    "status": "pending",
    "items": [
        {"product_name": "Brake pad set", "quantity": 3, "total_price": 270.0, "discount_percentage": 10.0},
        {"product_name": "Transporter", "quantity": 1, "total_price": 20000.0, "discount_percentage": None},
    ],
    "total_amount": 20270.0,
    "billing_address": {"street": "Hauptstr. 1", "city": "Berlin", "postal_code": "10115", "country": "DE"},
    "shipping_address": None,
    "notes": "Please call first",
}


# ---------------------------------------------------------------
# Template registry
# ---------------------------------------------------------------
class TestTemplateRegistry:
    def test_every_notification_type_has_a_template(self):
        for nt in NotificationType:
            assert nt.value in TEMPLATE_REGISTRY, f"Missing template for {nt.value}"

    def test_get_template_returns_correct_class(self):
        assert get_template("order_created") is OrderCreatedTemplate

    def test_get_template_unknown_type_raises(self):
        with pytest.raises(ValueError, match="No template registered"):
            get_template("order_archived")

    @pytest.mark.parametrize("notification_type", list(NotificationType))
    def test_every_template_renders_subject_and_body(self, notification_type):
        result = get_template(notification_type.value).render("Erika", ORDER_DATA)
        assert ORDER_DATA["order_number"] in result["subject"]
        assert result["body"].startswith("Dear Erika")


class TestNotificationType:
    def test_for_status(self):
        assert NotificationType.for_status("shipped") is NotificationType.ORDER_SHIPPED

    def test_for_unknown_status(self):
        with pytest.raises(ValueError):
            NotificationType.for_status("pending")


# ---------------------------------------------------------------
# Order created template
# ---------------------------------------------------------------
class TestOrderCreatedTemplate:
    def test_lists_every_item(self):
        body = OrderCreatedTemplate.render("Erika", ORDER_DATA)["body"]
        assert "3 x Brake pad set: 270.00 EUR (incl. 10% discount)" in body
        assert "1 x Transporter: 20,000.00 EUR" in body

    def test_includes_total_addresses_and_notes(self):
        body = OrderCreatedTemplate.render("Erika", ORDER_DATA)["body"]
        assert "Net total: 20,270.00 EUR" in body
        assert "Hauptstr. 1, 10115 Berlin" in body
        assert "Shipping address: -" in body
        assert "Please call first" in body

    def test_without_notes(self):
        body = OrderCreatedTemplate.render("Erika", {**ORDER_DATA, "notes": None})["body"]
        assert "Your message" not in body


class TestStatusTemplates:
    def test_shipped_includes_notes(self):
        body = OrderShippedTemplate.render("Erika", {**ORDER_DATA, "notes": "Tracking 123"})["body"]
        assert "Tracking 123" in body

    def test_cancelled_includes_reason(self):
        body = OrderCancelledTemplate.render("Erika", {**ORDER_DATA, "notes": "Out of budget"})["body"]
        assert "Reason: Out of budget" in body


def test_format_amount():
    assert format_amount(1234.5) == "1,234.50 EUR"
    assert format_amount(None) == "0.00 EUR"
