"""Tests for the pricing engine — discounts, tax and checkout summaries."""

from dataclasses import dataclass

import pytest
from ordering.pricing import PriceSummary, calculate_tax, discounted_price, gross_price, summarize


@dataclass
class _Line:
    unit_price: float
    quantity: int
    discount_percentage: float | None = None
    tax_rate: float | None = None


class TestDiscountedPrice:
    def test_no_discount_returns_base(self):
        assert discounted_price(100.0) == 100.0
        assert discounted_price(100.0, None) == 100.0

    def test_zero_or_negative_discount_returns_base(self):
        assert discounted_price(100.0, 0) == 100.0
        assert discounted_price(100.0, -5) == 100.0

    def test_percentage_discount(self):
        assert discounted_price(100.0, 10) == pytest.approx(90.0)
        assert discounted_price(49.99, 50) == pytest.approx(24.995)

    def test_out_of_range_discount_is_not_rejected(self):
        assert discounted_price(100.0, 150) == pytest.approx(-50.0)


class TestTax:
    def test_calculate_tax(self):
        assert calculate_tax(100.0, 19.0) == pytest.approx(19.0)

    def test_missing_rate_means_no_tax(self):
        assert calculate_tax(100.0, None) == 0.0

    def test_gross_price(self):
        assert gross_price(200.0, 7.0) == pytest.approx(214.0)


class TestSummarize:
    def test_empty_lines(self):
        assert summarize([]) == PriceSummary()

    def test_mixed_lines(self):
        summary = summarize(
            [
                _Line(unit_price=100.0, quantity=3, discount_percentage=10, tax_rate=19.0),
                _Line(unit_price=50.0, quantity=1, tax_rate=7.0),
            ]
        )
        assert summary.net_total == pytest.approx(320.0)
        assert summary.discount_total == pytest.approx(30.0)
        assert summary.tax_total == pytest.approx(270.0 * 0.19 + 50.0 * 0.07)
        assert summary.gross_total == pytest.approx(summary.net_total + summary.tax_total)
