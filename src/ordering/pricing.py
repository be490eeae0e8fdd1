"""Pricing engine — discount and tax arithmetic shared by cart and orders.

All functions are pure. No rounding is applied here; callers format
amounts for display. Discount percentages are not range-checked: the
catalogue owns data-entry validation.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PriceSummary:
    """Net, tax, discount and gross totals for a set of priced lines."""

    net_total: float = 0.0
    tax_total: float = 0.0
    discount_total: float = 0.0
    gross_total: float = 0.0


def discounted_price(base: float, discount_percent: float | None = None) -> float:
    """Return ``base`` reduced by ``discount_percent`` percent.

    A missing or non-positive discount leaves the price unchanged.
    """
    if not discount_percent or discount_percent <= 0:
        return base
    return base * (1 - discount_percent / 100)


def calculate_tax(net_price: float, tax_rate: float | None) -> float:
    return net_price * ((tax_rate or 0.0) / 100)


def gross_price(net_price: float, tax_rate: float | None) -> float:
    return net_price + calculate_tax(net_price, tax_rate)


def summarize(lines) -> PriceSummary:
    """Aggregate totals over lines exposing ``unit_price``, ``discount_percentage``,
    ``quantity`` and ``tax_rate``.
    """
    net_total = 0.0
    tax_total = 0.0
    discount_total = 0.0

    for line in lines:
        original = line.unit_price * line.quantity
        net = discounted_price(line.unit_price, line.discount_percentage) * line.quantity
        discount_total += original - net
        net_total += net
        tax_total += calculate_tax(net, line.tax_rate)

    return PriceSummary(
        net_total=net_total,
        tax_total=tax_total,
        discount_total=discount_total,
        gross_total=net_total + tax_total,
    )
