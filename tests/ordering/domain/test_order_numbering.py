"""Tests for human-readable order numbers."""

from datetime import UTC, datetime

from ordering.order.numbering import ORDER_NUMBER_PREFIX, generate_order_number


def test_number_uses_creation_date():
    number = generate_order_number(datetime(2024, 3, 9, 15, 30, tzinfo=UTC))
    assert number.startswith(f"{ORDER_NUMBER_PREFIX}-20240309-")


def test_suffix_is_six_uppercase_hex_characters():
    suffix = generate_order_number().rsplit("-", 1)[1]
    assert len(suffix) == 6
    assert suffix == suffix.upper()
    int(suffix, 16)


def test_numbers_are_distinct():
    numbers = {generate_order_number() for _ in range(50)}
    assert len(numbers) == 50
