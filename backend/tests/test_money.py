"""Tests for bill money arithmetic."""
from decimal import Decimal

import pytest

from apps.billing.exceptions import ValidationError
from apps.billing.money import compute_totals, line_total, round_money, to_decimal


class TestRounding:
    """Half-up rounding to cents."""

    def test_half_rounds_up(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")
        assert round_money(Decimal("2.344")) == Decimal("2.34")

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_invalid_amount(self):
        with pytest.raises(ValidationError):
            to_decimal("ten")

    def test_line_total_fractional_quantity(self):
        assert line_total(Decimal("0.333"), Decimal("3.00")) == Decimal("1.00")
        assert line_total(Decimal("1.5"), Decimal("2.99")) == Decimal("4.49")


class TestComputeTotals:
    """Subtotal, discount, tax and total."""

    def test_simple_bill_with_tax(self):
        totals = compute_totals(
            [(2, Decimal("10.00")), (1, Decimal("5.00"))],
            discount_amount=Decimal("0"),
            tax_rate=Decimal("10"),
        )
        assert totals.subtotal == Decimal("25.00")
        assert totals.tax_amount == Decimal("2.50")
        assert totals.total_amount == Decimal("27.50")

    def test_discount_applies_before_tax(self):
        totals = compute_totals(
            [(2, Decimal("10.00")), (1, Decimal("5.00"))],
            discount_amount=Decimal("5.00"),
            tax_rate=Decimal("10"),
        )
        assert totals.taxable_base == Decimal("20.00")
        assert totals.tax_amount == Decimal("2.00")
        assert totals.total_amount == Decimal("22.00")

    def test_total_reconciles(self):
        totals = compute_totals(
            [(Decimal("1.333"), Decimal("7.77")), (3, Decimal("0.99"))],
            discount_amount=Decimal("1.11"),
            tax_rate=Decimal("7.5"),
        )
        assert totals.total_amount == totals.subtotal - totals.discount_amount + totals.tax_amount

    def test_subtotal_is_sum_of_rounded_lines(self):
        lines = [(Decimal("0.333"), Decimal("1.00"))] * 3
        totals = compute_totals(lines)
        assert totals.subtotal == Decimal("0.99")

    def test_zero_tax(self):
        totals = compute_totals([(1, Decimal("9.99"))])
        assert totals.tax_amount == Decimal("0.00")
        assert totals.total_amount == Decimal("9.99")

    def test_negative_discount_rejected(self):
        with pytest.raises(ValidationError):
            compute_totals([(1, Decimal("10"))], discount_amount=Decimal("-1"))

    def test_negative_tax_rate_rejected(self):
        with pytest.raises(ValidationError):
            compute_totals([(1, Decimal("10"))], tax_rate=Decimal("-5"))

    def test_discount_over_subtotal_allowed_by_default(self):
        totals = compute_totals(
            [(1, Decimal("10.00"))], discount_amount=Decimal("15.00"), tax_rate=Decimal("10")
        )
        assert totals.taxable_base == Decimal("-5.00")
        assert totals.tax_amount == Decimal("-0.50")
        assert totals.total_amount == Decimal("-5.50")

    def test_discount_over_subtotal_rejected_when_disallowed(self):
        with pytest.raises(ValidationError):
            compute_totals(
                [(1, Decimal("10.00"))],
                discount_amount=Decimal("15.00"),
                allow_discount_over_subtotal=False,
            )


class TestInvalidAmounts:
    """Non-finite and out-of-range values are validation errors."""

    @pytest.mark.parametrize("value", ["NaN", "sNaN", "Infinity", "-Infinity"])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValidationError):
            to_decimal(Decimal(value))

    def test_non_finite_string_rejected(self):
        with pytest.raises(ValidationError):
            to_decimal("NaN")

    def test_overflowing_magnitude_rejected(self):
        with pytest.raises(ValidationError):
            round_money(Decimal("1E+40"))

    @pytest.mark.parametrize("discount", ["NaN", "Infinity"])
    def test_non_finite_discount(self, discount):
        with pytest.raises(ValidationError):
            compute_totals([(1, Decimal("10.00"))], discount_amount=Decimal(discount))

    def test_discount_with_sub_cent_digits_rejected(self):
        with pytest.raises(ValidationError):
            compute_totals([(1, Decimal("10.00"))], discount_amount=Decimal("1.005"))

    def test_tiny_negative_discount_rejected(self):
        with pytest.raises(ValidationError):
            compute_totals([(1, Decimal("10.00"))], discount_amount=Decimal("-0.004"))

    def test_discount_normalised_to_cents(self):
        totals = compute_totals([(1, Decimal("10.00"))], discount_amount=Decimal("2.5"))
        assert str(totals.discount_amount) == "2.50"
