"""Fixed-precision money arithmetic for bills.

All amounts are ``Decimal`` values rounded half-up to two places at every
stored boundary: each line total, the tax amount, and therefore the subtotal
and the grand total. Because the subtotal is the sum of already-rounded line
totals, a stored bill always reconciles with its stored line items.
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from apps.billing.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class BillTotals:
    """Computed monetary totals for a bill."""

    subtotal: Decimal
    discount_amount: Decimal
    taxable_base: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def to_decimal(value) -> Decimal:
    """Convert ints, strings, floats and Decimals to Decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion. NaN and infinities are rejected.
    """
    if isinstance(value, float):
        value = str(value)
    if not isinstance(value, Decimal):
        try:
            value = Decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError(f"Invalid amount: {value!r}")
    if not value.is_finite():
        raise ValidationError(f"Invalid amount: {value}")
    return value


def quantize(value, step: Decimal) -> Decimal:
    """Round half-up to ``step``; magnitudes beyond decimal precision are invalid."""
    value = to_decimal(value)
    try:
        return value.quantize(step, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount out of range: {value}")


def require_places(value, step: Decimal, message: str) -> Decimal:
    """Return ``value`` as a Decimal, rejecting anything finer than ``step``."""
    value = to_decimal(value)
    if value != quantize(value, step):
        raise ValidationError(message)
    return value


def round_money(value) -> Decimal:
    """Round to cents, half-up."""
    return quantize(value, CENT)


def line_total(quantity, unit_price) -> Decimal:
    return round_money(to_decimal(quantity) * to_decimal(unit_price))


def compute_totals(
    lines: Iterable[tuple],
    discount_amount=ZERO,
    tax_rate=ZERO,
    allow_discount_over_subtotal: bool = True,
) -> BillTotals:
    """
    Compute subtotal, tax and total for ``(quantity, unit_price)`` pairs.

    subtotal     = sum of line totals
    taxable_base = subtotal - discount
    tax_amount   = taxable_base * tax_rate / 100
    total_amount = taxable_base + tax_amount

    A discount larger than the subtotal yields a negative taxable base, tax
    and total unless ``allow_discount_over_subtotal`` is False, in which case
    it is rejected.
    """
    discount = to_decimal(discount_amount)
    rate = to_decimal(tax_rate)

    if discount < 0:
        raise ValidationError("Discount amount cannot be negative")
    discount = round_money(
        require_places(discount, CENT, "Discount supports at most 2 decimal places")
    )
    if rate < 0:
        raise ValidationError("Tax rate cannot be negative")

    subtotal = sum((line_total(qty, price) for qty, price in lines), ZERO)

    if discount > subtotal and not allow_discount_over_subtotal:
        raise ValidationError(
            f"Discount {discount} exceeds subtotal {subtotal}"
        )

    taxable_base = subtotal - discount
    tax_amount = round_money(taxable_base * rate / HUNDRED)

    return BillTotals(
        subtotal=subtotal,
        discount_amount=discount,
        taxable_base=taxable_base,
        tax_rate=rate,
        tax_amount=tax_amount,
        total_amount=taxable_base + tax_amount,
    )
