"""Billing service: turns a cart into a persisted bill in one unit of work."""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction

from apps.billing.exceptions import (
    DuplicateBillNumber,
    PersistenceError,
    ProductNotFound,
    ValidationError,
)
from apps.billing.inventory import InventoryLedger
from apps.billing.models import Bill, BillLineItem, BusinessSettings
from apps.billing.money import (
    CENT,
    ZERO,
    BillTotals,
    compute_totals,
    line_total,
    require_places,
    to_decimal,
)
from apps.billing.numbering import BillNumberService
from apps.billing.types import BillRequest, BillResult
from apps.customers.models import Customer
from apps.products.models import Product

logger = logging.getLogger(__name__)

QUANTITY_STEP = Decimal("0.001")

# Largest values the DecimalField columns can hold
MAX_QUANTITY = Decimal("999999999.999")
MAX_AMOUNT = Decimal("9999999999.99")


@dataclass
class _ValidLine:
    product_id: Optional[int]
    product_name: str
    quantity: Decimal
    unit_price: Decimal


def _discount(request: BillRequest):
    return ZERO if request.discount_amount is None else request.discount_amount


def _check_range(totals: BillTotals) -> None:
    amounts = (totals.subtotal, totals.discount_amount, totals.tax_amount, totals.total_amount)
    if any(abs(amount) > MAX_AMOUNT for amount in amounts):
        raise ValidationError("Bill amounts exceed the supported range")


class BillingService:
    """Creates bills: validates the cart, prices it, numbers it, stores it and consumes stock."""

    def __init__(
        self,
        inventory: InventoryLedger | None = None,
        numbering: BillNumberService | None = None,
        allow_discount_over_subtotal: bool | None = None,
        max_attempts: int | None = None,
    ):
        if allow_discount_over_subtotal is None:
            allow_discount_over_subtotal = settings.BILLING_ALLOW_DISCOUNT_OVER_SUBTOTAL
        if max_attempts is None:
            max_attempts = settings.BILLING_NUMBER_MAX_ATTEMPTS

        self.inventory = inventory or InventoryLedger()
        self.numbering = numbering or BillNumberService()
        self.allow_discount_over_subtotal = allow_discount_over_subtotal
        self.max_attempts = max(1, max_attempts)

    def create_bill(self, request: BillRequest) -> BillResult:
        """
        Validate and persist a bill.

        The header, every line item and every stock decrement are written in
        one transaction. The tax rate is read from BusinessSettings inside that
        transaction. A bill number collision is retried with a freshly minted
        number up to ``max_attempts`` times.

        Raises:
            ValidationError: the request is malformed; nothing was written.
            ProductNotFound: a referenced product is missing; nothing was written.
            InsufficientStock: negative stock is disallowed and a product ran out.
            PersistenceError: the database rejected the bill; nothing was written.
        """
        lines = self._validate(request)
        customer = self._resolve_customer(request.customer_id)
        customer_name = (request.customer_name or "").strip()
        if not customer_name:
            customer_name = customer.name if customer else settings.BILLING_DEFAULT_CUSTOMER_NAME

        for attempt in range(1, self.max_attempts + 1):
            bill_number = self.numbering.next_number()
            try:
                bill = self._persist(bill_number, customer, customer_name, lines, request)
            except DuplicateBillNumber:
                logger.warning(
                    "Bill number %s already taken (attempt %s of %s)",
                    bill_number, attempt, self.max_attempts,
                )
                continue

            logger.info(
                "Created bill %s for %s: %s items, total %s",
                bill.bill_number, customer_name, len(lines), bill.total_amount,
            )
            return BillResult(
                id=bill.id,
                bill_number=bill.bill_number,
                subtotal=bill.subtotal,
                tax_amount=bill.tax_amount,
                discount_amount=bill.discount_amount,
                total_amount=bill.total_amount,
            )

        logger.error("Giving up on bill number allocation after %s attempts", self.max_attempts)
        raise PersistenceError(
            f"Could not allocate a unique bill number after {self.max_attempts} attempts"
        )

    def get_bill(self, bill_id) -> Bill | None:
        """Fetch a bill with its line items, or None."""
        return Bill.objects.prefetch_related("items").filter(pk=bill_id).first()

    def bills_between(self, start_date: date | None = None, end_date: date | None = None):
        """Bills created within an inclusive date range, newest first."""
        queryset = Bill.objects.all()
        if start_date:
            queryset = queryset.filter(created_at__date__gte=start_date)
        if end_date:
            queryset = queryset.filter(created_at__date__lte=end_date)
        return queryset.order_by("-created_at", "-id")

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(self, request: BillRequest) -> list[_ValidLine]:
        if not request.items:
            raise ValidationError("A bill needs at least one line item")

        lines = []
        for index, item in enumerate(request.items, start=1):
            quantity = to_decimal(item.quantity)
            unit_price = to_decimal(item.unit_price)
            name = (item.product_name or "").strip()

            if quantity <= 0:
                raise ValidationError(f"Item {index}: quantity must be greater than zero")
            if quantity > MAX_QUANTITY:
                raise ValidationError(f"Item {index}: quantity is too large")
            require_places(
                quantity, QUANTITY_STEP, f"Item {index}: quantity supports at most 3 decimal places"
            )
            if unit_price < 0:
                raise ValidationError(f"Item {index}: unit price cannot be negative")
            if unit_price > MAX_AMOUNT:
                raise ValidationError(f"Item {index}: unit price is too large")
            require_places(
                unit_price, CENT, f"Item {index}: unit price supports at most 2 decimal places"
            )
            if item.product_id is None and not name:
                raise ValidationError(f"Item {index}: a custom item needs a name")

            lines.append(
                _ValidLine(
                    product_id=item.product_id,
                    product_name=name,
                    quantity=quantity,
                    unit_price=unit_price,
                )
            )

        if request.payment_method not in Bill.PaymentMethod.values:
            raise ValidationError(f"Unknown payment method: {request.payment_method}")
        if request.payment_status not in Bill.PaymentStatus.values:
            raise ValidationError(f"Unknown payment status: {request.payment_status}")

        # Discount rules do not depend on the tax rate, so check them before any write
        totals = compute_totals(
            ((line.quantity, line.unit_price) for line in lines),
            discount_amount=_discount(request),
            tax_rate=ZERO,
            allow_discount_over_subtotal=self.allow_discount_over_subtotal,
        )
        _check_range(totals)
        return lines

    @staticmethod
    def _resolve_customer(customer_id) -> Customer | None:
        if customer_id is None:
            return None
        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            raise ValidationError(f"Customer {customer_id} not found")
        return customer

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _persist(
        self,
        bill_number: str,
        customer: Customer | None,
        customer_name: str,
        lines: list[_ValidLine],
        request: BillRequest,
    ) -> Bill:
        try:
            with transaction.atomic():
                business = BusinessSettings.load()
                totals = compute_totals(
                    ((line.quantity, line.unit_price) for line in lines),
                    discount_amount=_discount(request),
                    tax_rate=business.tax_rate,
                    allow_discount_over_subtotal=self.allow_discount_over_subtotal,
                )
                _check_range(totals)

                bill = self._insert_bill(
                    bill_number=bill_number,
                    customer=customer,
                    customer_name=customer_name,
                    subtotal=totals.subtotal,
                    tax_rate=totals.tax_rate,
                    tax_amount=totals.tax_amount,
                    discount_amount=totals.discount_amount,
                    total_amount=totals.total_amount,
                    payment_method=request.payment_method,
                    payment_status=request.payment_status,
                    notes=request.notes or "",
                )

                for position, line in enumerate(lines):
                    product = None
                    if line.product_id is not None:
                        product = Product.objects.filter(pk=line.product_id).first()
                        if product is None:
                            raise ProductNotFound(line.product_id)

                    BillLineItem.objects.create(
                        bill=bill,
                        product=product,
                        product_name=line.product_name or product.name,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        total_price=line_total(line.quantity, line.unit_price),
                        position=position,
                    )
                    self.inventory.apply_consumption(line.product_id, line.quantity)

                return bill
        except DatabaseError as e:
            logger.error("Failed to persist bill %s: %s", bill_number, e)
            raise PersistenceError(f"Could not save bill: {e}") from e

    @staticmethod
    def _insert_bill(bill_number: str, **fields) -> Bill:
        """Insert the bill header, classifying a bill number collision."""
        try:
            with transaction.atomic():
                return Bill.objects.create(bill_number=bill_number, **fields)
        except IntegrityError:
            if Bill.objects.filter(bill_number=bill_number).exists():
                raise DuplicateBillNumber(bill_number)
            raise
