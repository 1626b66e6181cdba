"""Billing models: business settings, bill numbering, bills and their line items."""
from decimal import Decimal

from django.db import models

from apps.core.models import TimestampedModel


class BusinessSettings(TimestampedModel):
    """The single active business configuration; supplies the tax rate for bills."""

    name = models.CharField(max_length=255, default="My Business")
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    tax_number = models.CharField(max_length=50, blank=True)
    currency = models.CharField(max_length=3, default="USD")
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Tax rate in % applied to the taxable base of every bill",
    )
    business_type = models.CharField(max_length=50, default="general")

    class Meta:
        verbose_name = "Business Settings"
        verbose_name_plural = "Business Settings"

    def __str__(self):
        return self.name

    @classmethod
    def load(cls) -> "BusinessSettings":
        """Return the active settings record, creating the default one if missing."""
        settings = cls.objects.order_by("id").first()
        if settings is None:
            settings = cls.objects.create()
        return settings

    @property
    def currency_symbol(self) -> str:
        """Return the currency symbol for the configured currency."""
        symbols = {
            "USD": "$",
            "EUR": "€",
            "GBP": "£",
            "INR": "₹",
            "JPY": "¥",
        }
        return symbols.get(self.currency, self.currency + " ")


class BillNumberScheme(TimestampedModel):
    """Configurable bill number pattern and its running counter."""

    class ResetPeriod(models.TextChoices):
        DAILY = "daily", "Daily"
        MONTHLY = "monthly", "Monthly"
        YEARLY = "yearly", "Yearly"
        NEVER = "never", "Never"

    pattern = models.CharField(
        max_length=100,
        default="BILL-{YYYY}{MM}{DD}-{NNNNN}",
        help_text="Pattern with placeholders: {YYYY}, {YY}, {MM}, {DD}, {NNN}, {NNNN}, {NNNNN}, {NNNNNN}",
    )
    next_counter = models.PositiveIntegerField(default=1)
    reset_period = models.CharField(
        max_length=10,
        choices=ResetPeriod.choices,
        default=ResetPeriod.DAILY,
    )
    last_reset_date = models.DateField(null=True, blank=True)

    class Meta:
        verbose_name = "Bill Number Scheme"

    def __str__(self):
        return f"Bill number scheme: {self.pattern}"


class Bill(models.Model):
    """An immutable invoice issued at the point of sale."""

    class PaymentMethod(models.TextChoices):
        CASH = "cash", "Cash"
        CARD = "card", "Card"
        UPI = "upi", "UPI"
        BANK_TRANSFER = "bank_transfer", "Bank transfer"
        OTHER = "other", "Other"

    class PaymentStatus(models.TextChoices):
        PAID = "paid", "Paid"
        PENDING = "pending", "Pending"
        PARTIAL = "partial", "Partial"

    bill_number = models.CharField(max_length=100, unique=True)
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bills",
    )
    customer_name = models.CharField(max_length=255)

    # Amounts
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        help_text="Tax rate in % at the time the bill was created",
    )
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2)
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)

    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )
    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PAID,
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Bill {self.bill_number} - {self.customer_name}"


class BillLineItem(models.Model):
    """One priced entry on a bill, with the product name and price frozen."""

    bill = models.ForeignKey(
        Bill,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bill_items",
    )
    product_name = models.CharField(max_length=255)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["bill", "position"]

    def __str__(self):
        return f"{self.product_name} x{self.quantity}"
