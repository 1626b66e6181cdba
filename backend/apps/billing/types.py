"""Billing data classes for structured inputs and return values."""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class LineItemRequest:
    """A proposed line on a bill."""

    product_name: str = ""
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")
    product_id: Optional[int] = None  # None for custom / ad-hoc items


@dataclass
class BillRequest:
    """A cart submitted for billing."""

    items: list[LineItemRequest] = field(default_factory=list)
    customer_id: Optional[int] = None
    customer_name: str = ""
    discount_amount: Decimal = Decimal("0")
    payment_method: str = "cash"
    payment_status: str = "paid"
    notes: str = ""


@dataclass
class BillResult:
    """Outcome of a successful bill creation."""

    id: int
    bill_number: str
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal


@dataclass
class TopProduct:
    product_name: str
    total_quantity: Decimal
    total_sales: Decimal


@dataclass
class DailySalesReport:
    """Sales figures for one calendar day."""

    date: date
    total_bills: int
    total_sales: Decimal
    total_tax: Decimal
    average_bill: Decimal
    top_products: list[TopProduct] = field(default_factory=list)


@dataclass
class DailySales:
    date: date
    bills_count: int
    total_sales: Decimal


@dataclass
class MonthlySalesReport:
    """Per-day breakdown and totals for one calendar month."""

    year: int
    month: int
    total_bills: int
    total_sales: Decimal
    total_tax: Decimal
    daily_breakdown: list[DailySales] = field(default_factory=list)


@dataclass
class DashboardStats:
    today_bills: int
    today_sales: Decimal
    month_bills: int
    month_sales: Decimal
    total_products: int
    total_customers: int
