"""GraphQL schema for billing, business settings and sales reports."""
import logging
from datetime import date
from decimal import Decimal
from typing import List

import strawberry
import strawberry_django
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.utils import timezone
from strawberry import auto
from strawberry.types import Info

from apps.billing.exceptions import BillingError, ValidationError
from apps.billing.models import Bill, BillLineItem, BillNumberScheme, BusinessSettings
from apps.billing.numbering import BillNumberService
from apps.billing.reports import ReportService
from apps.billing.services import BillingService
from apps.billing.types import (
    BillRequest,
    DailySalesReport,
    DashboardStats,
    LineItemRequest,
    MonthlySalesReport,
)
from apps.core.context import Context
from apps.core.schema import PageInfo, paginate
from apps.customers.schema import CustomerType

logger = logging.getLogger(__name__)


# =========================================================================
# Bill types
# =========================================================================


@strawberry_django.type(BillLineItem)
class BillLineItemType:
    id: auto
    product_name: auto
    quantity: auto
    unit_price: auto
    total_price: auto
    position: auto

    @strawberry.field
    def product_id(self) -> strawberry.ID | None:
        return self.product_id


@strawberry_django.type(Bill)
class BillType:
    id: auto
    bill_number: auto
    customer: CustomerType | None
    customer_name: auto
    subtotal: auto
    tax_rate: auto
    tax_amount: auto
    discount_amount: auto
    total_amount: auto
    payment_method: str
    payment_status: str
    notes: auto
    created_at: auto
    items: List[BillLineItemType]


@strawberry.type
class BillConnection:
    """Paginated bill list."""

    items: list[BillType]
    page_info: PageInfo


@strawberry.input
class BillLineItemInput:
    """One cart line. Leave productId empty for a custom item."""

    product_name: str = ""
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")
    product_id: strawberry.ID | None = None


@strawberry.input
class CreateBillInput:
    items: List[BillLineItemInput]
    customer_id: strawberry.ID | None = None
    customer_name: str = ""
    discount_amount: Decimal = Decimal("0")
    payment_method: str = "cash"
    payment_status: str = "paid"
    notes: str = ""


@strawberry.type
class CreateBillResult:
    success: bool
    error: str | None = None
    error_code: str | None = None
    bill: BillType | None = None


# =========================================================================
# Settings types
# =========================================================================


@strawberry_django.type(BusinessSettings)
class BusinessSettingsType:
    name: auto
    address: auto
    phone: auto
    email: auto
    tax_number: auto
    currency: auto
    tax_rate: auto
    business_type: auto

    @strawberry.field
    def currency_symbol(self) -> str:
        return self.currency_symbol


@strawberry.input
class BusinessSettingsInput:
    name: str
    address: str = ""
    phone: str = ""
    email: str = ""
    tax_number: str = ""
    currency: str = "USD"
    tax_rate: Decimal = Decimal("0")
    business_type: str = "general"


@strawberry.type
class BusinessSettingsResult:
    success: bool
    error: str | None = None
    data: BusinessSettingsType | None = None


@strawberry.type
class BillNumberSchemeType:
    """Bill number scheme configuration."""

    pattern: str
    next_counter: int
    reset_period: str
    preview: str  # Preview of next number


@strawberry.input
class BillNumberSchemeInput:
    pattern: str
    reset_period: str = "daily"
    next_counter: int | None = None  # Only set if explicitly changing


@strawberry.type
class BillNumberSchemeResult:
    success: bool
    error: str | None = None
    data: BillNumberSchemeType | None = None


def _scheme_type(service: BillNumberService) -> BillNumberSchemeType:
    scheme = service.get_scheme()
    return BillNumberSchemeType(
        pattern=scheme.pattern,
        next_counter=scheme.next_counter,
        reset_period=scheme.reset_period,
        preview=service.preview_next_number(),
    )


# =========================================================================
# Report types
# =========================================================================


@strawberry.type
class TopProductType:
    product_name: str
    total_quantity: Decimal
    total_sales: Decimal


@strawberry.type
class DailySalesReportType:
    date: date
    total_bills: int
    total_sales: Decimal
    total_tax: Decimal
    average_bill: Decimal
    top_products: List[TopProductType]


@strawberry.type
class DailySalesType:
    date: date
    bills_count: int
    total_sales: Decimal


@strawberry.type
class MonthlySalesReportType:
    year: int
    month: int
    total_bills: int
    total_sales: Decimal
    total_tax: Decimal
    daily_breakdown: List[DailySalesType]


@strawberry.type
class DashboardStatsType:
    today_bills: int
    today_sales: Decimal
    month_bills: int
    month_sales: Decimal
    total_products: int
    total_customers: int


def _convert_daily_report(report: DailySalesReport) -> DailySalesReportType:
    """Convert DailySalesReport dataclass to GraphQL type."""
    return DailySalesReportType(
        date=report.date,
        total_bills=report.total_bills,
        total_sales=report.total_sales,
        total_tax=report.total_tax,
        average_bill=report.average_bill,
        top_products=[
            TopProductType(
                product_name=p.product_name,
                total_quantity=p.total_quantity,
                total_sales=p.total_sales,
            )
            for p in report.top_products
        ],
    )


def _convert_monthly_report(report: MonthlySalesReport) -> MonthlySalesReportType:
    """Convert MonthlySalesReport dataclass to GraphQL type."""
    return MonthlySalesReportType(
        year=report.year,
        month=report.month,
        total_bills=report.total_bills,
        total_sales=report.total_sales,
        total_tax=report.total_tax,
        daily_breakdown=[
            DailySalesType(date=d.date, bills_count=d.bills_count, total_sales=d.total_sales)
            for d in report.daily_breakdown
        ],
    )


def _convert_dashboard(stats: DashboardStats) -> DashboardStatsType:
    return DashboardStatsType(
        today_bills=stats.today_bills,
        today_sales=stats.today_sales,
        month_bills=stats.month_bills,
        month_sales=stats.month_sales,
        total_products=stats.total_products,
        total_customers=stats.total_customers,
    )


def _parse_id(value, label: str) -> int | None:
    """Convert an optional GraphQL ID to a primary key."""
    if not value:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label} id: {value}")


def _bill_request(input: CreateBillInput) -> BillRequest:
    return BillRequest(
        items=[
            LineItemRequest(
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                product_id=_parse_id(item.product_id, "product"),
            )
            for item in input.items
        ],
        customer_id=_parse_id(input.customer_id, "customer"),
        customer_name=input.customer_name,
        discount_amount=input.discount_amount,
        payment_method=input.payment_method,
        payment_status=input.payment_status,
        notes=input.notes,
    )


# =========================================================================
# Queries
# =========================================================================


@strawberry.type
class BillingQuery:
    @strawberry.field
    def business_settings(self, info: Info[Context, None]) -> BusinessSettingsType:
        return BusinessSettings.load()

    @strawberry.field
    def bills(
        self,
        info: Info[Context, None],
        page: int = 1,
        page_size: int = 50,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> BillConnection:
        queryset = (
            BillingService()
            .bills_between(start_date, end_date)
            .select_related("customer")
            .prefetch_related("items")
        )
        items, page_info = paginate(queryset, page, page_size)
        return BillConnection(items=items, page_info=page_info)

    @strawberry.field
    def bill(self, info: Info[Context, None], id: strawberry.ID) -> BillType | None:
        return BillingService().get_bill(id)

    @strawberry.field
    def bill_number_scheme(self, info: Info[Context, None]) -> BillNumberSchemeType:
        """Get the bill number scheme with a preview of the next number."""
        return _scheme_type(BillNumberService())


@strawberry.type
class ReportQuery:
    @strawberry.field
    def daily_sales(self, info: Info[Context, None], date: date | None = None) -> DailySalesReportType:
        """Sales for one day; defaults to today."""
        day = date or timezone.localdate()
        return _convert_daily_report(ReportService().daily_sales(day))

    @strawberry.field
    def monthly_sales(self, info: Info[Context, None], year: int, month: int) -> MonthlySalesReportType | None:
        """Per-day sales for a calendar month; null for an invalid month."""
        if not 1 <= month <= 12:
            return None
        return _convert_monthly_report(ReportService().monthly_sales(year, month))

    @strawberry.field
    def dashboard_stats(self, info: Info[Context, None]) -> DashboardStatsType:
        return _convert_dashboard(ReportService().dashboard_stats())


# =========================================================================
# Mutations
# =========================================================================


@strawberry.type
class BillingMutation:
    @strawberry.mutation
    def create_bill(self, info: Info[Context, None], input: CreateBillInput) -> CreateBillResult:
        """Create a bill, decrementing stock for catalog items."""
        service = BillingService()
        try:
            result = service.create_bill(_bill_request(input))
        except BillingError as e:
            logger.info("Bill rejected (%s): %s", e.code, e.message)
            return CreateBillResult(success=False, error=e.message, error_code=e.code)

        return CreateBillResult(success=True, bill=service.get_bill(result.id))

    @strawberry.mutation
    def save_business_settings(
        self, info: Info[Context, None], input: BusinessSettingsInput
    ) -> BusinessSettingsResult:
        """Update the business details and the tax rate used for new bills."""
        if not input.name.strip():
            return BusinessSettingsResult(success=False, error="Business name is required.")
        if input.tax_rate < 0 or input.tax_rate > 100:
            return BusinessSettingsResult(
                success=False, error="Tax rate must be between 0 and 100."
            )
        if len(input.currency) != 3:
            return BusinessSettingsResult(
                success=False, error="Currency must be a 3-letter ISO code."
            )
        if input.email:
            try:
                validate_email(input.email)
            except DjangoValidationError:
                return BusinessSettingsResult(success=False, error="Invalid email address")

        business = BusinessSettings.load()
        business.name = input.name.strip()
        business.address = input.address
        business.phone = input.phone
        business.email = input.email
        business.tax_number = input.tax_number
        business.currency = input.currency.upper()
        business.tax_rate = input.tax_rate
        business.business_type = input.business_type
        business.save()

        logger.info("Business settings updated, tax rate %s%%", business.tax_rate)
        return BusinessSettingsResult(success=True, data=business)

    @strawberry.mutation
    def save_bill_number_scheme(
        self, info: Info[Context, None], input: BillNumberSchemeInput
    ) -> BillNumberSchemeResult:
        """Save the bill number pattern and reset period."""
        valid_periods = BillNumberScheme.ResetPeriod.values
        if input.reset_period not in valid_periods:
            return BillNumberSchemeResult(
                success=False,
                error=f"Invalid reset period. Must be one of: {', '.join(valid_periods)}",
            )

        errors = BillNumberService.validate_pattern(input.pattern, input.reset_period)
        if errors:
            return BillNumberSchemeResult(success=False, error="; ".join(errors))

        service = BillNumberService()
        scheme = service.get_scheme()
        scheme.pattern = input.pattern
        scheme.reset_period = input.reset_period
        if input.next_counter is not None:
            if input.next_counter < 1:
                return BillNumberSchemeResult(
                    success=False, error="Counter must be at least 1."
                )
            scheme.next_counter = input.next_counter
        scheme.save()

        return BillNumberSchemeResult(success=True, data=_scheme_type(service))
