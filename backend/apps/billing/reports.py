"""Sales reports aggregated from stored bills."""
import logging
from datetime import date
from decimal import Decimal

from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce, TruncDate
from django.utils import timezone

from apps.billing.exceptions import ValidationError
from apps.billing.models import Bill, BillLineItem
from apps.billing.money import ZERO, round_money
from apps.billing.types import (
    DailySales,
    DailySalesReport,
    DashboardStats,
    MonthlySalesReport,
    TopProduct,
)
from apps.customers.models import Customer
from apps.products.models import Product

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 10

MONEY_FIELD = DecimalField(max_digits=14, decimal_places=2)
QUANTITY_FIELD = DecimalField(max_digits=15, decimal_places=3)


def _money_sum(field: str):
    return Coalesce(Sum(field), Value(ZERO), output_field=MONEY_FIELD)


def _month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the following month."""
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


class ReportService:
    """Read-only sales figures grouped by the local calendar date of each bill."""

    def daily_sales(self, day: date) -> DailySalesReport:
        bills = Bill.objects.filter(created_at__date=day)
        totals = bills.aggregate(
            total_bills=Count("id"),
            total_sales=_money_sum("total_amount"),
            total_tax=_money_sum("tax_amount"),
        )

        top_rows = (
            BillLineItem.objects.filter(bill__created_at__date=day)
            .values("product_name")
            .annotate(
                total_quantity=Coalesce(Sum("quantity"), Value(Decimal("0")), output_field=QUANTITY_FIELD),
                total_sales=_money_sum("total_price"),
            )
            .order_by("-total_sales", "product_name")[:TOP_PRODUCTS_LIMIT]
        )

        total_bills = totals["total_bills"]
        total_sales = totals["total_sales"]
        average = round_money(total_sales / total_bills) if total_bills else ZERO

        return DailySalesReport(
            date=day,
            total_bills=total_bills,
            total_sales=total_sales,
            total_tax=totals["total_tax"],
            average_bill=average,
            top_products=[
                TopProduct(
                    product_name=row["product_name"],
                    total_quantity=row["total_quantity"],
                    total_sales=row["total_sales"],
                )
                for row in top_rows
            ],
        )

    def monthly_sales(self, year: int, month: int) -> MonthlySalesReport:
        start, end = _month_bounds(year, month)
        bills = Bill.objects.filter(created_at__date__gte=start, created_at__date__lt=end)

        rows = (
            bills.annotate(day=TruncDate("created_at"))
            .values("day")
            .annotate(bills_count=Count("id"), total_sales=_money_sum("total_amount"))
            .order_by("day")
        )
        breakdown = [
            DailySales(date=row["day"], bills_count=row["bills_count"], total_sales=row["total_sales"])
            for row in rows
        ]

        totals = bills.aggregate(
            total_bills=Count("id"),
            total_sales=_money_sum("total_amount"),
            total_tax=_money_sum("tax_amount"),
        )
        logger.debug("Monthly report %s-%02d: %s days with sales", year, month, len(breakdown))

        return MonthlySalesReport(
            year=year,
            month=month,
            total_bills=totals["total_bills"],
            total_sales=totals["total_sales"],
            total_tax=totals["total_tax"],
            daily_breakdown=breakdown,
        )

    def dashboard_stats(self, today: date | None = None) -> DashboardStats:
        """Headline numbers for today, the current month and the catalog."""
        if today is None:
            today = timezone.localdate()
        month_start, month_end = _month_bounds(today.year, today.month)

        today_totals = Bill.objects.filter(created_at__date=today).aggregate(
            bills=Count("id"), sales=_money_sum("total_amount")
        )
        month_totals = Bill.objects.filter(
            created_at__date__gte=month_start, created_at__date__lt=month_end
        ).aggregate(bills=Count("id"), sales=_money_sum("total_amount"))

        return DashboardStats(
            today_bills=today_totals["bills"],
            today_sales=today_totals["sales"],
            month_bills=month_totals["bills"],
            month_sales=month_totals["sales"],
            total_products=Product.objects.filter(is_active=True).count(),
            total_customers=Customer.objects.count(),
        )
