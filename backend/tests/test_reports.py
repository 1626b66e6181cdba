"""Tests for sales reports."""
from datetime import date, datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.billing.exceptions import ValidationError
from apps.billing.models import Bill
from apps.billing.reports import ReportService
from apps.billing.services import BillingService
from apps.billing.types import BillRequest, LineItemRequest
from apps.products.models import Product


def bill_on(day: date, *items: LineItemRequest) -> Bill:
    """Create a bill and move its timestamp to noon on ``day``."""
    result = BillingService().create_bill(BillRequest(items=list(items)))
    Bill.objects.filter(pk=result.id).update(
        created_at=timezone.make_aware(datetime(day.year, day.month, day.day, 12, 0))
    )
    return Bill.objects.get(pk=result.id)


@pytest.fixture
def report_service():
    return ReportService()


class TestDailySales:
    """Daily totals and top products."""

    def test_empty_day(self, db, report_service):
        report = report_service.daily_sales(date(2026, 3, 10))

        assert report.total_bills == 0
        assert report.total_sales == Decimal("0")
        assert report.average_bill == Decimal("0")
        assert report.top_products == []

    def test_totals(self, business, scheme, product, other_product, report_service):
        day = date(2026, 3, 10)
        bill_on(day, LineItemRequest(product_id=product.id, quantity=Decimal("2"), unit_price=Decimal("10.00")))
        bill_on(day, LineItemRequest(product_id=other_product.id, quantity=Decimal("1"), unit_price=Decimal("5.00")))
        bill_on(date(2026, 3, 11), LineItemRequest(product_id=product.id, unit_price=Decimal("10.00")))

        report = report_service.daily_sales(day)

        assert report.total_bills == 2
        assert report.total_sales == Decimal("27.50")
        assert report.total_tax == Decimal("2.50")
        assert report.average_bill == Decimal("13.75")

    def test_average_rounds_half_up(self, db, scheme, report_service):
        day = date(2026, 3, 10)
        for price in ("0.01", "0.01", "0.03"):
            bill_on(day, LineItemRequest(product_name="Sticker", unit_price=Decimal(price)))

        report = report_service.daily_sales(day)

        # 0.05 / 3 = 0.01666...
        assert report.average_bill == Decimal("0.02")

    def test_top_products_by_sales(self, business, scheme, product, other_product, report_service):
        day = date(2026, 3, 10)
        bill_on(
            day,
            LineItemRequest(product_id=product.id, quantity=Decimal("1"), unit_price=Decimal("10.00")),
            LineItemRequest(product_id=other_product.id, quantity=Decimal("4"), unit_price=Decimal("5.00")),
        )
        bill_on(day, LineItemRequest(product_id=product.id, quantity=Decimal("2"), unit_price=Decimal("10.00")))

        top = report_service.daily_sales(day).top_products

        assert [p.product_name for p in top] == ["Notebook", "Pen"]
        assert top[0].total_quantity == Decimal("3")
        assert top[0].total_sales == Decimal("30.00")
        assert top[1].total_sales == Decimal("20.00")

    def test_top_products_limited_to_ten(self, db, scheme, report_service):
        day = date(2026, 3, 10)
        items = [
            LineItemRequest(product_name=f"Item {n:02d}", unit_price=Decimal(n))
            for n in range(1, 13)
        ]
        bill_on(day, *items)

        top = report_service.daily_sales(day).top_products

        assert len(top) == 10
        assert top[0].product_name == "Item 12"


class TestMonthlySales:
    """Per-day breakdown for a month."""

    def test_breakdown(self, business, scheme, product, report_service):
        item = LineItemRequest(product_id=product.id, unit_price=Decimal("10.00"))
        bill_on(date(2026, 3, 2), item)
        bill_on(date(2026, 3, 2), item)
        bill_on(date(2026, 3, 20), item)
        bill_on(date(2026, 4, 1), item)

        report = report_service.monthly_sales(2026, 3)

        assert report.total_bills == 3
        assert report.total_sales == Decimal("33.00")
        assert report.total_tax == Decimal("3.00")
        assert [(d.date, d.bills_count) for d in report.daily_breakdown] == [
            (date(2026, 3, 2), 2),
            (date(2026, 3, 20), 1),
        ]
        assert report.daily_breakdown[0].total_sales == Decimal("22.00")

    def test_december(self, business, scheme, product, report_service):
        bill_on(date(2026, 12, 31), LineItemRequest(product_id=product.id, unit_price=Decimal("10.00")))
        assert report_service.monthly_sales(2026, 12).total_bills == 1

    def test_empty_month(self, db, report_service):
        report = report_service.monthly_sales(2026, 2)
        assert report.total_bills == 0
        assert report.daily_breakdown == []

    def test_invalid_month(self, db, report_service):
        with pytest.raises(ValidationError):
            report_service.monthly_sales(2026, 13)


class TestDashboardStats:
    """Headline numbers."""

    def test_stats(self, business, scheme, product, other_product, customer, report_service):
        item = LineItemRequest(product_id=product.id, unit_price=Decimal("10.00"))
        bill_on(date(2026, 3, 15), item)
        bill_on(date(2026, 3, 1), item)
        bill_on(date(2026, 2, 28), item)
        Product.objects.filter(pk=other_product.pk).update(is_active=False)

        stats = report_service.dashboard_stats(today=date(2026, 3, 15))

        assert stats.today_bills == 1
        assert stats.today_sales == Decimal("11.00")
        assert stats.month_bills == 2
        assert stats.month_sales == Decimal("22.00")
        assert stats.total_products == 1
        assert stats.total_customers == 1
