"""Pytest configuration and fixtures."""
from decimal import Decimal

import pytest
from apps.billing.models import BillNumberScheme, BusinessSettings
from apps.customers.models import Customer
from apps.products.models import Product, ProductCategory


@pytest.fixture
def business(db):
    """The seeded business settings with a 10% tax rate."""
    settings = BusinessSettings.load()
    settings.tax_rate = Decimal("10.00")
    settings.save()
    return settings


@pytest.fixture
def scheme(db):
    """The seeded bill number scheme, switched to a never-resetting pattern."""
    scheme = BillNumberScheme.objects.order_by("id").first()
    scheme.pattern = "B-{NNNNN}"
    scheme.reset_period = BillNumberScheme.ResetPeriod.NEVER
    scheme.next_counter = 1
    scheme.save()
    return scheme


@pytest.fixture
def category(db):
    return ProductCategory.objects.create(name="Stationery")


@pytest.fixture
def product(db, category):
    """A catalog product priced 10.00 with 50 in stock."""
    return Product.objects.create(
        name="Notebook",
        category=category,
        price=Decimal("10.00"),
        stock_quantity=Decimal("50"),
        sku="NB-001",
    )


@pytest.fixture
def other_product(db, category):
    """A second catalog product priced 5.00 with 20 in stock."""
    return Product.objects.create(
        name="Pen",
        category=category,
        price=Decimal("5.00"),
        stock_quantity=Decimal("20"),
        sku="PEN-001",
    )


@pytest.fixture
def customer(db):
    return Customer.objects.create(
        name="Jane Doe",
        email="jane@example.com",
        phone="555-0100",
    )
