"""GraphQL schema for products and categories."""
import logging
from decimal import Decimal

import strawberry
import strawberry_django
from django.db import IntegrityError, transaction
from django.db.models import Q
from strawberry import auto
from strawberry.types import Info

from apps.billing.exceptions import BillingError
from apps.billing.inventory import InventoryLedger
from apps.core.context import Context
from apps.core.schema import PageInfo, paginate
from .models import Product, ProductCategory

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 20


@strawberry_django.type(ProductCategory)
class ProductCategoryType:
    id: auto
    name: auto
    description: auto


@strawberry_django.type(Product)
class ProductType:
    id: auto
    name: auto
    description: auto
    price: auto
    cost_price: auto
    stock_quantity: auto
    sku: auto
    barcode: auto
    unit: auto
    is_active: auto
    created_at: auto
    updated_at: auto
    category: ProductCategoryType | None

    @strawberry.field
    def category_name(self) -> str | None:
        return self.category.name if self.category_id else None


@strawberry.type
class ProductConnection:
    """Paginated product list."""

    items: list[ProductType]
    page_info: PageInfo


@strawberry.input
class CategoryInput:
    name: str
    description: str = ""


@strawberry.input
class ProductInput:
    name: str
    price: Decimal
    description: str = ""
    category_id: strawberry.ID | None = None
    cost_price: Decimal = Decimal("0")
    stock_quantity: Decimal = Decimal("0")
    sku: str | None = None
    barcode: str = ""
    unit: str = "pcs"


@strawberry.input
class UpdateProductInput:
    id: strawberry.ID
    name: str | None = None
    price: Decimal | None = None
    description: str | None = None
    category_id: strawberry.ID | None = None
    cost_price: Decimal | None = None
    stock_quantity: Decimal | None = None
    sku: str | None = None
    barcode: str | None = None
    unit: str | None = None
    is_active: bool | None = None


@strawberry.input
class RestockInput:
    id: strawberry.ID
    quantity: Decimal


@strawberry.type
class CategoryResult:
    category: ProductCategoryType | None = None
    success: bool = False
    error: str | None = None


@strawberry.type
class ProductResult:
    product: ProductType | None = None
    success: bool = False
    error: str | None = None


def _validate_prices(price: Decimal | None, cost_price: Decimal | None) -> str | None:
    if price is not None and price < 0:
        return "Price cannot be negative"
    if cost_price is not None and cost_price < 0:
        return "Cost price cannot be negative"
    return None


@strawberry.type
class ProductQuery:
    @strawberry.field
    def categories(self, info: Info[Context, None]) -> list[ProductCategoryType]:
        return list(ProductCategory.objects.order_by("name"))

    @strawberry.field
    def products(
        self,
        info: Info[Context, None],
        search: str | None = None,
        is_active: bool | None = True,
        page: int = 1,
        page_size: int = 50,
    ) -> ProductConnection:
        queryset = Product.objects.select_related("category")

        if is_active is not None:
            queryset = queryset.filter(is_active=is_active)

        if search:
            queryset = queryset.filter(name__icontains=search)

        items, page_info = paginate(queryset.order_by("name"), page, page_size)
        return ProductConnection(items=items, page_info=page_info)

    @strawberry.field
    def search_products(self, info: Info[Context, None], q: str) -> list[ProductType]:
        """Find active products by name, description, SKU or barcode."""
        queryset = Product.objects.select_related("category").filter(is_active=True)
        if q:
            queryset = queryset.filter(
                Q(name__icontains=q)
                | Q(description__icontains=q)
                | Q(sku__icontains=q)
                | Q(barcode__icontains=q)
            )
        return list(queryset.order_by("name")[:SEARCH_LIMIT])

    @strawberry.field
    def product(self, info: Info[Context, None], id: strawberry.ID) -> ProductType | None:
        return Product.objects.select_related("category").filter(id=id).first()


@strawberry.type
class ProductMutation:
    @strawberry.mutation
    def create_category(self, info: Info[Context, None], input: CategoryInput) -> CategoryResult:
        name = input.name.strip()
        if not name:
            return CategoryResult(error="Category name is required")
        if ProductCategory.objects.filter(name__iexact=name).exists():
            return CategoryResult(error=f"Category '{name}' already exists")

        category = ProductCategory.objects.create(name=name, description=input.description)
        return CategoryResult(category=category, success=True)

    @strawberry.mutation
    def create_product(self, info: Info[Context, None], input: ProductInput) -> ProductResult:
        if not input.name.strip():
            return ProductResult(error="Product name is required")
        err = _validate_prices(input.price, input.cost_price)
        if err:
            return ProductResult(error=err)

        category = None
        if input.category_id:
            category = ProductCategory.objects.filter(id=input.category_id).first()
            if not category:
                return ProductResult(error="Category not found")

        try:
            with transaction.atomic():
                product = Product.objects.create(
                    name=input.name.strip(),
                    description=input.description,
                    category=category,
                    price=input.price,
                    cost_price=input.cost_price,
                    stock_quantity=input.stock_quantity,
                    sku=input.sku or None,
                    barcode=input.barcode,
                    unit=input.unit or "pcs",
                )
        except IntegrityError:
            return ProductResult(error=f"SKU '{input.sku}' is already in use")
        return ProductResult(product=product, success=True)

    @strawberry.mutation
    def update_product(self, info: Info[Context, None], input: UpdateProductInput) -> ProductResult:
        product = Product.objects.filter(id=input.id).first()
        if not product:
            return ProductResult(error="Product not found")

        err = _validate_prices(input.price, input.cost_price)
        if err:
            return ProductResult(error=err)

        if input.category_id is not None:
            category = ProductCategory.objects.filter(id=input.category_id).first()
            if not category:
                return ProductResult(error="Category not found")
            product.category = category

        if input.name is not None:
            if not input.name.strip():
                return ProductResult(error="Product name is required")
            product.name = input.name.strip()
        if input.price is not None:
            product.price = input.price
        if input.description is not None:
            product.description = input.description
        if input.cost_price is not None:
            product.cost_price = input.cost_price
        if input.stock_quantity is not None:
            product.stock_quantity = input.stock_quantity
        if input.sku is not None:
            product.sku = input.sku or None
        if input.barcode is not None:
            product.barcode = input.barcode
        if input.unit is not None:
            product.unit = input.unit or "pcs"
        if input.is_active is not None:
            product.is_active = input.is_active

        try:
            with transaction.atomic():
                product.save()
        except IntegrityError:
            return ProductResult(error=f"SKU '{input.sku}' is already in use")
        return ProductResult(product=product, success=True)

    @strawberry.mutation
    def restock_product(self, info: Info[Context, None], input: RestockInput) -> ProductResult:
        """Add received goods to a product's stock."""
        try:
            with transaction.atomic():
                InventoryLedger().restock(input.id, input.quantity)
        except BillingError as e:
            logger.info("Restock rejected for product %s: %s", input.id, e.message)
            return ProductResult(error=e.message)

        product = Product.objects.select_related("category").get(id=input.id)
        return ProductResult(product=product, success=True)
