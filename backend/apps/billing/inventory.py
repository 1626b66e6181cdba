"""Inventory ledger: stock consumption and restocking for catalog products."""
import logging
from decimal import Decimal

from django.conf import settings
from django.db.models import F

from apps.billing.exceptions import InsufficientStock, ProductNotFound, ValidationError
from apps.billing.money import to_decimal
from apps.products.models import Product

logger = logging.getLogger(__name__)


class InventoryLedger:
    """Applies stock movements to products.

    Callers are expected to run these methods inside their own
    ``transaction.atomic()`` block; the ledger never commits by itself.
    """

    def __init__(self, allow_negative_stock: bool | None = None):
        if allow_negative_stock is None:
            allow_negative_stock = settings.BILLING_ALLOW_NEGATIVE_STOCK
        self.allow_negative_stock = allow_negative_stock

    def apply_consumption(self, product_id, quantity) -> None:
        """Decrement a product's stock by ``quantity``.

        Items without a product reference (custom entries) are ignored.
        """
        if product_id is None:
            return

        quantity = self._positive_quantity(quantity)

        # Lock the row so concurrent bills serialise their decrements
        product = (
            Product.objects.select_for_update()
            .only("id", "stock_quantity")
            .filter(pk=product_id)
            .first()
        )
        if product is None:
            raise ProductNotFound(product_id)

        if not self.allow_negative_stock and product.stock_quantity < quantity:
            raise InsufficientStock(product_id, product.stock_quantity, quantity)

        Product.objects.filter(pk=product_id).update(
            stock_quantity=F("stock_quantity") - quantity
        )
        logger.debug("Consumed %s of product %s", quantity, product_id)

    def restock(self, product_id, quantity) -> None:
        """Increment a product's stock by ``quantity``."""
        quantity = self._positive_quantity(quantity)

        updated = Product.objects.filter(pk=product_id).update(
            stock_quantity=F("stock_quantity") + quantity
        )
        if not updated:
            raise ProductNotFound(product_id)
        logger.info("Restocked product %s with %s", product_id, quantity)

    @staticmethod
    def _positive_quantity(quantity) -> Decimal:
        quantity = to_decimal(quantity)
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")
        return quantity
