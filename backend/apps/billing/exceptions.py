"""Errors raised by the billing engine.

Every error carries a machine-readable ``code`` so the API layer can report
``(code, message)`` pairs without inspecting exception types.
"""


class BillingError(Exception):
    """Base class for billing failures."""

    code = "billing_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BillingError):
    """The proposed bill is malformed. Never retried."""

    code = "validation_error"


class ProductNotFound(BillingError):
    """A line item references a product that does not exist."""

    code = "product_not_found"

    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class InsufficientStock(BillingError):
    """Consumption would take a product below zero while negative stock is disallowed."""

    code = "insufficient_stock"

    def __init__(self, product_id, available, requested):
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"{available} available, {requested} requested"
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class DuplicateBillNumber(BillingError):
    """The minted bill number is already taken. Retried by the engine."""

    code = "duplicate_bill_number"

    def __init__(self, bill_number: str):
        super().__init__(f"Bill number {bill_number} already exists")
        self.bill_number = bill_number


class PersistenceError(BillingError):
    """The bill could not be stored. Nothing was written."""

    code = "persistence_error"
