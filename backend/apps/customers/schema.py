"""GraphQL schema for customers."""
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, List

import strawberry
import strawberry_django
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db.models import Q, Sum
from strawberry import auto
from strawberry.types import Info

from apps.core.context import Context
from apps.core.schema import PageInfo, paginate
from .models import Customer

if TYPE_CHECKING:
    from apps.billing.schema import BillType


@strawberry_django.type(Customer)
class CustomerType:
    id: auto
    name: auto
    email: auto
    phone: auto
    address: auto
    customer_type: auto
    created_at: auto

    @strawberry.field
    def bills(self) -> List[Annotated["BillType", strawberry.lazy("apps.billing.schema")]]:
        """Bills issued to this customer, newest first."""
        from apps.billing.models import Bill

        return list(Bill.objects.filter(customer=self).prefetch_related("items"))

    @strawberry.field
    def total_spent(self) -> Decimal:
        """Sum of the totals of all bills issued to this customer."""
        from apps.billing.models import Bill

        total = Bill.objects.filter(customer=self).aggregate(total=Sum("total_amount"))["total"]
        return total or Decimal("0.00")


@strawberry.type
class CustomerConnection:
    """Paginated customer list."""

    items: list[CustomerType]
    page_info: PageInfo


@strawberry.input
class CustomerInput:
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    customer_type: str = "regular"


@strawberry.input
class UpdateCustomerInput:
    id: strawberry.ID
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    customer_type: str | None = None


@strawberry.type
class CustomerResult:
    customer: CustomerType | None = None
    success: bool = False
    error: str | None = None


def _validate_customer_fields(email: str | None, customer_type: str | None) -> str | None:
    if email:
        try:
            validate_email(email)
        except DjangoValidationError:
            return "Invalid email address"
    if customer_type is not None and customer_type not in Customer.CustomerType.values:
        valid = ", ".join(Customer.CustomerType.values)
        return f"Invalid customer type. Must be one of: {valid}"
    return None


@strawberry.type
class CustomerQuery:
    @strawberry.field
    def customers(
        self,
        info: Info[Context, None],
        search: str | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> CustomerConnection:
        queryset = Customer.objects.all()
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(email__icontains=search) | Q(phone__icontains=search)
            )
        items, page_info = paginate(queryset.order_by("name"), page, page_size)
        return CustomerConnection(items=items, page_info=page_info)

    @strawberry.field
    def customer(self, info: Info[Context, None], id: strawberry.ID) -> CustomerType | None:
        return Customer.objects.filter(id=id).first()


@strawberry.type
class CustomerMutation:
    @strawberry.mutation
    def create_customer(self, info: Info[Context, None], input: CustomerInput) -> CustomerResult:
        if not input.name.strip():
            return CustomerResult(error="Customer name is required")
        err = _validate_customer_fields(input.email, input.customer_type)
        if err:
            return CustomerResult(error=err)

        customer = Customer.objects.create(
            name=input.name.strip(),
            email=input.email,
            phone=input.phone,
            address=input.address,
            customer_type=input.customer_type,
        )
        return CustomerResult(customer=customer, success=True)

    @strawberry.mutation
    def update_customer(
        self, info: Info[Context, None], input: UpdateCustomerInput
    ) -> CustomerResult:
        customer = Customer.objects.filter(id=input.id).first()
        if not customer:
            return CustomerResult(error="Customer not found")

        err = _validate_customer_fields(input.email, input.customer_type)
        if err:
            return CustomerResult(error=err)

        if input.name is not None:
            if not input.name.strip():
                return CustomerResult(error="Customer name is required")
            customer.name = input.name.strip()
        if input.email is not None:
            customer.email = input.email
        if input.phone is not None:
            customer.phone = input.phone
        if input.address is not None:
            customer.address = input.address
        if input.customer_type is not None:
            customer.customer_type = input.customer_type

        customer.save()
        return CustomerResult(customer=customer, success=True)
