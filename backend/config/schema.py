"""Root GraphQL schema."""
import strawberry

from apps.billing.schema import BillingMutation, BillingQuery, ReportQuery
from apps.customers.schema import CustomerMutation, CustomerQuery
from apps.products.schema import ProductMutation, ProductQuery


@strawberry.type
class Query(
    CustomerQuery,
    ProductQuery,
    BillingQuery,
    ReportQuery,
):
    @strawberry.field
    def health(self) -> str:
        return "ok"


@strawberry.type
class Mutation(CustomerMutation, ProductMutation, BillingMutation):
    pass


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
)
