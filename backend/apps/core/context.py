"""GraphQL context for request handling."""
from dataclasses import dataclass

from django.http import HttpRequest
from strawberry.django.views import GraphQLView


@dataclass
class Context:
    """GraphQL request context."""

    request: HttpRequest


def get_context(request: HttpRequest) -> Context:
    """Build the resolver context for a request."""
    return Context(request=request)


class ContextGraphQLView(GraphQLView):
    """GraphQL view that hands resolvers a typed Context."""

    def get_context(self, request, response):
        return get_context(request)
