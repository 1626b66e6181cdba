"""URL configuration for the billing backend."""
from django.contrib import admin
from django.http import JsonResponse
from django.urls import path
from django.views.decorators.csrf import csrf_exempt

from apps.core.context import ContextGraphQLView
from .schema import schema


def health_check(request):
    return JsonResponse({"status": "ok"})


urlpatterns = [
    path("admin/", admin.site.urls),
    path("graphql", csrf_exempt(ContextGraphQLView.as_view(schema=schema))),
    path("api/health", health_check),
]
