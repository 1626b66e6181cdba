"""Seed the default product categories."""

from django.db import migrations

DEFAULT_CATEGORIES = ["General", "Food & Beverages", "Clothing", "Electronics", "Services"]


def seed_default_categories(apps, schema_editor):
    ProductCategory = apps.get_model("products", "ProductCategory")
    for name in DEFAULT_CATEGORIES:
        ProductCategory.objects.get_or_create(name=name)


def remove_default_categories(apps, schema_editor):
    ProductCategory = apps.get_model("products", "ProductCategory")
    ProductCategory.objects.filter(name__in=DEFAULT_CATEGORIES, products__isnull=True).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_default_categories, remove_default_categories),
    ]
