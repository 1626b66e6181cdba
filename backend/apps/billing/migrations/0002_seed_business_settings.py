"""Seed the default business settings and bill number scheme."""

from django.db import migrations


def seed_defaults(apps, schema_editor):
    BusinessSettings = apps.get_model("billing", "BusinessSettings")
    BillNumberScheme = apps.get_model("billing", "BillNumberScheme")

    if not BusinessSettings.objects.exists():
        BusinessSettings.objects.create(name="My Business", currency="USD", business_type="general")
    if not BillNumberScheme.objects.exists():
        BillNumberScheme.objects.create()


def noop(apps, schema_editor):
    pass


class Migration(migrations.Migration):

    dependencies = [
        ("billing", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_defaults, noop),
    ]
