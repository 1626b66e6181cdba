"""Customer models."""
from django.db import models

from apps.core.models import TimestampedModel


class Customer(TimestampedModel):
    """A customer that bills can be issued to."""

    class CustomerType(models.TextChoices):
        REGULAR = "regular", "Regular"
        WHOLESALE = "wholesale", "Wholesale"
        VIP = "vip", "VIP"

    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=50, blank=True)
    address = models.TextField(blank=True)
    customer_type = models.CharField(
        max_length=20,
        choices=CustomerType.choices,
        default=CustomerType.REGULAR,
    )

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
