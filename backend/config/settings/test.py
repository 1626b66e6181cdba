"""Test settings."""
import os

os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret-key-not-for-production")

from .base import *  # noqa: F401, F403, E402

DEBUG = False

# Use in-memory SQLite for faster tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Faster password hashing in tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Disable audit log in tests (unless explicitly needed)
AUDITLOG_INCLUDE_ALL_MODELS = False

# Tests set billing policies per service instance
BILLING_ALLOW_NEGATIVE_STOCK = True
BILLING_ALLOW_DISCOUNT_OVER_SUBTOTAL = True
BILLING_NUMBER_MAX_ATTEMPTS = 3
TIME_ZONE = "UTC"
