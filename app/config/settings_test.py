"""
Settings for the pytest run.

Seeds the environment with throwaway values before loading the main
settings module, then swaps in an in-memory SQLite database. The Stripe
key below passes format validation but is never sent anywhere: every test
injects a mocked StripeClient.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DEBUG", "True")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_" + "0" * 32)
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
os.environ.setdefault("ENV_FILE", "/nonexistent/.env.test")

from config.settings import *  # noqa: E402,F401,F403

# Fast password hasher for tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Disable throttling during tests to prevent rate limit failures
REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []  # noqa: F405
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}  # noqa: F405

STORAGES["staticfiles"] = {  # noqa: F405
    "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
}

# Let app loggers reach the root logger so pytest's caplog sees them
LOGGING["loggers"]["payments"] = {"level": "DEBUG", "propagate": True}  # noqa: F405
