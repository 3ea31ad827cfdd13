"""
Tests for payments app.

This package contains test modules for:
- test_models.py: PlatformSetting, ConnectedAccount, WebhookEvent model tests
- test_money.py: Cent arithmetic tests
- test_apps.py: Startup key validation and handler registration
- test_views.py: API endpoint tests

Adapter, service and webhook tests live beside their packages.

Usage:
    pytest payments/tests/
    pytest payments/tests/test_views.py
"""
