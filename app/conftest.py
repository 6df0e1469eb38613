"""
Project-wide pytest configuration.

This module configures pytest-django and provides fixtures shared by every
app. App-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

import django
import pytest

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()

    from django.conf import settings

    from config.celery import app as celery_app

    # Disable throttling during tests to prevent rate limit failures
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # Tests talk plain HTTP to the test client; DEBUG=False would redirect to HTTPS
    settings.SECURE_SSL_REDIRECT = False

    # Use fast password hasher for tests (PBKDF2 is too slow with 870K iterations)
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]

    # No Redis in the test run: local memory cache and in-process channel layer
    settings.CACHES = {
        "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
    }
    settings.SESSION_ENGINE = "django.contrib.sessions.backends.db"
    settings.CHANNEL_LAYERS = {
        "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"},
    }

    # Run .delay() inline so views that queue work can be tested end to end
    # (Celery reads the CELERY_-prefixed Django setting before its own conf key)
    settings.CELERY_TASK_ALWAYS_EAGER = True
    celery_app.conf.task_always_eager = True
    celery_app.conf.task_eager_propagates = True


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full user journey workflows)
    - test_views.py, test_services.py, test_consumers.py, etc. → integration
    - test_models.py, test_serializers.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_handlers.py",
        "test_consumers.py",
        "test_middleware.py",
        "test_registry.py",
        "test_message_log.py",
        "test_delivery.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_managers.py",
        "test_helpers.py",
        "test_exception_handler.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django where most tests hit DB)
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def recording_delivery(settings):
    """
    Swap the Delivery Channel for an in-memory recorder.

    Returns the RecordingDeliveryChannel instance the services publish to.
    Publishing happens on commit, so combine with
    django_capture_on_commit_callbacks(execute=True) in non-transactional tests.
    """
    from core.delivery import get_delivery_channel

    settings.DELIVERY_CHANNEL_BACKEND = "core.tests.doubles.RecordingDeliveryChannel"
    channel = get_delivery_channel()
    yield channel
    channel.clear()


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def customer(db):
    """An active customer."""
    from authentication.tests.factories import CustomerFactory

    return CustomerFactory(display_name="Casey")


@pytest.fixture
def other_customer(db):
    from authentication.tests.factories import CustomerFactory

    return CustomerFactory(display_name="Robin")


@pytest.fixture
def admin(db):
    """An active support admin."""
    from authentication.tests.factories import AdminFactory

    return AdminFactory(display_name="Dana")


@pytest.fixture
def other_admin(db):
    from authentication.tests.factories import AdminFactory

    return AdminFactory(display_name="Jordan")


# =============================================================================
# API Client Fixtures
# =============================================================================


def client_for(user):
    """APIClient authenticated as ``user`` with a JWT access token."""
    from rest_framework.test import APIClient
    from rest_framework_simplejwt.tokens import RefreshToken

    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def customer_client(customer):
    return client_for(customer)


@pytest.fixture
def admin_client(admin):
    return client_for(admin)


@pytest.fixture
def make_client():
    """Factory fixture: make_client(user) -> authenticated APIClient."""
    return client_for
