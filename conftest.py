import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from accounts.models import AuthorAllowlist

AUTHOR_EMAIL = "autorin@example.com"


@pytest.fixture(autouse=True)
def site_settings(settings):
    """Feste Werte statt .env, damit Tests überall gleich laufen."""
    settings.SITE_URL = "https://levitenleser.test"
    settings.SITE_NAME = "Der Levitenleser"
    settings.STORIES_HAS_SLUG_COLUMN = True
    settings.NEWSLETTER_ENABLED = True
    settings.NEWSLETTER_FROM_EMAIL = "Levitenleser <news@levitenleser.test>"
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    return settings


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def author(db):
    AuthorAllowlist.objects.create(email=AUTHOR_EMAIL, name="Autorin")
    return get_user_model().objects.create_user(
        username=AUTHOR_EMAIL, email=AUTHOR_EMAIL, password="Lesezeichen-2024", first_name="Autorin",
    )


@pytest.fixture
def author_client(api_client, author):
    api_client.force_authenticate(user=author)
    return api_client
