"""
Pytest configuration for django-restful tests.
"""

import os
import sys

import pytest

# Add the package root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


def pytest_configure():
    """Configure Django settings before tests run."""
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            SECRET_KEY="test-secret-key",
            DEBUG=False,
            INSTALLED_APPS=[
                "django.contrib.contenttypes",
                "django.contrib.auth",
                "django_restful",
                "django_restful.tests.testapp",
            ],
            DATABASES={
                "default": {
                    "ENGINE": "django.db.backends.sqlite3",
                    "NAME": ":memory:",
                }
            },
            DEFAULT_AUTO_FIELD="django.db.models.BigAutoField",
            USE_TZ=True,
            DJANGO_RESTFUL={
                "PAGE_SIZE": 15,
            },
        )

    import django

    django.setup()


@pytest.fixture(scope="session")
def django_tables():
    """Create tables for the test models (Ghost is left without one)."""
    from django.db import connection

    from django_restful.tests.testapp.models import Author, Book, Publisher

    with connection.schema_editor() as editor:
        for model in (Publisher, Author, Book):
            editor.create_model(model)
    yield


@pytest.fixture
def db(django_tables):
    """Run the test inside a transaction that is rolled back afterwards."""
    from django.db import transaction

    with transaction.atomic():
        yield
        transaction.set_rollback(True)


@pytest.fixture
def settings_override():
    """Override DJANGO_RESTFUL settings for one test."""
    from django.conf import settings

    from django_restful.conf import restful_settings

    original = getattr(settings, "DJANGO_RESTFUL", {})

    def _override(**values):
        settings.DJANGO_RESTFUL = {**original, **values}
        restful_settings.reload()

    yield _override

    settings.DJANGO_RESTFUL = original
    restful_settings.reload()


@pytest.fixture
def books(db):
    """Five books across two authors."""
    from django_restful.tests.testapp.models import Author, Book, Publisher

    penguin = Publisher.objects.create(name="Penguin")
    ann = Author.objects.create(name="Ann", publisher=penguin)
    bob = Author.objects.create(name="Bob")

    return [
        Book.objects.create(title="Alpha", status="open", price=5, author=ann),
        Book.objects.create(title="Bravo", status="open", price=10, author=ann),
        Book.objects.create(title="Charlie", status="closed", price=25, author=bob),
        Book.objects.create(title="Delta", status="open", price=50, author=bob),
        Book.objects.create(title="Echo", status="draft", price=75, author=None),
    ]
