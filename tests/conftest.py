"""
Django setup shared by the test suite.

PostgreSQL is used when DATABASE_URL is set (CI provides one; locally you can
use docker compose). Otherwise tests run against an in-memory SQLite database,
which exercises the application backend; trigger tests skip themselves.
"""

import os
from urllib.parse import urlparse

import pytest


def _database_settings() -> dict:
    database_url = os.environ.get("DATABASE_URL")
    if not database_url:
        return {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}

    u = urlparse(database_url)
    if u.scheme not in {"postgres", "postgresql"}:
        raise pytest.UsageError(f"Unsupported DATABASE_URL scheme: {u.scheme!r}")

    return {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": (u.path or "").lstrip("/"),
        "USER": u.username or "",
        "PASSWORD": u.password or "",
        "HOST": u.hostname or "localhost",
        "PORT": str(u.port or 5432),
        "CONN_MAX_AGE": 0,
    }


def pytest_configure(config) -> None:
    from django.conf import settings

    if settings.configured:
        return

    settings.configure(
        SECRET_KEY="test",
        INSTALLED_APPS=["sale_triggers"],
        DATABASES={"default": _database_settings()},
        TIME_ZONE="UTC",
        USE_TZ=True,
    )

    import django

    django.setup()


@pytest.fixture
def vendor() -> str:
    from django.db import connection

    return connection.vendor


@pytest.fixture
def schema():
    """Create the products / sales / commissions tables, drop them afterwards."""
    from sale_triggers import api

    api.drop_schema()
    api.create_schema()
    yield
    api.drop_schema()


@pytest.fixture
def laptop(schema):
    """The example product: id 1, price 1200, 10 in stock."""
    from sale_triggers import api

    return api.add_product("Laptop", "1200.00", 10)
