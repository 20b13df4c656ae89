# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a fake Supabase client whose tables record every call
# - Provides common row fixtures for testing
# =============================================================================

import os
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("PAYHERE_MERCHANT_ID", "M001")
os.environ.setdefault("PAYHERE_MERCHANT_SECRET", "secret")
os.environ.setdefault("PAYHERE_URL", "https://sandbox.payhere.lk")
os.environ.setdefault("APP_BASE_URL", "https://brandsync.test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from lib.supabase_client import SupabaseClient

# Query builder methods that return the builder itself
CHAIN_METHODS = (
    "select", "insert", "update", "upsert", "delete",
    "eq", "gte", "lt", "order", "limit", "range", "single",
)

USER_ID = "550e8400-e29b-41d4-a716-446655440000"
OTHER_USER_ID = "6ba7b810-9dad-11d1-80b4-00c04fd430c8"


def make_table(data=None, count=None) -> MagicMock:
    """A fake PostgREST query builder whose execute() returns data."""
    table = MagicMock()
    for method in CHAIN_METHODS:
        getattr(table, method).return_value = table
    table.execute.return_value = MagicMock(data=data if data is not None else [], count=count)
    return table


class FakeSupabase:
    """
    Stand-in for the Supabase client.

    Each table name gets its own fake builder, created on first use:

        fake.set("tasks", [{"id": 42}])
        ...
        fake.tables["tasks"].insert.assert_called_once()
    """

    def __init__(self):
        self.tables: dict[str, MagicMock] = {}
        self.client = MagicMock()
        self.client.table.side_effect = self.table

    def table(self, name: str) -> MagicMock:
        if name not in self.tables:
            self.tables[name] = make_table()
        return self.tables[name]

    def set(self, name: str, data=None, count=None) -> MagicMock:
        self.tables[name] = make_table(data, count)
        return self.tables[name]

    def set_sequence(self, name: str, *results) -> MagicMock:
        """Successive execute() calls return each result in turn (data lists or exceptions)."""
        table = self.table(name)
        table.execute.side_effect = [
            r if isinstance(r, Exception) else MagicMock(data=r, count=None)
            for r in results
        ]
        return table


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_supabase():
    """Patch SupabaseClient.get_client with a FakeSupabase."""
    fake = FakeSupabase()
    with patch.object(SupabaseClient, "get_client", return_value=fake.client):
        yield fake


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def other_user_id() -> str:
    return OTHER_USER_ID


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_task_details():
    """A task_details row for an unpaid DRAFT task."""
    return {
        "task_id": 42,
        "title": "Summer launch",
        "description": "Promote our new drink",
        "status": "DRAFT",
        "user_id": USER_ID,
        "cost": {"amount": 29700, "payment_method": "PAYMENT_GATEWAY", "is_paid": False},
    }


@pytest.fixture
def sample_targets():
    """task_targets rows: YouTube 10K due in a week, TikTok 5K flexible."""
    return [
        {"task_id": 42, "platform": "YOUTUBE", "views": "10000", "due_date": "2024-06-22T12:00:00+00:00"},
        {"task_id": 42, "platform": "TIKTOK", "views": "5000", "due_date": None},
    ]


@pytest.fixture
def sample_contacts():
    return {"EMAIL": "nimal@example.lk", "MOBILE": "0771234567"}


@pytest.fixture
def sample_notification():
    """A valid PayHere success notification for task 42, LKR 29,700."""
    return {
        "merchant_id": "M001",
        "order_id": "42",
        "payhere_amount": "29700.00",
        "payhere_currency": "LKR",
        "status_code": "2",
        "md5sig": "1B1C976FD3BA3D19D327B5F9AB52BD8E",
        "payment_id": "320025071812",
        "method": "VISA",
        "card_holder_name": "N Perera",
        "card_no": "************1292",
        "card_expiry": "12/27",
    }
