# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database reads.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for fetching:
# - Tasks, task details, targets and cost records
# - Buyer profiles and contact details
# - Account balances and admin checks
#
# Writes live in the services (core/services/), which own the business rules.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   task = SupabaseClient.fetch_task(42)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: tells HOW to fix, not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        details = SupabaseClient.fetch_task_details(42)
        cost = details.get("cost") if details else None
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS), so
        every service method checks ownership itself.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _fetch_one(
        cls,
        table: str,
        column: str,
        value: Any,
        code: str,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """Fetch a single row by column value, or None if no row matches."""
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq(column, value)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code=code,
                details={"table": table, column: value}
            )

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_task(cls, task_id: int) -> dict[str, Any] | None:
        """
        Fetch a row from the tasks table.

        Returns:
            Task dict (id, title, description, status, user_id, ...) or None
        """
        return cls._fetch_one("tasks", "id", task_id, code="FETCH_TASK_FAILED")

    @classmethod
    def fetch_task_details(cls, task_id: int) -> dict[str, Any] | None:
        """
        Fetch a task from the task_details view.

        The view joins the task with its cost record, exposed as a JSON
        "cost" column ({amount, payment_method, is_paid}).
        """
        return cls._fetch_one("task_details", "task_id", task_id, code="FETCH_TASK_DETAILS_FAILED")

    @classmethod
    def fetch_task_targets(cls, task_id: int) -> list[dict[str, Any]]:
        """
        Fetch the platform targets of a task.

        Returns:
            List of dicts with platform, views (string) and due_date
        """
        client = cls.get_client()

        try:
            response = (
                client.table("task_targets")
                .select("*")
                .eq("task_id", task_id)
                .execute()
            )
            targets = response.data or []
            logger.debug(f"Fetched {len(targets)} targets for task {task_id}")
            return targets

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch task targets: {e}",
                code="FETCH_TARGETS_FAILED",
                details={"task_id": task_id}
            )

    @classmethod
    def fetch_task_cost(cls, task_id: int) -> dict[str, Any] | None:
        """Fetch the task_cost row for a task, or None if not calculated yet."""
        return cls._fetch_one("task_cost", "task_id", task_id, code="FETCH_TASK_COST_FAILED")

    @classmethod
    def is_task_owner(cls, task_id: int, user_id: str | UUID) -> bool:
        """
        Check whether a user created a task.

        Returns False for tasks that don't exist, so callers can't search
        for task IDs they don't own.
        """
        task = cls._fetch_one(
            "tasks", "id", task_id, code="FETCH_TASK_FAILED", columns="id, user_id"
        )
        return bool(task) and str(task.get("user_id")) == normalize_uuid(user_id)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a user's profile row (name, role)."""
        return cls._fetch_one("profile", "id", normalize_uuid(user_id), code="FETCH_PROFILE_FAILED")

    @classmethod
    def fetch_contact_details(cls, user_id: str | UUID) -> dict[str, str]:
        """
        Fetch a user's contact details keyed by type.

        Returns:
            Dict like {"EMAIL": "a@b.lk", "MOBILE": "0771234567"}; the oldest
            row of each type wins
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("contact_details")
                .select("type, detail")
                .eq("user_id", user_id_str)
                .order("id")
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch contact details: {e}",
                code="FETCH_CONTACTS_FAILED",
                details={"user_id": user_id_str}
            )

        contacts: dict[str, str] = {}
        for row in response.data or []:
            if row.get("detail"):
                contacts.setdefault(row["type"], row["detail"])
        return contacts

    @classmethod
    def is_admin(cls, user_id: str | UUID) -> bool:
        """Check admin rights through the is_an_admin database function."""
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = client.rpc("is_an_admin", {"user_id_input": user_id_str}).execute()
            return bool(response.data)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to check admin status: {e}",
                code="ADMIN_CHECK_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def fetch_account_balance(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """Fetch the influencer's account_balance row."""
        return cls._fetch_one(
            "account_balance", "user_id", normalize_uuid(user_id), code="FETCH_BALANCE_FAILED"
        )
