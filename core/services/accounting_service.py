# =============================================================================
# core/services/accounting_service.py - Admin Accounting
# =============================================================================
# Income reporting over paid task costs, and the bank transfer review
# that turns an uploaded slip into a paid task.
# =============================================================================

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pandas as pd

from core.models.accounting import (
    AccountingSummary,
    Transaction,
    TransactionList,
    TransactionSort,
)
from lib.pricing import quantize_money
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class AccountingService:
    """Service for the admin accounting pages."""

    @staticmethod
    def summarize(rows: list[dict[str, Any]], now: datetime | None = None) -> AccountingSummary:
        """
        Summarize paid task_cost rows.

        Args:
            rows: Dicts with at least amount, payment_method and paid_at
            now: Reference time for the current month (UTC)

        Returns:
            AccountingSummary with totals rounded to 2 decimals
        """
        if not rows:
            return AccountingSummary()

        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        df = pd.DataFrame(rows)
        df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0)
        df["paid_at"] = pd.to_datetime(df["paid_at"], utc=True, errors="coerce")

        month_start = pd.Timestamp(year=now.year, month=now.month, day=1, tz="UTC")
        monthly = df.loc[df["paid_at"] >= month_start, "amount"].sum()
        by_method = df.groupby("payment_method")["amount"].sum()

        return AccountingSummary(
            total_income=quantize_money(Decimal(str(df["amount"].sum()))),
            monthly_income=quantize_money(Decimal(str(monthly))),
            transaction_count=len(df),
            by_payment_method={
                method: quantize_money(Decimal(str(total)))
                for method, total in by_method.items()
            },
        )

    @staticmethod
    def fetch_paid_costs() -> list[dict[str, Any]]:
        """All paid task_cost rows."""
        client = SupabaseClient.get_client()
        response = (
            client.table("task_cost")
            .select("id, task_id, amount, payment_method, paid_at")
            .eq("is_paid", True)
            .execute()
        )
        return response.data or []

    @staticmethod
    def get_summary(now: datetime | None = None) -> AccountingSummary:
        return AccountingService.summarize(AccountingService.fetch_paid_costs(), now=now)

    @staticmethod
    def list_transactions(
        page: int = 1,
        page_size: int = 10,
        sort: TransactionSort = TransactionSort.DATE_DESC,
    ) -> TransactionList:
        """Paid task costs, one page at a time."""
        client = SupabaseClient.get_client()
        start = (page - 1) * page_size
        end = start + page_size - 1

        response = (
            client.table("task_cost")
            .select("id, task_id, amount, payment_method, paid_at, tasks(title)", count="exact")
            .eq("is_paid", True)
            .order(sort.column, desc=sort.descending)
            .range(start, end)
            .execute()
        )

        transactions = []
        for row in response.data or []:
            task = row.get("tasks") or {}
            transactions.append(Transaction.model_validate({**row, "task_title": task.get("title")}))

        return TransactionList(
            transactions=transactions,
            total=response.count or 0,
            page=page,
            page_size=page_size,
        )

    @staticmethod
    def review_bank_transfer(transfer_id: int, task_cost_id: int, accepted: bool) -> None:
        """Accept or reject a bank transfer slip through the database function."""
        client = SupabaseClient.get_client()
        client.rpc("update_bank_transfer_payment", {
            "transfer_id_param": transfer_id,
            "task_cost_id_param": task_cost_id,
            "is_accepted_param": accepted,
        }).execute()

        logger.info(f"Bank transfer {transfer_id} {'accepted' if accepted else 'rejected'}")
