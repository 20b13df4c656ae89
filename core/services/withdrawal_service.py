# =============================================================================
# core/services/withdrawal_service.py - Influencer Withdrawals
# =============================================================================

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import (
    BrandSyncException,
    InsufficientBalanceError,
    WithdrawalBelowMinimumError,
)
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

# Related rows returned with every withdrawal request
WITHDRAWAL_SELECT = (
    "*, withdrawal_options(bank_name, account_name, account_number, branch_name), "
    "withdrawal_request_status(status, created_at)"
)


class WithdrawalService:
    """Service for withdrawal requests."""

    @staticmethod
    def create_withdrawal(
        user_id: UUID | str,
        amount: Decimal,
        withdrawal_option_id: int,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Request a payout and debit the balance.

        The request row is written first; if the debit fails it is deleted
        again so the balance and requests never disagree.

        Raises:
            WithdrawalBelowMinimumError: amount < MIN_WITHDRAWAL_AMOUNT
            InsufficientBalanceError: amount > balance
        """
        amount = Decimal(str(amount))
        minimum = settings.MIN_WITHDRAWAL_AMOUNT
        if amount < minimum:
            raise WithdrawalBelowMinimumError(float(amount), float(minimum))

        account = SupabaseClient.fetch_account_balance(user_id)
        balance = Decimal(str(account.get("balance") or 0)) if account else Decimal("0")
        if amount > balance:
            raise InsufficientBalanceError(float(amount), float(balance))

        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        response = (
            client.table("withdrawal_requests")
            .insert({
                "amount": float(amount),
                "withdrawal_option_id": withdrawal_option_id,
                "user_id": user_id_str,
            })
            .execute()
        )
        withdrawal = response.data[0]

        try:
            client.table("account_balance").update({
                "balance": float(balance - amount),
                "last_withdrawal": (now or datetime.now(timezone.utc)).isoformat(),
            }).eq("user_id", user_id_str).execute()
        except Exception as e:
            logger.error(f"Failed to update balance for user {user_id_str}: {e}")
            client.table("withdrawal_requests").delete().eq("id", withdrawal["id"]).execute()
            raise BrandSyncException(
                message="Failed to process withdrawal",
                code="WITHDRAWAL_FAILED",
                status_code=500,
                suggestion="Try again later or contact support if the issue persists",
            )

        logger.info(f"Created withdrawal {withdrawal['id']} of LKR {amount} for user {user_id_str}")
        return withdrawal

    @staticmethod
    def list_withdrawals(user_id: UUID | str) -> list[dict[str, Any]]:
        """The user's withdrawal requests, newest first."""
        client = SupabaseClient.get_client()
        response = (
            client.table("withdrawal_requests")
            .select(WITHDRAWAL_SELECT)
            .eq("user_id", normalize_uuid(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []
