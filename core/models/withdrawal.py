# =============================================================================
# core/models/withdrawal.py - Withdrawal Schemas
# =============================================================================

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WithdrawalStatus(str, Enum):
    """Admin review state of a withdrawal request."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class WithdrawalCreate(BaseModel):
    """
    Body of POST /api/withdrawals.

    Example:
        {"amount": 2500, "withdrawalOptionId": 3}
    """
    model_config = ConfigDict(populate_by_name=True)

    amount: Decimal = Field(..., gt=0)
    withdrawal_option_id: int = Field(..., alias="withdrawalOptionId", gt=0)
