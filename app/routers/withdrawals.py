# =============================================================================
# app/routers/withdrawals.py - Withdrawal Endpoints
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.withdrawal import WithdrawalCreate
from core.services.withdrawal_service import WithdrawalService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201)
async def create_withdrawal(
    request: WithdrawalCreate,
    user: AuthUser = Depends(get_current_user),
):
    """Request a payout of earned balance to a saved bank account."""
    withdrawal = WithdrawalService.create_withdrawal(
        user.id, request.amount, request.withdrawal_option_id
    )
    return {"data": withdrawal}


@router.get("")
async def list_withdrawals(user: AuthUser = Depends(get_current_user)):
    """The caller's withdrawal requests, newest first."""
    return {"data": WithdrawalService.list_withdrawals(user.id)}
