# =============================================================================
# app/routers/admin.py - Admin Endpoints
# =============================================================================
# Accounting reports and bank transfer review. Every route requires an
# admin, checked through the is_an_admin database function.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, require_admin
from core.models.accounting import (
    AccountingSummary,
    BankTransferReviewRequest,
    TransactionList,
    TransactionSort,
)
from core.services.accounting_service import AccountingService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/accounting/summary", response_model=AccountingSummary)
async def accounting_summary(admin: AuthUser = Depends(require_admin)):
    """Total income, this month's income and totals per payment method."""
    return AccountingService.get_summary()


@router.get("/accounting/transactions", response_model=TransactionList)
async def list_transactions(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 10,
    sort: Annotated[TransactionSort, Query(description="Sort order")] = TransactionSort.DATE_DESC,
    admin: AuthUser = Depends(require_admin),
):
    """Paid transactions, paginated."""
    return AccountingService.list_transactions(page=page, page_size=page_size, sort=sort)


@router.post("/payments/{transfer_id}/review")
async def review_bank_transfer(
    transfer_id: Annotated[int, Path(gt=0, description="Bank transfer slip ID")],
    request: BankTransferReviewRequest,
    admin: AuthUser = Depends(require_admin),
):
    """Accept or reject a bank transfer. Accepting marks the task paid."""
    AccountingService.review_bank_transfer(transfer_id, request.task_cost_id, request.accepted)
    logger.info(f"Admin {admin.id} reviewed bank transfer {transfer_id}")
    return {"success": True}
