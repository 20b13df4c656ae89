# =============================================================================
# app/routers/payments.py - Payment Endpoints
# =============================================================================
# PayHere checkout, its server callback and browser redirects, plus the
# manual bank transfer path.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Header, Query, Request, UploadFile
from fastapi.responses import RedirectResponse

from app.auth import AuthUser, get_current_user
from app.exceptions import InvalidNotificationError
from core.models.payment import (
    ORDER_ID_PATTERN,
    BankTransferResponse,
    PayHereStatus,
    PaymentInitializeRequest,
    PaymentRequest,
    SetPaymentMethodRequest,
)
from core.services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter()

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _queue_payment_confirmation(task_id: int) -> None:
    """Queue the confirmation email; the payment is recorded either way."""
    try:
        from workers.tasks import notify_payment_confirmed

        notify_payment_confirmed.delay(task_id)
    except Exception as e:
        logger.exception(f"Failed to queue payment confirmation for task {task_id}: {e}")


@router.post("/initialize", response_model=PaymentRequest)
async def initialize_payment(
    request: PaymentInitializeRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Build the PayHere checkout form for a task.

    The browser posts the returned fields to checkout_url. Returns 400 for
    an invalid task ID, 401 without a valid token, 403 if the caller
    doesn't own the task.
    """
    return PaymentService.initialize_payment(request.task_id, user.id)


@router.post("/set-method")
async def set_payment_method(
    request: SetPaymentMethodRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Choose between the payment gateway and a bank transfer."""
    PaymentService.set_payment_method(request.task_id, user.id, request.payment_method)
    return {"success": True}


@router.post("/notify")
async def payment_notify(
    request: Request,
    user_agent: Annotated[str | None, Header()] = None,
):
    """
    Receive PayHere's server-to-server payment notification.

    The body is form encoded. A verified status 2 marks the task paid and
    activates it.
    """
    content_type = request.headers.get("content-type", "")
    if not any(expected in content_type for expected in FORM_CONTENT_TYPES):
        raise InvalidNotificationError(
            "Invalid content type. Expected multipart/form-data or application/x-www-form-urlencoded"
        )

    form = await request.form()
    notification = PaymentService.handle_notification(dict(form), user_agent)

    if notification.status_code == PayHereStatus.SUCCESS:
        _queue_payment_confirmation(notification.task_id)

    return {"status": "ok"}


@router.get("/success")
async def payment_success(
    order_id: Annotated[str | None, Query()] = None,
):
    """Where PayHere sends the browser after a completed checkout."""
    if order_id and ORDER_ID_PATTERN.fullmatch(order_id):
        return RedirectResponse(f"/dashboard/task/{order_id}", status_code=303)
    return RedirectResponse("/dashboard/buyer", status_code=303)


@router.get("/cancel")
async def payment_cancel(
    order_id: Annotated[str | None, Query()] = None,
):
    """Where PayHere sends the browser after a cancelled checkout."""
    if order_id and ORDER_ID_PATTERN.fullmatch(order_id):
        return RedirectResponse(f"/dashboard/task/{order_id}?payment=cancelled", status_code=303)
    return RedirectResponse("/dashboard/buyer?payment=cancelled", status_code=303)


@router.post("/bank-transfer", response_model=BankTransferResponse, status_code=201)
async def upload_bank_transfer(
    task_id: Annotated[int, Form(alias="taskId", gt=0)],
    file: Annotated[UploadFile, File(description="Bank transfer slip (image or PDF)")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload a bank transfer slip for an unpaid task.

    An admin reviews the slip before the task is marked paid.
    """
    content = await file.read()
    return PaymentService.register_bank_transfer(
        task_id, user.id, content, file.filename, file.content_type
    )
