# =============================================================================
# core/services/payment_service.py - Payment Business Logic
# =============================================================================
# Handles the PayHere checkout flow and bank transfers:
# - initialize_payment: Build the signed checkout form for a task
# - handle_notification: Verify and apply PayHere's server callback
# - set_payment_method / register_bank_transfer: Manual payment path
#
# Every check runs before anything is computed or written, so a rejected
# request leaves no trace in the database.
# =============================================================================

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping
from uuid import UUID

from pydantic import ValidationError

from app.config import Settings, settings
from app.exceptions import (
    AlreadyPaidError,
    BrandSyncException,
    InvalidNotificationError,
    InvalidSignatureError,
    InvalidTaskStatusError,
    MissingContactInfoError,
    PaymentConfigurationError,
    TaskCostNotFoundError,
    TaskNotFoundError,
)
from core.models.payment import (
    BankTransferResponse,
    PayHereNotification,
    PayHereStatus,
    PaymentRequest,
)
from core.models.task import PaymentMethod, TaskStatus
from core.services.storage_service import BANK_SLIP_BUCKET, StorageService
from core.services.task_service import TaskService
from lib.payhere import CURRENCY_LKR, format_amount, generate_hash, verify_notification_hash
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, split_full_name

logger = logging.getLogger(__name__)

PAYHERE_USER_AGENT_PREFIX = "PayHere-HttpClient"

# Billing address sent with every checkout
DEFAULT_ADDRESS = "Sri Lanka"
DEFAULT_CITY = "Colombo"
DEFAULT_COUNTRY = "Sri Lanka"


@dataclass(frozen=True)
class PaymentGatewayConfig:
    """PayHere credentials and the URLs derived from them."""
    merchant_id: str
    merchant_secret: str
    notify_url: str
    return_url: str
    cancel_url: str
    checkout_url: str
    authorize_url: str

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "PaymentGatewayConfig":
        """
        Read gateway settings.

        Raises:
            PaymentConfigurationError: Listing every missing setting
        """
        config = config or settings
        required = {
            "PAYHERE_MERCHANT_ID": config.PAYHERE_MERCHANT_ID,
            "PAYHERE_MERCHANT_SECRET": config.PAYHERE_MERCHANT_SECRET,
            "PAYHERE_URL": config.PAYHERE_URL,
            "APP_BASE_URL": config.APP_BASE_URL,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            logger.error(f"Payment gateway is not configured, missing: {', '.join(missing)}")
            raise PaymentConfigurationError(missing)

        base_url = config.APP_BASE_URL.rstrip("/")
        payhere_url = config.PAYHERE_URL.rstrip("/")
        return cls(
            merchant_id=config.PAYHERE_MERCHANT_ID,
            merchant_secret=config.PAYHERE_MERCHANT_SECRET,
            notify_url=f"{base_url}/api/payment/notify",
            return_url=f"{base_url}/api/payment/success",
            cancel_url=f"{base_url}/api/payment/cancel",
            checkout_url=f"{payhere_url}/pay/checkout",
            authorize_url=f"{payhere_url}/pay/authorize",
        )


class PaymentService:
    """
    Service for payment operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def initialize_payment(task_id: int, user_id: UUID | str) -> PaymentRequest:
        """
        Build the PayHere checkout form for an unpaid task.

        Args:
            task_id: Task being paid for (also the gateway order id)
            user_id: Authenticated caller

        Returns:
            PaymentRequest ready to auto-submit to checkout_url

        Raises:
            NotTaskOwnerError: Caller didn't create the task (403)
            TaskNotFoundError: Task vanished after the ownership check (404)
            TaskCostNotFoundError: Cost was never calculated (404)
            AlreadyPaidError: Task is already paid (400)
            MissingContactInfoError: No email or phone on file (400)
            PaymentConfigurationError: Gateway settings missing (500)
        """
        TaskService.require_owner(task_id, user_id)
        task = TaskService.get_task_details(task_id)

        cost = TaskService.parse_cost(task.get("cost"))
        if cost is None:
            raise TaskCostNotFoundError(task_id)
        if cost.is_paid:
            raise AlreadyPaidError(task_id)

        profile = SupabaseClient.fetch_profile(user_id) or {}
        contacts = SupabaseClient.fetch_contact_details(user_id)
        email = contacts.get("EMAIL", "")
        phone = contacts.get("MOBILE", "")
        missing = [name for name, value in (("email", email), ("phone", phone)) if not value]
        if missing:
            raise MissingContactInfoError(missing)

        gateway = PaymentGatewayConfig.from_settings()

        amount = format_amount(cost.amount)
        order_id = str(task_id)
        first_name, last_name = split_full_name(profile.get("name") or "")

        logger.info(f"Initialized payment for task {task_id}: {amount} {CURRENCY_LKR}")

        return PaymentRequest(
            merchant_id=gateway.merchant_id,
            return_url=gateway.return_url,
            cancel_url=gateway.cancel_url,
            notify_url=gateway.notify_url,
            order_id=order_id,
            items=task.get("title") or "Task Payment",
            currency=CURRENCY_LKR,
            amount=amount,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            address=DEFAULT_ADDRESS,
            city=DEFAULT_CITY,
            country=DEFAULT_COUNTRY,
            hash=generate_hash(gateway.merchant_id, order_id, amount, CURRENCY_LKR, gateway.merchant_secret),
            custom_1=normalize_uuid(user_id),
            custom_2=order_id,
            checkout_url=gateway.checkout_url,
            authorize_url=gateway.authorize_url,
        )

    @staticmethod
    def set_payment_method(task_id: int, user_id: UUID | str, method: PaymentMethod) -> dict[str, Any]:
        """
        Record how the brand intends to pay.

        Raises:
            NotTaskOwnerError: Caller didn't create the task
            TaskCostNotFoundError: Cost was never calculated
        """
        TaskService.require_owner(task_id, user_id)
        client = SupabaseClient.get_client()

        response = (
            client.table("task_cost")
            .update({"payment_method": PaymentMethod(method).value})
            .eq("task_id", task_id)
            .execute()
        )
        if not response.data:
            raise TaskCostNotFoundError(task_id)

        logger.info(f"Set payment method for task {task_id} to {PaymentMethod(method).value}")
        return response.data[0]

    @staticmethod
    def parse_notification(form: Mapping[str, Any], user_agent: str | None) -> PayHereNotification:
        """
        Validate the shape of a PayHere callback.

        Raises:
            InvalidNotificationError: Wrong User-Agent or malformed fields
        """
        if not (user_agent or "").startswith(PAYHERE_USER_AGENT_PREFIX):
            logger.warning(f"Rejected payment notification with User-Agent {user_agent!r}")
            raise InvalidNotificationError("Invalid User-Agent")

        try:
            return PayHereNotification.model_validate(dict(form))
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            reason = f"Invalid notification field {field}: {first['msg']}" if field else first["msg"]
            logger.warning(f"Rejected payment notification: {reason}")
            raise InvalidNotificationError(reason)

    @staticmethod
    def handle_notification(
        form: Mapping[str, Any],
        user_agent: str | None,
        now: datetime | None = None,
    ) -> PayHereNotification:
        """
        Verify a PayHere notification and mark the task paid on success.

        Only status 2 (success) changes anything; pending, canceled and
        failed notifications are verified and acknowledged.

        Returns:
            The verified notification

        Raises:
            InvalidNotificationError: Bad User-Agent, fields or merchant id
            InvalidSignatureError: md5sig doesn't match
            TaskNotFoundError: Order id is not a task
            InvalidTaskStatusError: Task is not awaiting payment
        """
        notification = PaymentService.parse_notification(form, user_agent)
        gateway = PaymentGatewayConfig.from_settings()

        if notification.merchant_id != gateway.merchant_id:
            logger.warning(f"Notification for unknown merchant {notification.merchant_id}")
            raise InvalidNotificationError("Merchant ID mismatch")

        if not verify_notification_hash(
            notification.merchant_id,
            notification.order_id,
            notification.payhere_amount,
            notification.payhere_currency,
            notification.status_code.value,
            notification.md5sig,
            gateway.merchant_secret,
        ):
            logger.warning(f"Invalid signature on notification for order {notification.order_id}")
            raise InvalidSignatureError(notification.order_id)

        if notification.status_code != PayHereStatus.SUCCESS:
            logger.info(
                f"Payment notification for task {notification.task_id} "
                f"with status {notification.status_code.name}"
            )
            return notification

        task_id = notification.task_id
        task = SupabaseClient.fetch_task(task_id)
        if not task:
            raise TaskNotFoundError(task_id)
        if task.get("status") != TaskStatus.DRAFT.value:
            raise InvalidTaskStatusError(task_id, task.get("status"), TaskStatus.DRAFT.value)

        PaymentService.mark_paid(task_id, notification.payment_metadata(), now=now)
        return notification

    @staticmethod
    def mark_paid(task_id: int, metadata: dict[str, Any], now: datetime | None = None) -> None:
        """Mark a task's cost as paid through the gateway and activate the task."""
        client = SupabaseClient.get_client()
        paid_at = (now or datetime.now(timezone.utc)).isoformat()

        response = (
            client.table("task_cost")
            .update({
                "is_paid": True,
                "payment_method": PaymentMethod.PAYMENT_GATEWAY.value,
                "paid_at": paid_at,
                "metadata": metadata,
            })
            .eq("task_id", task_id)
            .execute()
        )
        if not response.data:
            raise TaskCostNotFoundError(task_id)

        client.table("tasks").update({"status": TaskStatus.ACTIVE.value}).eq("id", task_id).execute()
        logger.info(f"Task {task_id} paid via gateway and activated")

    @staticmethod
    def register_bank_transfer(
        task_id: int,
        user_id: UUID | str,
        content: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> BankTransferResponse:
        """
        Upload a bank transfer slip for admin review.

        Raises:
            NotTaskOwnerError: Caller didn't create the task
            TaskCostNotFoundError: Cost was never calculated
            AlreadyPaidError: Task is already paid
            InvalidFileTypeError / FileTooLargeError: Rejected upload
        """
        TaskService.require_owner(task_id, user_id)

        cost = SupabaseClient.fetch_task_cost(task_id)
        if not cost:
            raise TaskCostNotFoundError(task_id)
        if cost.get("is_paid"):
            raise AlreadyPaidError(task_id)

        path = StorageService.upload_bank_slip(task_id, content, filename, content_type)

        client = SupabaseClient.get_client()
        try:
            client.table("task_cost").update(
                {"payment_method": PaymentMethod.BANK_TRANSFER.value}
            ).eq("task_id", task_id).execute()

            response = (
                client.table("bank_transfer_slip")
                .insert({"task_id": task_id, "slip": path})
                .execute()
            )
            transfer = response.data[0]
        except Exception as e:
            logger.error(f"Failed to record bank transfer for task {task_id}: {e}")
            StorageService.delete_file(BANK_SLIP_BUCKET, path)
            raise BrandSyncException(
                message="Failed to record bank transfer",
                code="BANK_TRANSFER_FAILED",
                status_code=500,
                suggestion="Upload the slip again",
                details={"task_id": task_id},
            )

        logger.info(f"Registered bank transfer {transfer['id']} for task {task_id}")
        return BankTransferResponse(transfer_id=transfer["id"], slip=path)
