# =============================================================================
# core/models/payment.py - Payment Schemas
# =============================================================================
# These models define the contract with the PayHere gateway:
# - PaymentRequest: The form the browser auto-submits to PayHere checkout
# - PayHereNotification: The server-to-server callback PayHere posts back
# - PaymentInitializeRequest / SetPaymentMethodRequest: API request bodies
#
# A PaymentRequest is built once per payment attempt and never stored.
# =============================================================================

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lib.payhere import CURRENCY_LKR

from .task import PaymentMethod

ORDER_ID_PATTERN = re.compile(r"[0-9]+")
AMOUNT_PATTERN = re.compile(r"[0-9]+(\.[0-9]{2})?")
MD5_PATTERN = re.compile(r"[0-9A-Fa-f]{32}")


class PayHereStatus(str, Enum):
    """status_code values PayHere sends in notifications."""
    SUCCESS = "2"
    PENDING = "0"
    CANCELED = "-1"
    FAILED = "-2"


class PaymentInitializeRequest(BaseModel):
    """Body of POST /api/payment/initialize."""
    model_config = ConfigDict(populate_by_name=True)

    task_id: int = Field(..., alias="taskId", gt=0, strict=True)


class SetPaymentMethodRequest(BaseModel):
    """Body of POST /api/payment/set-method."""
    model_config = ConfigDict(populate_by_name=True)

    task_id: int = Field(..., alias="taskId", gt=0, strict=True)
    payment_method: PaymentMethod = Field(..., alias="paymentMethod")


class PaymentRequest(BaseModel):
    """
    Form fields for a PayHere checkout.

    Field names match the gateway's form field names exactly.

    Example:
        {
            "merchant_id": "1211149",
            "order_id": "42",
            "amount": "4500.00",
            "currency": "LKR",
            "hash": "9B51A329F1EF0FC52A52E4D0DA90B98D",
            ...
        }
    """
    merchant_id: str
    return_url: str
    cancel_url: str
    notify_url: str
    order_id: str
    items: str
    currency: str = CURRENCY_LKR
    amount: str
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    city: str
    country: str
    hash: str
    custom_1: str
    custom_2: str
    checkout_url: str
    authorize_url: str


class PayHereNotification(BaseModel):
    """
    Notification posted by PayHere to notify_url.

    Validation mirrors what the gateway guarantees; anything else is
    treated as a forged or corrupted callback.
    """
    model_config = ConfigDict(extra="ignore")

    merchant_id: str = Field(..., min_length=1)
    order_id: str
    payhere_amount: str
    payhere_currency: str
    status_code: PayHereStatus
    md5sig: str = Field(..., min_length=1)

    payment_id: str | None = None
    captured_amount: str | None = None
    method: str | None = None
    card_holder_name: str | None = None
    card_no: str | None = None
    card_expiry: str | None = None
    custom_1: str | None = None
    custom_2: str | None = None
    status_message: str | None = None
    recurring: str | None = None

    @field_validator("order_id")
    @classmethod
    def _order_id_digits(cls, value: str) -> str:
        if not ORDER_ID_PATTERN.fullmatch(value):
            raise ValueError("Invalid order_id format")
        return value

    @field_validator("payhere_amount")
    @classmethod
    def _amount_format(cls, value: str) -> str:
        if not AMOUNT_PATTERN.fullmatch(value):
            raise ValueError("Invalid amount format")
        return value

    @field_validator("md5sig")
    @classmethod
    def _md5_hex(cls, value: str) -> str:
        if not MD5_PATTERN.fullmatch(value):
            raise ValueError("Invalid md5sig format")
        return value

    @field_validator("payhere_currency")
    @classmethod
    def _lkr_only(cls, value: str) -> str:
        if value != CURRENCY_LKR:
            raise ValueError("Invalid currency. Only LKR is supported.")
        return value

    @property
    def task_id(self) -> int:
        return int(self.order_id)

    def payment_metadata(self) -> dict[str, str | None]:
        """Gateway details worth keeping on the cost record."""
        return {
            "payment_id": self.payment_id,
            "payment_method": self.method,
            "card_holder_name": self.card_holder_name,
            "card_no": self.card_no,
            "card_expiry": self.card_expiry,
        }


class BankTransferResponse(BaseModel):
    """Result of registering a bank transfer slip."""
    success: bool = True
    transfer_id: int
    slip: str
