# =============================================================================
# lib/payhere.py - PayHere Checkout Signatures
# =============================================================================
# The PayHere gateway verifies every checkout request with an MD5 signature
# and signs its server-to-server notifications the same way:
#
#   hashed_secret = UPPER(HEX(MD5(merchant_secret)))
#   checkout      = UPPER(HEX(MD5(merchant_id + order_id + amount + currency
#                                 + hashed_secret)))
#   notification  = UPPER(HEX(MD5(merchant_id + order_id + amount + currency
#                                 + status_code + hashed_secret)))
#
# The amount must carry exactly two decimals and no thousands separators.
# Any byte-level difference makes the gateway reject the transaction.
# =============================================================================

from __future__ import annotations

import hashlib
import hmac
import re
from decimal import Decimal, ROUND_HALF_UP

CURRENCY_LKR = "LKR"

FORMATTED_AMOUNT = re.compile(r"[0-9]+\.[0-9]{2}")


class HashInputError(ValueError):
    """Raised when a signature input is missing, empty or badly formatted."""

    def __init__(self, field_name: str, reason: str = "missing"):
        super().__init__(f"Invalid payment hash input: {field_name} ({reason})")
        self.field_name = field_name


def _md5_upper(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest().upper()


def format_amount(amount: Decimal | int | float | str) -> str:
    """
    Format an amount the way PayHere expects it: "4500.00".

    Strings are parsed first so "4500" and "4500.0" normalize too.
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{value:.2f}"


def _require(**inputs: object) -> None:
    for name, value in inputs.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            raise HashInputError(name)


def hash_secret(merchant_secret: str) -> str:
    """Uppercase hex MD5 of the merchant secret."""
    _require(merchant_secret=merchant_secret)
    return _md5_upper(merchant_secret)


def generate_hash(
    merchant_id: str,
    order_id: str | int,
    amount: str | Decimal | int | float,
    currency: str,
    merchant_secret: str,
) -> str:
    """
    Build the checkout signature for a payment request.

    String amounts are used exactly as given and must already be formatted
    with format_amount(); numeric amounts are formatted here.

    Raises:
        HashInputError: If any input is None or empty, or a string amount
            isn't formatted with exactly two decimals
    """
    _require(
        merchant_id=merchant_id,
        order_id=order_id,
        amount=amount,
        currency=currency,
        merchant_secret=merchant_secret,
    )

    if isinstance(amount, str):
        if not FORMATTED_AMOUNT.fullmatch(amount):
            raise HashInputError("amount", "expected two decimals, e.g. 4500.00")
        amount_str = amount
    else:
        amount_str = format_amount(amount)

    payload = f"{merchant_id}{order_id}{amount_str}{currency}{hash_secret(merchant_secret)}"
    return _md5_upper(payload)


def generate_notification_hash(
    merchant_id: str,
    order_id: str,
    amount: str,
    currency: str,
    status_code: str,
    merchant_secret: str,
) -> str:
    """Build the signature PayHere attaches to a payment notification."""
    _require(
        merchant_id=merchant_id,
        order_id=order_id,
        amount=amount,
        currency=currency,
        status_code=status_code,
        merchant_secret=merchant_secret,
    )
    payload = f"{merchant_id}{order_id}{amount}{currency}{status_code}{hash_secret(merchant_secret)}"
    return _md5_upper(payload)


def verify_notification_hash(
    merchant_id: str,
    order_id: str,
    amount: str,
    currency: str,
    status_code: str,
    received_hash: str,
    merchant_secret: str,
) -> bool:
    """Check a notification's md5sig against the expected signature."""
    expected = generate_notification_hash(
        merchant_id, order_id, amount, currency, status_code, merchant_secret
    )
    received = (received_hash or "").upper().encode("utf-8")
    return hmac.compare_digest(expected.encode("ascii"), received)
