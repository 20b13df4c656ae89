# =============================================================================
# core/services/verification_service.py - Contact and Platform Verification
# =============================================================================
# Mobile numbers are verified with a six digit SMS code that expires after
# CODE_EXPIRY_MINUTES; each contact gets at most DAILY_CODE_LIMIT codes a day.
#
# Influencers prove they own a channel by placing a one-off code in its
# description. Codes look like DNKY + 6 random base36 chars + the current
# time in milliseconds as base36, e.g. "DNKYk3f9x2lz4w8q1c".
# =============================================================================

import logging
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from app.exceptions import (
    BrandSyncException,
    ChannelVerificationError,
    ContactAlreadyVerifiedError,
    ContactNotFoundError,
    InvalidContactTypeError,
    InvalidVerificationCodeError,
    PendingVerificationNotFoundError,
    ProfileNotFoundError,
    VerificationLimitError,
)
from core.models.verification import ContactCodeResponse
from lib.notifications import NotificationError, generate_numeric_code, send_sms
from lib.pricing import Platform
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid
from lib.youtube import ChannelLookupError, fetch_channel_info

logger = logging.getLogger(__name__)

CODE_PREFIX = "DNKY"
DAILY_CODE_LIMIT = 3
CODE_EXPIRY_MINUTES = 15
SMS_CODE_MESSAGE = "Your BrandSync verification code is: {code}. This code will expire in {minutes} minutes."
BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    """Lowercase base36 representation of a non-negative integer."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def new_verification_code(now_ms: int | None = None) -> str:
    """Build a fresh ownership verification code."""
    random_part = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(6))
    timestamp = to_base36(now_ms if now_ms is not None else int(time.time() * 1000))
    return f"{CODE_PREFIX}{random_part}{timestamp}"


class VerificationService:
    """Service for contact and influencer profile verification."""

    @staticmethod
    def generate_code(user_id: UUID | str, platform: Platform, profile_id: int) -> str:
        """
        Get the verification code for an influencer profile.

        Reuses the latest unused code, otherwise stores a new one.

        Raises:
            ProfileNotFoundError: Profile isn't the user's on that platform
        """
        client = SupabaseClient.get_client()

        profile = (
            client.table("influencer_profile")
            .select("id")
            .eq("id", profile_id)
            .eq("user_id", normalize_uuid(user_id))
            .eq("platform", Platform(platform).value)
            .execute()
        )
        if not profile.data:
            raise ProfileNotFoundError(profile_id)

        existing = (
            client.table("influencer_profile_verifications")
            .select("code")
            .eq("profile_id", profile_id)
            .eq("is_used", False)
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if existing.data:
            return existing.data[0]["code"]

        code = new_verification_code()
        try:
            client.table("influencer_profile_verifications").insert({
                "profile_id": profile_id,
                "code": code,
                "is_used": False,
            }).execute()
        except Exception as e:
            logger.error(f"Failed to store verification code for profile {profile_id}: {e}")
            raise BrandSyncException(
                message="Failed to generate verification code",
                code="VERIFICATION_CODE_FAILED",
                status_code=500,
            )

        logger.info(f"Generated verification code for profile {profile_id}")
        return code

    @staticmethod
    def check_channel(user_id: UUID | str, profile_id: int) -> None:
        """
        Mark a YouTube profile verified once its code shows up in the channel description.

        The description must contain the outstanding code prefixed with "#".

        Raises:
            PendingVerificationNotFoundError: No such YouTube profile or no unused code
            ChannelVerificationError: Code missing from the description or channel unreadable
        """
        client = SupabaseClient.get_client()

        profile = (
            client.table("influencer_profile")
            .select("id, url")
            .eq("id", profile_id)
            .eq("user_id", normalize_uuid(user_id))
            .eq("platform", Platform.YOUTUBE.value)
            .execute()
        )
        pending = None
        if profile.data:
            pending = (
                client.table("influencer_profile_verifications")
                .select("id, code")
                .eq("profile_id", profile_id)
                .eq("is_used", False)
                .order("created_at", desc=True)
                .limit(1)
                .execute()
            )
        if not pending or not pending.data:
            raise PendingVerificationNotFoundError(profile_id)

        verification = pending.data[0]
        try:
            channel = fetch_channel_info(profile.data[0]["url"])
        except ChannelLookupError as e:
            raise ChannelVerificationError(
                str(e),
                code="CHANNEL_LOOKUP_FAILED",
                status_code=502,
            )

        if f"#{verification['code']}" not in channel.description:
            raise ChannelVerificationError("Verification code not found in channel description")

        try:
            client.rpc("verify_youtube_channel", {
                "p_profile_id": profile_id,
                "p_verification_id": verification["id"],
            }).execute()
        except Exception as e:
            logger.error(f"Failed to mark profile {profile_id} verified: {e}")
            raise BrandSyncException(
                message="Failed to update verification status",
                code="VERIFICATION_FAILED",
                status_code=500,
            )

        logger.info(f"Verified YouTube channel for profile {profile_id}")

    # -------------------------------------------------------------------------
    # Contact (SMS) verification
    # -------------------------------------------------------------------------

    @staticmethod
    def _fetch_contact(user_id: UUID | str, contact_id: int) -> dict[str, Any]:
        """The user's contact row, raising if it's missing or already verified."""
        response = (
            SupabaseClient.get_client()
            .table("contact_details")
            .select("id, type, detail, contact_status(is_verified)")
            .eq("id", contact_id)
            .eq("user_id", normalize_uuid(user_id))
            .execute()
        )
        if not response.data:
            raise ContactNotFoundError(contact_id)

        contact = response.data[0]
        status = contact.get("contact_status")
        if isinstance(status, list):
            status = status[0] if status else None
        if status and status.get("is_verified"):
            raise ContactAlreadyVerifiedError(contact_id)
        return contact

    @staticmethod
    def send_contact_code(
        user_id: UUID | str,
        contact_id: int,
        now: datetime | None = None,
    ) -> ContactCodeResponse:
        """
        Text a fresh six digit code to one of the user's mobile contacts.

        The stored code is removed again if the SMS can't be sent.

        Raises:
            ContactNotFoundError: Contact isn't the user's
            ContactAlreadyVerifiedError: Contact is already verified
            InvalidContactTypeError: Contact isn't a mobile number
            VerificationLimitError: DAILY_CODE_LIMIT codes were already sent today
        """
        contact = VerificationService._fetch_contact(user_id, contact_id)
        if contact.get("type") != "MOBILE":
            raise InvalidContactTypeError(contact.get("type"))

        now = now or datetime.now(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        client = SupabaseClient.get_client()

        sent_today = (
            client.table("contact_verifications")
            .select("id")
            .eq("contact_id", contact_id)
            .gte("created_at", start_of_day.isoformat())
            .execute()
        )
        if len(sent_today.data or []) >= DAILY_CODE_LIMIT:
            raise VerificationLimitError(DAILY_CODE_LIMIT)

        code = int(generate_numeric_code(6))
        expires_at = now + timedelta(minutes=CODE_EXPIRY_MINUTES)
        client.table("contact_verifications").insert({
            "contact_id": contact_id,
            "code": code,
            "expired_at": expires_at.isoformat(),
        }).execute()

        try:
            send_sms(contact["detail"], SMS_CODE_MESSAGE.format(code=code, minutes=CODE_EXPIRY_MINUTES))
        except NotificationError:
            client.table("contact_verifications").delete().eq("contact_id", contact_id).eq("code", code).execute()
            raise BrandSyncException(
                message="Failed to send verification code",
                code="SMS_SEND_FAILED",
                status_code=500,
            )

        logger.info(f"Sent verification code to contact {contact_id}")
        return ContactCodeResponse(message="Verification code sent successfully", expires_at=expires_at)

    @staticmethod
    def confirm_contact_code(
        user_id: UUID | str,
        contact_id: int,
        code: str,
        now: datetime | None = None,
    ) -> None:
        """
        Mark a contact verified if `code` matches an unexpired code sent to it.

        Raises:
            ContactNotFoundError: Contact isn't the user's
            ContactAlreadyVerifiedError: Contact is already verified
            InvalidVerificationCodeError: Code is wrong or expired
        """
        VerificationService._fetch_contact(user_id, contact_id)
        now = now or datetime.now(timezone.utc)
        client = SupabaseClient.get_client()

        match = (
            client.table("contact_verifications")
            .select("id")
            .eq("contact_id", contact_id)
            .eq("code", int(code))
            .gte("expired_at", now.isoformat())
            .limit(1)
            .execute()
        )
        if not match.data:
            raise InvalidVerificationCodeError()

        try:
            client.table("contact_status").upsert(
                {"contact_id": contact_id, "is_verified": True, "verified_at": now.isoformat()},
                on_conflict="contact_id",
            ).execute()
        except Exception as e:
            logger.error(f"Failed to mark contact {contact_id} verified: {e}")
            raise BrandSyncException(
                message="Failed to update verification status",
                code="VERIFICATION_FAILED",
                status_code=500,
            )

        client.table("contact_verifications").delete().eq("contact_id", contact_id).execute()
        logger.info(f"Verified contact {contact_id}")
