# =============================================================================
# tests/test_verification_service.py - Contact and Channel Verification Tests
# =============================================================================

import re
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

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
from core.services import VerificationService
from core.services.verification_service import new_verification_code, to_base36
from lib.notifications import NotificationError
from lib.pricing import Platform
from lib.youtube import ChannelInfo, ChannelLookupError

MOBILE_CONTACT = {"id": 3, "type": "MOBILE", "detail": "0771234567", "contact_status": None}
CHANNEL_URL = "https://www.youtube.com/@nimalvlogs"

CODE_PATTERN = re.compile(r"^DNKY[0-9a-z]{6}[0-9a-z]+$")


class TestCodes:
    """Tests for code generation helpers."""

    @pytest.mark.parametrize("value, expected", [(0, "0"), (35, "z"), (36, "10"), (1295, "zz"), (46656, "1000")])
    def test_to_base36(self, value, expected):
        assert to_base36(value) == expected

    def test_to_base36_negative(self):
        with pytest.raises(ValueError):
            to_base36(-1)

    def test_code_format(self):
        """Test prefix, six random characters, then the base36 timestamp."""
        code = new_verification_code(now_ms=1295)
        assert CODE_PATTERN.match(code)
        assert code.endswith("zz")
        assert len(code) == 4 + 6 + 2

    def test_codes_differ(self):
        assert new_verification_code(now_ms=0) != new_verification_code(now_ms=0)


class TestGenerateCode:
    """Tests for VerificationService.generate_code."""

    def test_reuses_unused_code(self, fake_supabase, user_id):
        fake_supabase.set("influencer_profile", [{"id": 4}])
        codes = fake_supabase.set("influencer_profile_verifications", [{"code": "DNKYabcdef123"}])

        assert VerificationService.generate_code(user_id, Platform.YOUTUBE, 4) == "DNKYabcdef123"
        codes.insert.assert_not_called()

    def test_creates_new_code(self, fake_supabase, user_id):
        """Test that a fresh code is stored when none is outstanding."""
        fake_supabase.set("influencer_profile", [{"id": 4}])
        codes = fake_supabase.table("influencer_profile_verifications")

        code = VerificationService.generate_code(user_id, Platform.TIKTOK, 4)

        assert CODE_PATTERN.match(code)
        codes.insert.assert_called_once_with({"profile_id": 4, "code": code, "is_used": False})

    def test_profile_must_belong_to_user(self, fake_supabase, user_id):
        profiles = fake_supabase.set("influencer_profile", [])

        with pytest.raises(ProfileNotFoundError) as exc_info:
            VerificationService.generate_code(user_id, Platform.YOUTUBE, 4)

        assert exc_info.value.status_code == 403
        profiles.eq.assert_any_call("platform", "YOUTUBE")
        profiles.eq.assert_any_call("user_id", user_id)

    def test_store_failure(self, fake_supabase, user_id):
        fake_supabase.set("influencer_profile", [{"id": 4}])
        fake_supabase.set_sequence("influencer_profile_verifications", [], RuntimeError("db down"))

        with pytest.raises(BrandSyncException) as exc_info:
            VerificationService.generate_code(user_id, Platform.YOUTUBE, 4)
        assert exc_info.value.code == "VERIFICATION_CODE_FAILED"


class TestSendContactCode:
    """Tests for VerificationService.send_contact_code."""

    def test_sends_code(self, fake_supabase, user_id, now):
        fake_supabase.set("contact_details", [MOBILE_CONTACT])
        codes = fake_supabase.set("contact_verifications", [{"id": 1}])

        with patch("core.services.verification_service.send_sms") as send:
            result = VerificationService.send_contact_code(user_id, 3, now=now)

        assert result.expires_at == datetime(2024, 6, 15, 12, 15, tzinfo=timezone.utc)
        codes.gte.assert_called_once_with("created_at", "2024-06-15T00:00:00+00:00")
        stored = codes.insert.call_args.args[0]
        assert stored["contact_id"] == 3
        assert stored["expired_at"] == "2024-06-15T12:15:00+00:00"
        assert 100000 <= stored["code"] <= 999999

        recipient, message = send.call_args.args
        assert recipient == "0771234567"
        assert str(stored["code"]) in message
        assert "15 minutes" in message

    def test_contact_must_be_users(self, fake_supabase, user_id):
        contacts = fake_supabase.set("contact_details", [])

        with pytest.raises(ContactNotFoundError) as exc_info:
            VerificationService.send_contact_code(user_id, 3)

        assert exc_info.value.status_code == 404
        contacts.eq.assert_any_call("user_id", user_id)

    @pytest.mark.parametrize("status", [{"is_verified": True}, [{"is_verified": True}]])
    def test_already_verified(self, fake_supabase, user_id, status):
        fake_supabase.set("contact_details", [{**MOBILE_CONTACT, "contact_status": status}])

        with pytest.raises(ContactAlreadyVerifiedError):
            VerificationService.send_contact_code(user_id, 3)

    def test_unverified_status_row_is_allowed(self, fake_supabase, user_id, now):
        fake_supabase.set("contact_details", [{**MOBILE_CONTACT, "contact_status": [{"is_verified": False}]}])

        with patch("core.services.verification_service.send_sms"):
            VerificationService.send_contact_code(user_id, 3, now=now)

    def test_only_mobile_numbers(self, fake_supabase, user_id):
        fake_supabase.set("contact_details", [{**MOBILE_CONTACT, "type": "EMAIL", "detail": "a@b.lk"}])

        with pytest.raises(InvalidContactTypeError) as exc_info:
            VerificationService.send_contact_code(user_id, 3)
        assert exc_info.value.status_code == 400

    def test_daily_limit(self, fake_supabase, user_id, now):
        """Test that a fourth code on the same day is refused."""
        fake_supabase.set("contact_details", [MOBILE_CONTACT])
        codes = fake_supabase.set("contact_verifications", [{"id": 1}, {"id": 2}, {"id": 3}])

        with patch("core.services.verification_service.send_sms") as send:
            with pytest.raises(VerificationLimitError) as exc_info:
                VerificationService.send_contact_code(user_id, 3, now=now)

        assert exc_info.value.status_code == 429
        codes.insert.assert_not_called()
        send.assert_not_called()

    def test_sms_failure_removes_code(self, fake_supabase, user_id, now):
        fake_supabase.set("contact_details", [MOBILE_CONTACT])
        codes = fake_supabase.table("contact_verifications")
        error = NotificationError("Failed to send SMS: timeout", channel="sms")

        with patch("core.services.verification_service.send_sms", side_effect=error):
            with pytest.raises(BrandSyncException) as exc_info:
                VerificationService.send_contact_code(user_id, 3, now=now)

        assert exc_info.value.code == "SMS_SEND_FAILED"
        code = codes.insert.call_args.args[0]["code"]
        codes.delete.assert_called_once()
        codes.eq.assert_any_call("code", code)


class TestConfirmContactCode:
    """Tests for VerificationService.confirm_contact_code."""

    def test_marks_contact_verified(self, fake_supabase, user_id, now):
        fake_supabase.set("contact_details", [MOBILE_CONTACT])
        codes = fake_supabase.set("contact_verifications", [{"id": 8}])
        statuses = fake_supabase.table("contact_status")

        VerificationService.confirm_contact_code(user_id, 3, "482913", now=now)

        codes.eq.assert_any_call("code", 482913)
        codes.gte.assert_called_once_with("expired_at", now.isoformat())
        statuses.upsert.assert_called_once_with(
            {"contact_id": 3, "is_verified": True, "verified_at": now.isoformat()},
            on_conflict="contact_id",
        )
        codes.delete.assert_called_once()

    def test_wrong_or_expired_code(self, fake_supabase, user_id, now):
        fake_supabase.set("contact_details", [MOBILE_CONTACT])
        fake_supabase.set("contact_verifications", [])
        statuses = fake_supabase.table("contact_status")

        with pytest.raises(InvalidVerificationCodeError) as exc_info:
            VerificationService.confirm_contact_code(user_id, 3, "000000", now=now)

        assert exc_info.value.status_code == 400
        statuses.upsert.assert_not_called()

    def test_already_verified(self, fake_supabase, user_id):
        fake_supabase.set("contact_details", [{**MOBILE_CONTACT, "contact_status": {"is_verified": True}}])

        with pytest.raises(ContactAlreadyVerifiedError):
            VerificationService.confirm_contact_code(user_id, 3, "482913")


class TestCheckChannel:
    """Tests for VerificationService.check_channel."""

    @pytest.fixture
    def pending(self, fake_supabase):
        fake_supabase.set("influencer_profile", [{"id": 4, "url": CHANNEL_URL}])
        fake_supabase.set("influencer_profile_verifications", [{"id": 11, "code": "DNKYabcdef123"}])
        return fake_supabase

    def test_verifies_channel(self, pending, user_id):
        channel = ChannelInfo(title="Nimal Vlogs", description="Travel vlogs #DNKYabcdef123")
        with patch("core.services.verification_service.fetch_channel_info", return_value=channel) as fetch:
            VerificationService.check_channel(user_id, 4)

        fetch.assert_called_once_with(CHANNEL_URL)
        pending.client.rpc.assert_called_once_with(
            "verify_youtube_channel", {"p_profile_id": 4, "p_verification_id": 11}
        )
        pending.tables["influencer_profile"].eq.assert_any_call("platform", "YOUTUBE")

    def test_code_needs_hash_prefix(self, pending, user_id):
        channel = ChannelInfo(title="Nimal Vlogs", description="Travel vlogs DNKYabcdef123")
        with patch("core.services.verification_service.fetch_channel_info", return_value=channel):
            with pytest.raises(ChannelVerificationError) as exc_info:
                VerificationService.check_channel(user_id, 4)

        assert exc_info.value.code == "CODE_NOT_IN_DESCRIPTION"
        assert exc_info.value.status_code == 400
        pending.client.rpc.assert_not_called()

    @pytest.mark.parametrize("profiles, codes", [([], []), ([{"id": 4, "url": CHANNEL_URL}], [])])
    def test_no_pending_verification(self, fake_supabase, user_id, profiles, codes):
        fake_supabase.set("influencer_profile", profiles)
        fake_supabase.set("influencer_profile_verifications", codes)

        with pytest.raises(PendingVerificationNotFoundError) as exc_info:
            VerificationService.check_channel(user_id, 4)
        assert exc_info.value.status_code == 404

    def test_channel_lookup_failure(self, pending, user_id):
        error = ChannelLookupError("Failed to fetch channel information: 503")
        with patch("core.services.verification_service.fetch_channel_info", side_effect=error):
            with pytest.raises(ChannelVerificationError) as exc_info:
                VerificationService.check_channel(user_id, 4)

        assert exc_info.value.code == "CHANNEL_LOOKUP_FAILED"
        assert exc_info.value.status_code == 502

    def test_update_failure(self, pending, user_id):
        pending.client.rpc.return_value.execute.side_effect = RuntimeError("rpc failed")
        channel = ChannelInfo(title="Nimal Vlogs", description="#DNKYabcdef123")

        with patch("core.services.verification_service.fetch_channel_info", return_value=channel):
            with pytest.raises(BrandSyncException) as exc_info:
                VerificationService.check_channel(user_id, 4)
        assert exc_info.value.code == "VERIFICATION_FAILED"
