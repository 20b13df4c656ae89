# =============================================================================
# tests/test_application_service.py - Application and Proof Tests
# =============================================================================
# Run with: pytest tests/test_application_service.py -v
# =============================================================================

from decimal import Decimal
from unittest.mock import patch

import pytest

from app.exceptions import (
    ApplicationNotFoundError,
    BrandSyncException,
    DuplicateApplicationError,
    InvalidTaskStatusError,
    NoValidPromisesError,
)
from core.models import ProofSubmission
from core.services import ApplicationService
from lib.pricing import Platform
from lib.supabase_client import SupabaseClient


def task_with_status(status: str):
    return patch.object(
        SupabaseClient, "fetch_task_details", return_value={"task_id": 42, "status": status}
    )


class TestBuildPromises:
    """Tests for ApplicationService.build_promises."""

    def test_profit_is_flexible_base_cost(self):
        """Test that estimated profit excludes the service fee."""
        promises = ApplicationService.build_promises({Platform.YOUTUBE: "10K"})
        assert promises == [(Platform.YOUTUBE, "10K", Decimal("37.50"))]

    def test_zero_and_malformed_dropped(self):
        promises = ApplicationService.build_promises({
            Platform.YOUTUBE: "0",
            Platform.TIKTOK: "lots",
            Platform.INSTAGRAM: "2K",
        })
        assert [p[0] for p in promises] == [Platform.INSTAGRAM]


class TestSubmitApplication:
    """Tests for ApplicationService.submit_application."""

    def test_creates_application_and_promises(self, fake_supabase, user_id):
        """Test a successful application with one skipped platform."""
        # Arrange
        applications = fake_supabase.set_sequence("task_applications", [], [{"id": 9}])
        promises = fake_supabase.table("application_promises")

        # Act
        with task_with_status("ACTIVE"):
            result = ApplicationService.submit_application(
                user_id, 42, {Platform.YOUTUBE: "10K", Platform.TIKTOK: "0"}
            )

        # Assert
        assert result.application_id == 9
        assert len(result.promises) == 1
        applications.insert.assert_called_once_with({"task_id": 42, "user_id": user_id, "is_cancelled": False})
        promises.insert.assert_called_once_with([
            {"application_id": 9, "platform": "YOUTUBE", "promised_reach": "10K", "est_profit": "37.50"},
        ])

    def test_task_must_be_active(self, fake_supabase, user_id):
        with task_with_status("DRAFT"), pytest.raises(InvalidTaskStatusError):
            ApplicationService.submit_application(user_id, 42, {Platform.YOUTUBE: "10K"})
        assert fake_supabase.tables == {}

    def test_no_valid_promises(self, fake_supabase, user_id):
        with task_with_status("ACTIVE"), pytest.raises(NoValidPromisesError):
            ApplicationService.submit_application(user_id, 42, {Platform.YOUTUBE: "0"})
        assert fake_supabase.tables == {}

    def test_duplicate(self, fake_supabase, user_id):
        """Test that a second live application to the same task is refused."""
        applications = fake_supabase.set("task_applications", [{"id": 3}])

        with task_with_status("ACTIVE"), pytest.raises(DuplicateApplicationError):
            ApplicationService.submit_application(user_id, 42, {Platform.YOUTUBE: "10K"})

        applications.insert.assert_not_called()

    def test_promise_failure_rolls_back(self, fake_supabase, user_id):
        applications = fake_supabase.set_sequence("task_applications", [], [{"id": 9}], [])
        fake_supabase.table("application_promises").execute.side_effect = RuntimeError("boom")

        with task_with_status("ACTIVE"), pytest.raises(BrandSyncException) as exc_info:
            ApplicationService.submit_application(user_id, 42, {Platform.YOUTUBE: "10K"})

        assert exc_info.value.code == "PROMISES_CREATE_FAILED"
        applications.delete.assert_called_once()
        applications.eq.assert_called_with("id", 9)


class TestProofs:
    """Tests for proof submission and listing."""

    def test_submit_proofs(self, fake_supabase, user_id):
        fake_supabase.set("task_applications", [{"id": 9, "user_id": user_id}])
        proofs_table = fake_supabase.set("application_proofs", [{"id": 1}])

        stored = ApplicationService.submit_proofs(user_id, 9, [
            ProofSubmission(platform="YOUTUBE", proofType="URL", content="https://youtu.be/abc"),
        ])

        assert stored == [{"id": 1}]
        proofs_table.insert.assert_called_once_with([
            {"application_id": 9, "platform": "YOUTUBE", "proof_type": "URL", "content": "https://youtu.be/abc"},
        ])

    def test_someone_elses_application(self, fake_supabase, user_id):
        fake_supabase.set("task_applications", [])
        with pytest.raises(ApplicationNotFoundError):
            ApplicationService.list_proofs(user_id, 9)
        assert "application_proofs" not in fake_supabase.tables

    def test_list_proofs_includes_status(self, fake_supabase, user_id):
        fake_supabase.set("task_applications", [{"id": 9}])
        proofs_table = fake_supabase.set("application_proofs", [{"id": 1, "proof_status": {"status": "ACCEPTED"}}])

        proofs = ApplicationService.list_proofs(user_id, 9)

        assert proofs[0]["proof_status"]["status"] == "ACCEPTED"
        proofs_table.select.assert_called_once_with("*, proof_status(status, reviewed_at, reviewed_by)")
