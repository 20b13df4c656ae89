# =============================================================================
# core/services/application_service.py - Influencer Applications
# =============================================================================
# Influencers apply to ACTIVE tasks by promising views per platform. Each
# promise stores the influencer's estimated profit: the flexible-deadline
# base cost with no service fee.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import (
    ApplicationNotFoundError,
    BrandSyncException,
    DuplicateApplicationError,
    InvalidTaskStatusError,
    NoValidPromisesError,
)
from core.models.application import ApplicationPromise, ApplicationSubmitResponse, ProofSubmission
from core.models.task import TaskStatus
from core.services.task_service import TaskService, current_rate_table
from lib.deadlines import DeadlineOption
from lib.pricing import Platform, calculate_cost
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid
from lib.views import parse_view_count

logger = logging.getLogger(__name__)


class ApplicationService:
    """Service for task applications and proofs."""

    @staticmethod
    def build_promises(
        selected_views: dict[Platform, str],
    ) -> list[tuple[Platform, str, Any]]:
        """
        Turn the selected views into (platform, promised_reach, est_profit).

        Platforms whose views parse to zero or less are dropped.
        """
        rates = current_rate_table()
        promises = []
        for platform, views in selected_views.items():
            count = parse_view_count(views)
            if count <= 0:
                continue
            payout = calculate_cost(
                platform,
                count,
                DeadlineOption.FLEXIBLE,
                include_service_fee=False,
                rates=rates,
            )
            promises.append((Platform(platform), views, payout.base_cost))
        return promises

    @staticmethod
    def submit_application(
        user_id: UUID | str,
        task_id: int,
        selected_views: dict[Platform, str],
    ) -> ApplicationSubmitResponse:
        """
        Apply to a task with promised views per platform.

        Raises:
            TaskNotFoundError: Task doesn't exist
            InvalidTaskStatusError: Task isn't ACTIVE
            DuplicateApplicationError: User already applied
            NoValidPromisesError: Every selection parsed to zero views
        """
        task = TaskService.get_task_details(task_id)
        if task.get("status") != TaskStatus.ACTIVE.value:
            raise InvalidTaskStatusError(task_id, task.get("status"), TaskStatus.ACTIVE.value)

        promises = ApplicationService.build_promises(selected_views)
        if not promises:
            raise NoValidPromisesError()

        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        existing = (
            client.table("task_applications")
            .select("id")
            .eq("task_id", task_id)
            .eq("user_id", user_id_str)
            .eq("is_cancelled", False)
            .execute()
        )
        if existing.data:
            raise DuplicateApplicationError(task_id)

        response = (
            client.table("task_applications")
            .insert({"task_id": task_id, "user_id": user_id_str, "is_cancelled": False})
            .execute()
        )
        application_id = response.data[0]["id"]

        rows = [
            ApplicationPromise(
                application_id=application_id,
                platform=platform,
                promised_reach=views,
                est_profit=profit,
            )
            for platform, views, profit in promises
        ]

        try:
            client.table("application_promises").insert(
                [row.model_dump(mode="json") for row in rows]
            ).execute()
        except Exception as e:
            logger.error(f"Failed to create promises for application {application_id}: {e}")
            client.table("task_applications").delete().eq("id", application_id).execute()
            raise BrandSyncException(
                message="Failed to create application promises",
                code="PROMISES_CREATE_FAILED",
                status_code=500,
                details={"application_id": application_id},
            )

        logger.info(f"Created application {application_id} for task {task_id} with {len(rows)} promises")
        return ApplicationSubmitResponse(application_id=application_id, promises=rows)

    @staticmethod
    def require_application_owner(application_id: int, user_id: UUID | str) -> dict[str, Any]:
        """
        Fetch an application that belongs to the user.

        Raises:
            ApplicationNotFoundError: Missing or someone else's application
        """
        client = SupabaseClient.get_client()
        response = (
            client.table("task_applications")
            .select("*")
            .eq("id", application_id)
            .eq("user_id", normalize_uuid(user_id))
            .execute()
        )
        if not response.data:
            raise ApplicationNotFoundError(application_id)
        return response.data[0]

    @staticmethod
    def submit_proofs(
        user_id: UUID | str,
        application_id: int,
        proofs: list[ProofSubmission],
    ) -> list[dict[str, Any]]:
        """Attach proofs of delivery to the user's application."""
        ApplicationService.require_application_owner(application_id, user_id)
        client = SupabaseClient.get_client()

        response = (
            client.table("application_proofs")
            .insert([
                {
                    "application_id": application_id,
                    "platform": proof.platform.value,
                    "proof_type": proof.proof_type.value,
                    "content": proof.content,
                }
                for proof in proofs
            ])
            .execute()
        )

        logger.info(f"Submitted {len(proofs)} proofs for application {application_id}")
        return response.data or []

    @staticmethod
    def list_proofs(user_id: UUID | str, application_id: int) -> list[dict[str, Any]]:
        """Proofs of the user's application with their review status."""
        ApplicationService.require_application_owner(application_id, user_id)
        client = SupabaseClient.get_client()

        response = (
            client.table("application_proofs")
            .select("*, proof_status(status, reviewed_at, reviewed_by)")
            .eq("application_id", application_id)
            .execute()
        )
        return response.data or []
