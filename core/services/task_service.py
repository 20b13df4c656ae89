# =============================================================================
# core/services/task_service.py - Task Business Logic
# =============================================================================
# Handles task creation, ownership checks and cost calculation.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from app.config import settings
from app.exceptions import (
    AlreadyPaidError,
    BrandSyncException,
    NotTaskOwnerError,
    TaskNotFoundError,
)
from core.models.task import (
    CostBreakdownResponse,
    CostEstimateRequest,
    CostEstimateResponse,
    PaymentMethod,
    PlatformCostLine,
    TargetRecord,
    TaskCostRecord,
    TaskCostResponse,
    TaskCreate,
    TaskStatus,
)
from lib.deadlines import infer_deadline_option, resolve_deadline
from lib.pricing import RateTable, aggregate_costs, calculate_cost, convert_to_lkr
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


def current_rate_table() -> RateTable:
    """Rate table built from settings (defaults plus any JSON overrides)."""
    return RateTable.from_overrides(
        platform_rates=settings.platform_rate_overrides,
        deadline_multipliers=settings.deadline_multiplier_overrides,
        service_fee_rate=settings.SERVICE_FEE_RATE,
    )


class TaskService:
    """
    Service for task operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def require_owner(task_id: int, user_id: UUID | str) -> None:
        """
        Verify that a user owns a task.

        Raises:
            NotTaskOwnerError: If the task doesn't exist or isn't theirs
        """
        if not SupabaseClient.is_task_owner(task_id, user_id):
            logger.warning(f"User {user_id} is not the owner of task {task_id}")
            raise NotTaskOwnerError(task_id)

    @staticmethod
    def get_task_details(task_id: int) -> dict[str, Any]:
        """
        Get a task from the task_details view.

        Raises:
            TaskNotFoundError: If the task doesn't exist
        """
        details = SupabaseClient.fetch_task_details(task_id)
        if not details:
            raise TaskNotFoundError(task_id)
        return details

    @staticmethod
    def parse_cost(raw_cost: Any) -> TaskCostRecord | None:
        """
        Validate the loosely typed cost JSON from the database.

        Returns None when there is no cost yet. A malformed record is a
        data error and surfaces as a 500.
        """
        if not raw_cost:
            return None
        try:
            return TaskCostRecord.model_validate(raw_cost)
        except ValidationError as e:
            raise BrandSyncException(
                message=f"Malformed task cost record: {e.error_count()} errors",
                code="MALFORMED_TASK_COST",
                status_code=500,
            )

    @staticmethod
    def create_task(
        user_id: UUID | str,
        task: TaskCreate,
        save_as_draft: bool = True,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Create a task and its platform targets.

        Tasks always start as DRAFT; payment moves them to ACTIVE. When
        save_as_draft is False the cost is calculated straight away so the
        brand can pay.

        Args:
            user_id: The brand creating the task
            task: Validated task input
            save_as_draft: Skip cost calculation for now
            now: Reference time for resolving deadline options

        Returns:
            Created task dict, with "cost" set when it was calculated
        """
        client = SupabaseClient.get_client()
        now = now or datetime.now(timezone.utc)

        response = (
            client.table("tasks")
            .insert({
                "title": task.title,
                "description": task.description,
                "source": task.source,
                "user_id": normalize_uuid(user_id),
                "status": TaskStatus.DRAFT.value,
            })
            .execute()
        )
        if not response.data:
            raise BrandSyncException(
                message="Failed to create task",
                code="TASK_CREATE_FAILED",
                status_code=500,
            )
        created = response.data[0]
        task_id = created["id"]

        targets = []
        for target in task.platforms:
            due_date = resolve_deadline(target.deadline_option, now)
            targets.append({
                "task_id": task_id,
                "platform": target.platform.value,
                "views": str(target.views),
                "due_date": due_date.isoformat() if due_date else None,
            })

        try:
            client.table("task_targets").insert(targets).execute()
        except Exception as e:
            logger.error(f"Failed to create targets for task {task_id}: {e}")
            client.table("tasks").delete().eq("id", task_id).execute()
            raise BrandSyncException(
                message="Failed to create task targets",
                code="TASK_TARGETS_FAILED",
                status_code=500,
                details={"error": str(e)},
            )

        logger.info(f"Created task {task_id} with {len(targets)} targets for user {user_id}")

        if not save_as_draft:
            created["cost"] = TaskService.calculate_and_store_cost(task_id, user_id, now=now).model_dump()

        return created

    @staticmethod
    def estimate(request: CostEstimateRequest) -> CostEstimateResponse:
        """Price targets for the create-task form without touching the database."""
        rates = current_rate_table()
        lines = []
        breakdowns = []
        for target in request.platforms:
            breakdown = calculate_cost(
                target.platform,
                target.views,
                target.deadline_option,
                include_service_fee=request.include_service_fee,
                rates=rates,
            )
            breakdowns.append(breakdown)
            lines.append(PlatformCostLine(
                platform=target.platform,
                views=target.views,
                deadline_option=target.deadline_option,
                cost=CostBreakdownResponse.from_breakdown(breakdown),
            ))

        total = aggregate_costs(breakdowns)
        return CostEstimateResponse(lines=lines, total=CostBreakdownResponse.from_breakdown(total))

    @staticmethod
    def calculate_and_store_cost(
        task_id: int,
        user_id: UUID | str,
        now: datetime | None = None,
    ) -> TaskCostResponse:
        """
        Calculate the authoritative cost of a task and store it.

        Each target's deadline option is inferred from its stored due date,
        priced on its own, then the breakdowns are summed. The LKR amount
        (total cost converted at LKR_PER_USD) goes into task_cost.

        Raises:
            NotTaskOwnerError: If the user doesn't own the task
            AlreadyPaidError: If the task is already paid
        """
        TaskService.require_owner(task_id, user_id)
        now = now or datetime.now(timezone.utc)

        existing = SupabaseClient.fetch_task_cost(task_id)
        if existing and existing.get("is_paid"):
            raise AlreadyPaidError(task_id)

        targets = [TargetRecord.model_validate(row) for row in SupabaseClient.fetch_task_targets(task_id)]
        if not targets:
            raise BrandSyncException(
                message=f"Task {task_id} has no platform targets",
                code="NO_TARGETS",
                status_code=400,
                suggestion="Add at least one platform target to the task",
                details={"task_id": task_id},
            )

        rates = current_rate_table()
        breakdown = aggregate_costs(
            calculate_cost(
                target.platform,
                target.view_count,
                infer_deadline_option(target.due_date, now),
                include_service_fee=True,
                rates=rates,
            )
            for target in targets
        )
        amount_lkr = convert_to_lkr(breakdown.total_cost, settings.LKR_PER_USD)

        client = SupabaseClient.get_client()
        client.table("task_cost").upsert(
            {
                "task_id": task_id,
                "amount": float(amount_lkr),
                "payment_method": (existing or {}).get("payment_method") or PaymentMethod.BANK_TRANSFER.value,
                "is_paid": False,
            },
            on_conflict="task_id",
        ).execute()

        logger.info(f"Stored cost for task {task_id}: {breakdown.total_cost} USD / {amount_lkr} LKR")

        return TaskCostResponse(
            task_id=task_id,
            base_cost=breakdown.base_cost,
            service_fee=breakdown.service_fee,
            total_cost=breakdown.total_cost,
            amount_lkr=amount_lkr,
        )
