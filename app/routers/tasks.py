# =============================================================================
# app/routers/tasks.py - Task and Cost Endpoints
# =============================================================================
# Brands create tasks with per-platform view targets and get them priced.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth import AuthUser, get_current_user
from core.models.task import (
    CalculateCostRequest,
    CostEstimateRequest,
    CostEstimateResponse,
    TaskCostResponse,
    TaskCreate,
)
from core.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201)
async def create_task(
    task: TaskCreate,
    draft: Annotated[bool, Query(description="Save without calculating the cost")] = True,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a task with its platform targets.

    Tasks start as DRAFT. With draft=false the cost is calculated in the
    same request and returned under "cost".
    """
    return TaskService.create_task(user.id, task, save_as_draft=draft)


@router.post("/estimate", response_model=CostEstimateResponse)
async def estimate_cost(request: CostEstimateRequest):
    """
    Quote the cost of a set of platform targets.

    Nothing is stored; this backs the live total on the create-task form.
    """
    return TaskService.estimate(request)


@router.post("/calculate-cost", response_model=TaskCostResponse)
async def calculate_cost(
    request: CalculateCostRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Calculate and store the authoritative cost of a task.

    Only the task owner may do this, and not once the task is paid.
    """
    return TaskService.calculate_and_store_cost(request.task_id, user.id)
