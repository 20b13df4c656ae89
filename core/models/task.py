# =============================================================================
# core/models/task.py - Task and Cost Schemas
# =============================================================================
# These models define the API contract for task operations:
# - TaskCreate: Input for creating a task with its platform targets
# - CostEstimateRequest / CostBreakdownResponse: Quotes for the create form
# - TaskCostRecord: The loosely typed "cost" JSON column, validated here
# - TargetRecord: A task_targets row, validated at the database boundary
#
# A task is a brand's campaign asking for views on one or more platforms.
# =============================================================================

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from lib.deadlines import DeadlineOption
from lib.pricing import CostBreakdown, Platform
from lib.views import parse_view_count


class TaskStatus(str, Enum):
    """
    Lifecycle of a task.

    Flow: DRAFT -> (paid) -> ACTIVE -> COMPLETED, or ARCHIVED at any point
    """
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    COMPLETED = "COMPLETED"


class PaymentMethod(str, Enum):
    """How the brand pays for a task."""
    PAYMENT_GATEWAY = "PAYMENT_GATEWAY"
    BANK_TRANSFER = "BANK_TRANSFER"


class PlatformTargetInput(BaseModel):
    """
    One platform a new task targets.

    Example:
        {"platform": "YOUTUBE", "targetViews": "10K", "deadlineOption": "1w"}
    """
    model_config = ConfigDict(populate_by_name=True)

    platform: Platform
    target_views: str = Field(
        ...,
        alias="targetViews",
        description="Target views as an integer or shorthand string (10K, 1.5M)"
    )
    deadline_option: DeadlineOption = Field(
        default=DeadlineOption.FLEXIBLE,
        alias="deadlineOption",
    )

    @field_validator("target_views", mode="before")
    @classmethod
    def _coerce_views(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("target_views")
    @classmethod
    def _views_must_parse(cls, value: str) -> str:
        if parse_view_count(value, strict=True) <= 0:
            raise ValueError("targetViews must be greater than zero")
        return value.strip().upper()

    @property
    def views(self) -> int:
        return parse_view_count(self.target_views)


class TaskCreate(BaseModel):
    """
    Schema for creating a task.

    Example:
        {
            "title": "Summer launch",
            "description": "Promote our new drink",
            "source": "task-content/abc.mp4",
            "platforms": [{"platform": "YOUTUBE", "targetViews": "10K", "deadlineOption": "1w"}]
        }
    """
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    source: str | None = Field(
        default=None,
        description="Storage path or URL of the content to promote"
    )
    platforms: list[PlatformTargetInput] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _unique_platforms(self) -> "TaskCreate":
        seen = [p.platform for p in self.platforms]
        if len(seen) != len(set(seen)):
            raise ValueError("Each platform can only be targeted once per task")
        return self


class CostEstimateRequest(BaseModel):
    """Targets to price without creating a task."""
    platforms: list[PlatformTargetInput] = Field(..., min_length=1)
    include_service_fee: bool = Field(default=True, alias="includeServiceFee")

    model_config = ConfigDict(populate_by_name=True)


class CostBreakdownResponse(BaseModel):
    """A cost breakdown as returned to clients."""
    base_cost: Decimal
    service_fee: Decimal
    total_cost: Decimal

    @classmethod
    def from_breakdown(cls, breakdown: CostBreakdown) -> "CostBreakdownResponse":
        return cls(
            base_cost=breakdown.base_cost,
            service_fee=breakdown.service_fee,
            total_cost=breakdown.total_cost,
        )


class PlatformCostLine(BaseModel):
    """Cost of one platform target within an estimate."""
    platform: Platform
    views: int
    deadline_option: DeadlineOption
    cost: CostBreakdownResponse


class CostEstimateResponse(BaseModel):
    """Per-platform lines plus their field-wise sum."""
    lines: list[PlatformCostLine]
    total: CostBreakdownResponse


class CalculateCostRequest(BaseModel):
    """Body of POST /api/tasks/calculate-cost."""
    model_config = ConfigDict(populate_by_name=True)

    task_id: int = Field(..., alias="taskId", gt=0, strict=True)


class TaskCostResponse(BaseModel):
    """Stored cost of a task, in the rate table's currency and in LKR."""
    success: bool = True
    task_id: int
    base_cost: Decimal
    service_fee: Decimal
    total_cost: Decimal
    amount_lkr: Decimal


class TaskCostRecord(BaseModel):
    """
    The cost JSON attached to task_details.

    The database stores this loosely typed; parsing it here keeps the
    payment code from reading unchecked keys.
    """
    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    amount: Decimal = Field(..., ge=0)
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    is_paid: bool = False
    paid_at: datetime | None = None


class TargetRecord(BaseModel):
    """A task_targets row."""
    model_config = ConfigDict(extra="ignore")

    platform: Platform
    views: str
    due_date: datetime | None = None

    @field_validator("views", mode="before")
    @classmethod
    def _views_to_str(cls, value):
        return str(value) if value is not None else "0"

    @field_validator("due_date")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def view_count(self) -> int:
        return parse_view_count(self.views)
