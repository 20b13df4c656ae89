# =============================================================================
# core/models/accounting.py - Admin Accounting Schemas
# =============================================================================

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .task import PaymentMethod


class TransactionSort(str, Enum):
    """Sort orders offered on the transactions list."""
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    AMOUNT_DESC = "amount-desc"
    AMOUNT_ASC = "amount-asc"

    @property
    def column(self) -> str:
        return "paid_at" if self.value.startswith("date") else "amount"

    @property
    def descending(self) -> bool:
        return self.value.endswith("desc")


class AccountingSummary(BaseModel):
    """Income totals over paid task costs."""
    total_income: Decimal = Decimal("0")
    monthly_income: Decimal = Decimal("0")
    transaction_count: int = 0
    by_payment_method: dict[PaymentMethod, Decimal] = Field(default_factory=dict)


class Transaction(BaseModel):
    """One paid task cost, as shown on the accounting page."""
    model_config = ConfigDict(extra="ignore")

    id: int
    task_id: int
    amount: Decimal
    payment_method: PaymentMethod
    paid_at: datetime | None = None
    task_title: str | None = None


class TransactionList(BaseModel):
    """Paginated transactions."""
    transactions: list[Transaction] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)


class BankTransferReviewRequest(BaseModel):
    """Body of POST /api/admin/payments/{transfer_id}/review."""
    model_config = ConfigDict(populate_by_name=True)

    task_cost_id: int = Field(..., alias="taskCostId", gt=0)
    accepted: bool
