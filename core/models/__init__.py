# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - task.py: Task creation, cost estimates and cost records
# - payment.py: PayHere checkout form and notification schemas
# - application.py: Influencer applications, promises and proofs
# - withdrawal.py: Withdrawal requests
# - setup.py: Account setup wizard state
# - accounting.py: Admin accounting summaries and transactions
# - verification.py: Contact and platform ownership verification
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Task Models
# -----------------------------------------------------------------------------
from .task import (
    CalculateCostRequest,
    CostBreakdownResponse,
    CostEstimateRequest,
    CostEstimateResponse,
    PaymentMethod,
    PlatformCostLine,
    PlatformTargetInput,
    TargetRecord,
    TaskCostRecord,
    TaskCostResponse,
    TaskCreate,
    TaskStatus,
)

# -----------------------------------------------------------------------------
# Payment Models
# -----------------------------------------------------------------------------
from .payment import (
    BankTransferResponse,
    PayHereNotification,
    PayHereStatus,
    PaymentInitializeRequest,
    PaymentRequest,
    SetPaymentMethodRequest,
)

# -----------------------------------------------------------------------------
# Application Models
# -----------------------------------------------------------------------------
from .application import (
    ApplicationPromise,
    ApplicationSubmitRequest,
    ApplicationSubmitResponse,
    ProofStatus,
    ProofSubmission,
    ProofsSubmitRequest,
    ProofType,
)

# -----------------------------------------------------------------------------
# Other Models
# -----------------------------------------------------------------------------
from .withdrawal import WithdrawalCreate, WithdrawalStatus
from .setup import SetupState, SetupStep, UserType
from .accounting import (
    AccountingSummary,
    BankTransferReviewRequest,
    Transaction,
    TransactionList,
    TransactionSort,
)
from .verification import (
    ChannelCheckRequest,
    ContactCodeConfirmRequest,
    ContactCodeRequest,
    ContactCodeResponse,
    VerificationCodeRequest,
    VerificationCodeResponse,
    VerificationResult,
)

__all__ = [
    # Task
    "CalculateCostRequest",
    "CostBreakdownResponse",
    "CostEstimateRequest",
    "CostEstimateResponse",
    "PaymentMethod",
    "PlatformCostLine",
    "PlatformTargetInput",
    "TargetRecord",
    "TaskCostRecord",
    "TaskCostResponse",
    "TaskCreate",
    "TaskStatus",
    # Payment
    "BankTransferResponse",
    "PayHereNotification",
    "PayHereStatus",
    "PaymentInitializeRequest",
    "PaymentRequest",
    "SetPaymentMethodRequest",
    # Application
    "ApplicationPromise",
    "ApplicationSubmitRequest",
    "ApplicationSubmitResponse",
    "ProofStatus",
    "ProofSubmission",
    "ProofsSubmitRequest",
    "ProofType",
    # Withdrawal
    "WithdrawalCreate",
    "WithdrawalStatus",
    # Setup
    "SetupState",
    "SetupStep",
    "UserType",
    # Accounting
    "AccountingSummary",
    "BankTransferReviewRequest",
    "Transaction",
    "TransactionList",
    "TransactionSort",
    # Verification
    "ChannelCheckRequest",
    "ContactCodeConfirmRequest",
    "ContactCodeRequest",
    "ContactCodeResponse",
    "VerificationCodeRequest",
    "VerificationCodeResponse",
    "VerificationResult",
]
