# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .task_service import TaskService, current_rate_table
from .storage_service import StorageService
from .payment_service import PaymentGatewayConfig, PaymentService
from .application_service import ApplicationService
from .withdrawal_service import WithdrawalService
from .verification_service import VerificationService
from .profile_service import ProfileService
from .accounting_service import AccountingService

__all__ = [
    "TaskService",
    "current_rate_table",
    "StorageService",
    "PaymentGatewayConfig",
    "PaymentService",
    "ApplicationService",
    "WithdrawalService",
    "VerificationService",
    "ProfileService",
    "AccountingService",
]
