# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class BrandSyncException(Exception):
    """
    Base exception for the BrandSync API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "BRANDSYNC_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Task Exceptions
# =============================================================================

class TaskNotFoundError(BrandSyncException):
    """Raised when a task ID doesn't exist."""

    def __init__(self, task_id: int):
        super().__init__(
            message=f"Task not found: {task_id}",
            code="TASK_NOT_FOUND",
            status_code=404,
            suggestion="Check that the task ID is correct",
            details={"task_id": task_id}
        )


class NotTaskOwnerError(BrandSyncException):
    """Raised when a user acts on a task they did not create."""

    def __init__(self, task_id: int):
        super().__init__(
            message="Unauthorized - Not task owner",
            code="NOT_TASK_OWNER",
            status_code=403,
            suggestion="Only the brand that created the task can do this",
            details={"task_id": task_id}
        )


class InvalidTaskStatusError(BrandSyncException):
    """Raised when a task is not in the status an operation requires."""

    def __init__(self, task_id: int, status: str | None, expected: str):
        super().__init__(
            message=f"Invalid task status for this operation: {status}",
            code="INVALID_TASK_STATUS",
            status_code=400,
            suggestion=f"The task must be {expected}",
            details={"task_id": task_id, "status": status, "expected": expected}
        )


class TaskCostNotFoundError(BrandSyncException):
    """Raised when a task has no cost record yet."""

    def __init__(self, task_id: int):
        super().__init__(
            message=f"task_cost not found for task: {task_id}",
            code="TASK_COST_NOT_FOUND",
            status_code=404,
            suggestion="Calculate the task cost first using POST /api/tasks/calculate-cost",
            details={"task_id": task_id}
        )


# =============================================================================
# Payment Exceptions
# =============================================================================

class AlreadyPaidError(BrandSyncException):
    """Raised when trying to pay for a task that is already paid."""

    def __init__(self, task_id: int):
        super().__init__(
            message="Invalid payment request: task is already paid",
            code="ALREADY_PAID",
            status_code=400,
            details={"task_id": task_id}
        )


class MissingContactInfoError(BrandSyncException):
    """Raised when the buyer has no email or phone for the gateway."""

    def __init__(self, missing: list[str]):
        super().__init__(
            message=f"Missing contact details: {', '.join(missing)}",
            code="MISSING_CONTACT_INFO",
            status_code=400,
            suggestion="Add an email address and mobile number to your profile",
            details={"missing": missing}
        )


class PaymentConfigurationError(BrandSyncException):
    """Raised when payment gateway settings are missing."""

    def __init__(self, missing: list[str]):
        super().__init__(
            message="Payment gateway configuration error",
            code="PAYMENT_CONFIGURATION_ERROR",
            status_code=500,
            suggestion=f"Set {', '.join(missing)} in the environment",
            details={"missing": missing}
        )


class InvalidNotificationError(BrandSyncException):
    """Raised when a gateway notification is malformed."""

    def __init__(self, reason: str):
        super().__init__(
            message=reason,
            code="INVALID_NOTIFICATION",
            status_code=400,
        )


class InvalidSignatureError(BrandSyncException):
    """Raised when a gateway notification signature does not verify."""

    def __init__(self, order_id: str):
        super().__init__(
            message="Invalid signature",
            code="INVALID_SIGNATURE",
            status_code=400,
            details={"order_id": order_id}
        )


# =============================================================================
# Application Exceptions
# =============================================================================

class ApplicationNotFoundError(BrandSyncException):
    """Raised when an application doesn't exist or isn't the user's."""

    def __init__(self, application_id: int):
        super().__init__(
            message=f"Application not found: {application_id}",
            code="APPLICATION_NOT_FOUND",
            status_code=404,
            suggestion="Check that the application ID is correct",
            details={"application_id": application_id}
        )


class DuplicateApplicationError(BrandSyncException):
    """Raised when an influencer applies to the same task twice."""

    def __init__(self, task_id: int):
        super().__init__(
            message="You have already applied to this task",
            code="DUPLICATE_APPLICATION",
            status_code=409,
            suggestion="Cancel the existing application before applying again",
            details={"task_id": task_id}
        )


class NoValidPromisesError(BrandSyncException):
    """Raised when an application promises no views on any platform."""

    def __init__(self):
        super().__init__(
            message="No valid platform selections",
            code="NO_VALID_PROMISES",
            status_code=400,
            suggestion="Promise a view count above zero on at least one platform",
        )


# =============================================================================
# Withdrawal Exceptions
# =============================================================================

class WithdrawalBelowMinimumError(BrandSyncException):
    """Raised when a withdrawal is below the minimum amount."""

    def __init__(self, amount: float, minimum: float):
        super().__init__(
            message=f"Minimum withdrawal amount is LKR {minimum:,.0f}",
            code="WITHDRAWAL_BELOW_MINIMUM",
            status_code=400,
            details={"amount": amount, "minimum": minimum}
        )


class InsufficientBalanceError(BrandSyncException):
    """Raised when a withdrawal exceeds the account balance."""

    def __init__(self, amount: float, balance: float):
        super().__init__(
            message="Insufficient balance",
            code="INSUFFICIENT_BALANCE",
            status_code=400,
            details={"amount": amount, "balance": balance}
        )


# =============================================================================
# Verification Exceptions
# =============================================================================

class ContactNotFoundError(BrandSyncException):
    """Raised when a contact doesn't exist or isn't the user's."""

    def __init__(self, contact_id: int):
        super().__init__(
            message="Contact not found",
            code="CONTACT_NOT_FOUND",
            status_code=404,
            details={"contact_id": contact_id}
        )


class ContactAlreadyVerifiedError(BrandSyncException):
    """Raised when verifying a contact that is already verified."""

    def __init__(self, contact_id: int):
        super().__init__(
            message="Contact is already verified",
            code="CONTACT_ALREADY_VERIFIED",
            status_code=400,
            details={"contact_id": contact_id}
        )


class InvalidContactTypeError(BrandSyncException):
    """Raised when a non-mobile contact is sent an SMS code."""

    def __init__(self, contact_type: str | None):
        super().__init__(
            message="Invalid contact type. Only mobile numbers can be verified via SMS.",
            code="INVALID_CONTACT_TYPE",
            status_code=400,
            details={"type": contact_type}
        )


class VerificationLimitError(BrandSyncException):
    """Raised when a contact has used up today's verification codes."""

    def __init__(self, limit: int):
        super().__init__(
            message=f"Daily verification limit ({limit}) exceeded. Please try again tomorrow.",
            code="VERIFICATION_LIMIT_EXCEEDED",
            status_code=429,
            details={"limit": limit}
        )


class InvalidVerificationCodeError(BrandSyncException):
    """Raised when a verification code is wrong or expired."""

    def __init__(self):
        super().__init__(
            message="Invalid or expired verification code",
            code="INVALID_VERIFICATION_CODE",
            status_code=400,
            suggestion="Request a new code and enter it within 15 minutes",
        )


class PendingVerificationNotFoundError(BrandSyncException):
    """Raised when checking a channel that has no unused code."""

    def __init__(self, profile_id: int):
        super().__init__(
            message="Profile not found or no pending verification",
            code="NO_PENDING_VERIFICATION",
            status_code=404,
            suggestion="Generate a verification code first",
            details={"profile_id": profile_id}
        )


class ChannelVerificationError(BrandSyncException):
    """Raised when the code isn't in the channel description or the channel can't be read."""

    def __init__(self, message: str, code: str = "CODE_NOT_IN_DESCRIPTION", status_code: int = 400):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            suggestion="Add the code, prefixed with #, to your channel description and try again",
        )


# =============================================================================
# Profile / Access Exceptions
# =============================================================================

class ProfileNotFoundError(BrandSyncException):
    """Raised when an influencer profile doesn't belong to the user."""

    def __init__(self, profile_id: int):
        super().__init__(
            message="Invalid profile or unauthorized access",
            code="PROFILE_NOT_FOUND",
            status_code=403,
            details={"profile_id": profile_id}
        )


class AdminRequiredError(BrandSyncException):
    """Raised when a non-admin calls an admin endpoint."""

    def __init__(self):
        super().__init__(
            message="Unauthorized - Admin access required",
            code="ADMIN_REQUIRED",
            status_code=403,
        )


class SetupTransitionError(BrandSyncException):
    """Raised when the setup wizard is driven out of order."""

    def __init__(self, step: str, action: str, reason: str | None = None):
        super().__init__(
            message=f"Cannot {action} during setup step '{step}'" + (f": {reason}" if reason else ""),
            code="SETUP_TRANSITION_ERROR",
            status_code=400,
            details={"step": step, "action": action}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(BrandSyncException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, content_type: str | None, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {content_type}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"content_type": content_type, "allowed_types": allowed}
        )


class FileTooLargeError(BrandSyncException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class StorageUploadError(BrandSyncException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def brandsync_exception_handler(
    request: Request,
    exc: BrandSyncException
) -> JSONResponse:
    """
    Convert BrandSyncException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    The payment endpoints promise 400 for a bad request body, so request
    validation errors are reported as 400 rather than FastAPI's 422.
    """
    errors = exc.errors() if hasattr(exc, "errors") else str(exc)
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": jsonable_errors(errors),
        }
    )


def jsonable_errors(errors: Any) -> Any:
    """Strip non-serializable context (exception objects) from pydantic errors."""
    if not isinstance(errors, list):
        return errors
    cleaned = []
    for error in errors:
        item = {k: v for k, v in error.items() if k in ("loc", "msg", "type")}
        cleaned.append(item)
    return cleaned
