"""Error Hierarchy — typed, categorized exceptions for every Founding Circle failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Business outcomes (not found, invalid transition, rejected credential) are 400-level
      and recoverable; store failures are 500-level and critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with FoundingCircleError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - AccessCodeValidationError carries an ActivationFailure reason so callers can tell
      "not yet approved" apart from "not found" without parsing messages
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from foundingcircle.core.domain_types import ActivationFailure


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    member_id: str | None = None
    queue_number: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class FoundingCircleError(Exception):
    """Base exception for all Founding Circle errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    @property
    def is_business_outcome(self) -> bool:
        return self.http_status < 500

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "member_id": self.context.member_id,
                    "queue_number": self.context.queue_number,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class MemberNotFoundError(FoundingCircleError):
    """No member matches the given id or email."""
    def __init__(self, member_ref: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.member_id = ctx.member_id or member_ref
        super().__init__(
            f"Member '{member_ref}' not found",
            "MEMBER_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


class DuplicateKeyError(FoundingCircleError):
    """Store-level uniqueness violation (email collision at insert time)."""
    def __init__(self, key: str, context: ErrorContext | None = None):
        super().__init__(
            f"Duplicate value for unique key '{key}'",
            "DUPLICATE_KEY", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.key = key


class InvalidTransitionError(FoundingCircleError):
    """Attempted status move violates the forward-only lifecycle."""
    def __init__(
        self, current: str, target: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.user_message = ctx.user_message or "Member already approved or activated"
        super().__init__(
            f"Cannot transition member from '{current}' to '{target}'",
            "INVALID_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.current = current
        self.target = target


_ACTIVATION_FAILURES: dict[ActivationFailure, tuple[str, str]] = {
    ActivationFailure.NOT_FOUND: (
        "ACCESS_CODE_INVALID",
        "Invalid access code for this email",
    ),
    ActivationFailure.NOT_YET_APPROVED: (
        "ACCESS_CODE_NOT_APPROVED",
        "Your waitlist spot has not been approved yet. "
        "We will notify you when it is your turn!",
    ),
    ActivationFailure.NOT_ACTIVATABLE: (
        "ACCESS_CODE_NOT_ACTIVATABLE",
        "Access code is not valid for activation",
    ),
}


class AccessCodeValidationError(FoundingCircleError):
    """Presented (access code, email) pair cannot be activated."""
    def __init__(
        self, reason: ActivationFailure, context: ErrorContext | None = None,
    ):
        code, message = _ACTIVATION_FAILURES[reason]
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.INFO, context, 400,
        )
        self.reason = reason


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreUnavailableError(FoundingCircleError):
    """Member store could not be reached or the operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_message = ctx.user_message or "Member store is temporarily unavailable"
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation
