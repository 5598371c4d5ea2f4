"""Error Hierarchy — typed, categorized exceptions for all conference-status failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ConferenceStatusError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - TransientStoreError vs MalformedRecordError: the reconciliation job retries the first
      on its next tick and skips the second for the current tick
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


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
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    conference_id: str | None = None
    field_name: str | None = None


class ConferenceStatusError(Exception):
    """Base exception for all conference-status errors."""

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

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "conference_id": self.context.conference_id,
                    "field": self.context.field_name,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class MalformedRecordError(ConferenceStatusError):
    """Stored record has a field in an unrecognized shape."""
    def __init__(
        self, message: str, field_name: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field_name = ctx.field_name or field_name
        super().__init__(
            message, "MALFORMED_RECORD", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 422,
        )
        self.field_name = field_name


class MalformedTimestampError(MalformedRecordError):
    """Timestamp value cannot be normalized to an instant."""
    def __init__(
        self, raw: object, field_name: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Unrecognized timestamp shape: {type(raw).__name__}",
            field_name, context,
        )
        self.code = "MALFORMED_TIMESTAMP"
        self.raw = raw


class ConferenceScheduleError(ConferenceStatusError):
    """Start/end times are inconsistent."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_SCHEDULE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class UnknownFieldError(ConferenceStatusError):
    """Update names a field the store does not allow writing."""
    def __init__(self, field_names: list[str], context: ErrorContext | None = None):
        context = context or ErrorContext()
        context.field_name = ", ".join(field_names)
        super().__init__(
            f"Not updatable: {context.field_name}",
            "UNKNOWN_FIELD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidTransitionError(ConferenceStatusError):
    """Manual status change not allowed from the current state."""
    def __init__(
        self, current: str, target: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Cannot move conference from '{current}' to '{target}'",
            "INVALID_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.current = current
        self.target = target


class ConferenceNotLiveError(ConferenceStatusError):
    """Operation needs a live conference with an end time."""
    def __init__(self, status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Conference is {status}, countdown only runs while live with an end time",
            "CONFERENCE_NOT_LIVE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.INFO, context, 409,
        )
        self.status = status


class ResourceNotFoundError(ConferenceStatusError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.conference_id = ctx.conference_id or resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(ConferenceStatusError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class TransientStoreError(ConferenceStatusError):
    """Store unreachable or refused the operation — retried on the next tick."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "TRANSIENT_STORE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.WARNING, context, 503,
        )
        self.operation = operation


class ReconciliationTimeoutError(ConferenceStatusError):
    """A reconciliation pass exceeded its deadline."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Reconciliation pass exceeded {timeout_seconds:g}s",
            "RECONCILIATION_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING, context, 504,
        )
        self.timeout_seconds = timeout_seconds
