"""Error Hierarchy - typed, categorized exceptions for all seat allocation failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors answer HTTP 400; storage errors answer 500; auth errors answer 401
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with SeatAllocatorError base: one FastAPI handler catches all
    - NotFoundError and ConflictError keep HTTP 400 because existing clients of the
      seat API branch on 400 vs 500 only
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"
    AUTHENTICATION = "authentication"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Identifiers involved in the failing operation, for logs and clients."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    route_id: str | None = None
    seat_id: str | None = None
    student_id: str | None = None
    field_name: str | None = None
    debug_info: dict[str, Any] | None = None


class SeatAllocatorError(Exception):
    """Base exception for all seat allocator errors."""

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
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.context.field_name:
            body["field"] = self.context.field_name
        return {"error": body}

    def log_extra(self) -> dict:
        """Fields for logger `extra=` so JSON logs carry the identifiers."""
        return {
            "error_code": self.code,
            "route_id": self.context.route_id,
            "seat_id": self.context.seat_id,
            "student_id": self.context.student_id,
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(SeatAllocatorError):
    """Malformed or missing input. Caller's fault, never retried."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field_name = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.field = field


class NotFoundError(SeatAllocatorError):
    """Referenced route, seat or student does not exist."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 400,
        )


class ConflictError(SeatAllocatorError):
    """Operation would break an occupancy invariant."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 400,
        )


class AuthenticationError(SeatAllocatorError):
    """Missing, malformed or expired bearer token."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "AUTHENTICATION_ERROR", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(SeatAllocatorError):
    """Underlying persistence failed. Message stays generic."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
