"""Error Hierarchy — typed, categorized exceptions for all Digital ID failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope {"error": {...}}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with DigitalIdError base: FastAPI global handler catches all (ADR: uniform error shape)
    - DatabaseConnectionError instead of ConnectionError: never shadow the builtin
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
    AUTHENTICATION = "authentication"
    CORS = "cors"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INITIALIZATION = "initialization"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    path: str | None = None


class DigitalIdError(Exception):
    """Base exception for all Digital ID errors."""

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
        if self.context.path:
            body["path"] = self.context.path
        return {"error": body}


# ─── Client Errors (400-level) ──────────────────────────────────

class AuthenticationError(DigitalIdError):
    """Access token cookie missing, malformed, or expired."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class OriginNotAllowedError(DigitalIdError):
    """Request origin is not on the CORS whitelist."""
    def __init__(self, origin: str, context: ErrorContext | None = None):
        super().__init__(
            f"CORS Error : {origin} is not allowed by CORS",
            "CORS_ORIGIN_REJECTED", ErrorCategory.CORS,
            ErrorSeverity.WARNING, context, 403,
        )
        self.origin = origin


class ResourceNotFoundError(DigitalIdError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseConnectionError(DigitalIdError):
    """Opening or probing the connection pool failed (network, credentials, timeout)."""
    def __init__(self, message: str, operation: str = "connect", context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_CONNECTION_ERROR", ErrorCategory.INITIALIZATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class SeedError(DigitalIdError):
    """Writing the baseline admin record failed for a reason other than 'already exists'."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Admin seed failed: {message}",
            "SEED_ERROR", ErrorCategory.INITIALIZATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(DigitalIdError):
    """Database operation failed inside a request session."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class UnknownError(DigitalIdError):
    """Anything else caught at the request boundary."""
    def __init__(self, cause: BaseException, context: ErrorContext | None = None):
        super().__init__(
            f"{type(cause).__name__}: {cause}",
            "UNKNOWN_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.cause = cause

    @classmethod
    def wrap(cls, exc: BaseException) -> DigitalIdError:
        """Return exc unchanged if it is already typed, else wrap it."""
        if isinstance(exc, DigitalIdError):
            return exc
        return cls(exc)
