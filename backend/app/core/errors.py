"""Error Hierarchy — typed, categorized exceptions for all Tarefas API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST body; validation problems use the problem-details shape
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TarefasError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from app.core.domain_types import IdentityError, ValidationErrors


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
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    task_id: int | None = None
    debug_info: dict[str, Any] | None = None


class TarefasError(Exception):
    """Base exception for all Tarefas API errors."""

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
            }
        }

    def response_headers(self) -> dict[str, str] | None:
        return None


# ─── Domain Errors (400-level) ──────────────────────────────────

VALIDATION_PROBLEM_TYPE = "https://tools.ietf.org/html/rfc7231#section-6.5.1"
VALIDATION_PROBLEM_TITLE = "One or more validation errors occurred."


class ValidationProblemError(TarefasError):
    """Structural validation failed; carries field -> messages mapping."""
    def __init__(self, errors: ValidationErrors, context: ErrorContext | None = None):
        super().__init__(
            VALIDATION_PROBLEM_TITLE, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.errors = {name: list(messages) for name, messages in errors.items()}

    def to_response(self) -> dict:
        return {
            "type": VALIDATION_PROBLEM_TYPE,
            "title": VALIDATION_PROBLEM_TITLE,
            "status": self.http_status,
            "errors": self.errors,
        }


class BusinessRuleError(TarefasError):
    """Request rejected by a business rule (message shown to the client)."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class UserNotInformedError(BusinessRuleError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Usuário não informado", "USER_NOT_INFORMED", context)


class UserLockedOutError(BusinessRuleError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Usuário bloqueado", "USER_LOCKED_OUT", context)


class InvalidCredentialsError(BusinessRuleError):
    """Same message for unknown user and wrong password."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Usuário ou senha inválidos", "INVALID_CREDENTIALS", context)


class SaveFailedError(BusinessRuleError):
    """Commit reported zero rows affected."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Houve um problema ao salvar o registro", "SAVE_FAILED", context,
        )


class IdentityOperationError(TarefasError):
    """User creation refused by the identity store."""
    def __init__(self, errors: list[IdentityError], context: ErrorContext | None = None):
        super().__init__(
            "; ".join(e.description for e in errors) or "Identity operation failed",
            "IDENTITY_ERROR", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.errors = list(errors)

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = [
            {"code": e.code, "description": e.description} for e in self.errors
        ]
        return response


class AuthenticationError(TarefasError):
    """Missing, malformed, expired or forged bearer token."""
    def __init__(self, message: str = "Authentication required", context: ErrorContext | None = None):
        super().__init__(
            message, "NOT_AUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )

    def response_headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class PermissionDeniedError(TarefasError):
    """Authenticated caller lacks the claim required by the policy."""
    def __init__(self, permission: str, context: ErrorContext | None = None):
        super().__init__(
            f"Missing required permission: {permission}",
            "PERMISSION_DENIED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.permission = permission


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TarefasError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
