# =============================================================================
# asthmacare/errors/__init__.py
# Centralized Error Handling for AsthmaCare
# =============================================================================

from .exceptions import (
    AsthmaCareError,
    UnauthenticatedError,
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    ConflictError,
    PermissionDeniedError,
    RecordValidationError,
    TransportError,
    StorageOperationError,
    ConfigurationError,
    ERRORS_BY_CODE,
)

from .database import (
    DATABASE_ERROR_MESSAGES,
    GENERIC_ERROR_MESSAGE,
    classify_api_error,
    format_database_error,
)

from .handlers import (
    USER_MESSAGES,
    user_message_for,
    handle_error,
    show_result,
    ErrorContext,
)

__all__ = [
    # Exceptions
    "AsthmaCareError",
    "UnauthenticatedError",
    "AuthenticationError",
    "DatabaseError",
    "NotFoundError",
    "ConflictError",
    "PermissionDeniedError",
    "RecordValidationError",
    "TransportError",
    "StorageOperationError",
    "ConfigurationError",
    "ERRORS_BY_CODE",
    # Database error translation
    "DATABASE_ERROR_MESSAGES",
    "GENERIC_ERROR_MESSAGE",
    "classify_api_error",
    "format_database_error",
    # Handlers
    "USER_MESSAGES",
    "user_message_for",
    "handle_error",
    "show_result",
    "ErrorContext",
]
