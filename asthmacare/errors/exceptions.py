# =============================================================================
# asthmacare/errors/exceptions.py
# Exception taxonomy for AsthmaCare
# =============================================================================

from typing import Optional, Dict, Any


class AsthmaCareError(Exception):
    """
    Base exception for all AsthmaCare errors.

    Each subclass carries its own ``default_code``; context passed as
    keyword arguments lands in ``details`` (None values are dropped).

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "DB_409")
        details: Additional context as a dictionary
        recoverable: Whether the app can carry on after it
    """

    default_code = "AC_000"
    recoverable_by_default = True

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: Optional[bool] = None,
        **context: Any,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details or {})
        self.details.update({k: v for k, v in context.items() if v is not None})
        self.recoverable = self.recoverable_by_default if recoverable is None else recoverable

    def __str__(self) -> str:
        if not self.details:
            return f"[{self.code}] {self.message}"
        return f"[{self.code}] {self.message} | Details: {self.details}"

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form for logs and exports"""
        return {
            "error_type": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# SESSION
# =============================================================================

class UnauthenticatedError(AsthmaCareError):
    """An owner-scoped operation ran without a signed-in user"""

    default_code = "AUTH_001"

    def __init__(self, message: str = "User not authenticated", **kwargs):
        super().__init__(message, **kwargs)


class AuthenticationError(AsthmaCareError):
    """The identity provider rejected a sign-in, sign-up or reset request"""

    default_code = "AUTH_002"

    def __init__(self, message: str, provider_code: Optional[str] = None, **kwargs):
        super().__init__(message, provider_code=provider_code, **kwargs)


# =============================================================================
# ROW STORE
# =============================================================================

class DatabaseError(AsthmaCareError):
    """Base for errors reported by PostgREST / Postgres"""

    default_code = "DB_000"

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        db_code: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, table=table, db_code=db_code, **kwargs)

    @property
    def db_code(self) -> Optional[str]:
        return self.details.get("db_code")


class NotFoundError(DatabaseError):
    default_code = "DB_404"


class ConflictError(DatabaseError):
    """Uniqueness violation"""
    default_code = "DB_409"


class PermissionDeniedError(DatabaseError):
    """Ownership mismatch or row level security violation"""
    default_code = "DB_403"


class RecordValidationError(DatabaseError):
    """A record failed validation, client side or by a table constraint"""

    default_code = "DATA_001"

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, field=field, **kwargs)


# =============================================================================
# INFRASTRUCTURE
# =============================================================================

class TransportError(AsthmaCareError):
    """The backend or an external API could not be reached"""

    default_code = "NET_001"

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(message, service=service, status_code=status_code, **kwargs)


class StorageOperationError(AsthmaCareError):
    default_code = "STORAGE_001"

    def __init__(
        self,
        message: str,
        bucket: Optional[str] = None,
        path: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, bucket=bucket, path=path, **kwargs)


class ConfigurationError(AsthmaCareError):
    """Missing or placeholder configuration; the app cannot run without it"""

    default_code = "CONFIG_001"
    recoverable_by_default = False

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(message, config_key=config_key, **kwargs)


ERRORS_BY_CODE = {
    cls.default_code: cls
    for cls in (
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
    )
}
