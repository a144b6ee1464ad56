# =============================================================================
# asthmacare/services/base_service.py
# Base Service Class with Common Functionality
# =============================================================================

from __future__ import annotations
from abc import ABC
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

import httpx
from postgrest.exceptions import APIError

from asthmacare.data.supabase_client import OwnerScopedTable, TABLES
from asthmacare.errors import (
    ERRORS_BY_CODE,
    AsthmaCareError,
    NotFoundError,
    TransportError,
    UnauthenticatedError,
    classify_api_error,
    handle_error,
)
from asthmacare.logging import LogContext, get_logger

if TYPE_CHECKING:
    from asthmacare.auth.session import AuthSession


@dataclass
class ServiceResult:
    """
    Outcome of a service operation.

    Expected failures (bad input, a constraint violation, a rejected
    sign-in) come back as ``success=False`` with a user-facing ``error``
    and the taxonomy ``error_code``; ``metadata`` holds the error details
    on failure and operation extras (e.g. an air quality level) on success.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, data: Any = None, metadata: Optional[Dict[str, Any]] = None) -> ServiceResult:
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "AC_000",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        return cls(success=False, error=error, error_code=error_code, metadata=metadata)

    @classmethod
    def from_exception(cls, e: AsthmaCareError) -> ServiceResult:
        """Failed result carrying an AsthmaCare error's message, code and details"""
        return cls.fail(e.message, error_code=e.code, metadata=e.details or None)

    def raise_for_error(self) -> ServiceResult:
        """
        Re-raise a failed result as the AsthmaCare error its code names.

        For callers that return plain values instead of a ServiceResult,
        so a failed read never passes for an empty one.

        Returns:
            self, when the operation succeeded
        """
        if self.success:
            return self
        error_class = ERRORS_BY_CODE.get(self.error_code, AsthmaCareError)
        raise error_class(self.error, code=self.error_code, details=self.metadata)


class BaseService(ABC):
    """
    Abstract base class for all services.

    Provides common functionality:
    - Logging
    - Owner resolution from the browser session
    - Owner-scoped table access
    - Query execution with error translation

    Usage:
        class MyService(BaseService):
            def list(self) -> ServiceResult:
                rows = self.scoped("symptoms")
                return self.run_query("List symptoms", lambda: rows.select().execute())
    """

    def __init__(self, client, session: Optional[AuthSession] = None):
        self.client = client
        self.session = session
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str) -> LogContext:
        """
        Create a logging context for an operation.

        Usage:
            with self.log_operation("Uploading report"):
                storage.upload(...)
        """
        return LogContext(self.logger, operation)

    # ==================== OWNER ====================

    def require_owner_id(self) -> str:
        """
        Raises:
            UnauthenticatedError: If no user is signed in
        """
        if self.session is None:
            raise UnauthenticatedError()
        return self.session.require_owner_id()

    def scoped(self, table_key: str) -> OwnerScopedTable:
        """Owner-scoped access to a registered table for the signed-in user."""
        return OwnerScopedTable(self.client, TABLES[table_key], self.require_owner_id())

    # ==================== EXECUTION ====================

    def run_query(
        self,
        operation: str,
        query_fn: Callable[[], Any],
        single: bool = False,
        table: Optional[str] = None,
    ) -> ServiceResult:
        """
        Execute a query builder and wrap its rows in a ServiceResult.

        "No rows" answers are successes (None for single, [] otherwise).
        Other database errors become failed results carrying the
        user-facing message.

        Raises:
            TransportError: If the backend cannot be reached
        """
        try:
            response = query_fn()
        except APIError as e:
            error = classify_api_error(e, table=table)
            if isinstance(error, NotFoundError):
                return ServiceResult.ok(None if single else [])
            handle_error(error, show_user_message=False)
            return ServiceResult.from_exception(error)
        except (httpx.TransportError, ConnectionError) as e:
            self.logger.error(f"{operation} failed: backend unreachable ({e})")
            raise TransportError(
                f"{operation} failed: backend unreachable", service="supabase"
            ) from e

        data = getattr(response, "data", None)
        if single:
            if isinstance(data, list):
                data = data[0] if data else None
            return ServiceResult.ok(data)
        return ServiceResult.ok(data if data is not None else [])

    def safe_execute(
        self,
        operation: str,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> ServiceResult:
        """
        Execute a function with error handling and logging.

        Auth and transport errors are not caught.

        Returns:
            ServiceResult with success/failure status
        """
        with self.log_operation(operation):
            try:
                result = func(*args, **kwargs)
                return ServiceResult.ok(result)
            except (UnauthenticatedError, TransportError):
                raise
            except AsthmaCareError as e:
                handle_error(e, show_user_message=False)
                return ServiceResult.from_exception(e)
