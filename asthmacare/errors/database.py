# =============================================================================
# asthmacare/errors/database.py
# Translate PostgREST / Postgres error codes into the AsthmaCare taxonomy
# =============================================================================

from __future__ import annotations
from typing import Dict, Optional

from postgrest.exceptions import APIError

from .exceptions import (
    AsthmaCareError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    RecordValidationError,
)


GENERIC_ERROR_MESSAGE = "An unexpected error occurred"

# User-facing messages keyed by Postgres SQLSTATE or PostgREST code
DATABASE_ERROR_MESSAGES: Dict[str, str] = {
    "23505": "This record already exists",
    "23503": "Referenced record does not exist",
    "23502": "Required field is missing",
    "42501": "Permission denied",
    "PGRST116": "Record not found",
    "PGRST301": "Row Level Security policy violated",
}

_ERROR_CLASSES = {
    "23505": ConflictError,
    "23503": RecordValidationError,
    "23502": RecordValidationError,
    "23514": RecordValidationError,
    "22P02": RecordValidationError,
    "42501": PermissionDeniedError,
    "PGRST301": PermissionDeniedError,
    "PGRST116": NotFoundError,
}

DUPLICATE_KEY = "23505"
NO_ROWS = "PGRST116"


def format_database_error(code: Optional[str]) -> str:
    """
    Return the user-facing message for a database error code.

    Unmapped (or missing) codes produce the generic message.
    """
    if code is None:
        return GENERIC_ERROR_MESSAGE
    return DATABASE_ERROR_MESSAGES.get(str(code), GENERIC_ERROR_MESSAGE)


def classify_api_error(error: APIError, table: Optional[str] = None) -> AsthmaCareError:
    """
    Map a PostgREST APIError onto the exception taxonomy.

    Args:
        error: Error raised by a query builder's execute()
        table: Table the query ran against (kept in the details)

    Returns:
        A DatabaseError subclass for known codes, otherwise a generic DatabaseError
    """
    code = getattr(error, "code", None)
    code = str(code) if code is not None else None
    error_class = _ERROR_CLASSES.get(code, DatabaseError)

    details = {}
    raw_message = getattr(error, "message", None)
    if raw_message:
        details["raw_message"] = raw_message
    hint = getattr(error, "hint", None)
    if hint:
        details["hint"] = hint

    return error_class(
        format_database_error(code),
        table=table,
        db_code=code,
        details=details,
    )
