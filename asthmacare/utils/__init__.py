from .timeutils import parse_timestamp, resolve_now, utc_now
from .validators import (
    format_file_size,
    generate_unique_filename,
    is_valid_email,
    is_valid_phone_number,
    validate_file,
)

__all__ = [
    "parse_timestamp",
    "resolve_now",
    "utc_now",
    "format_file_size",
    "generate_unique_filename",
    "is_valid_email",
    "is_valid_phone_number",
    "validate_file",
]
