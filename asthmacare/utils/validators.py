"""
Input validation and formatting helpers used by the record services.
"""

import math
import re
import time
import uuid
from pathlib import PurePath
from typing import Dict, List, Optional, Sequence

PHONE_PATTERN = re.compile(r"^\+?[\d\s\-\(\)]{10,}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB
ALLOWED_UPLOAD_TYPES = ("image/jpeg", "image/png", "application/pdf")


def is_valid_phone_number(phone: Optional[str]) -> bool:
    return bool(phone) and PHONE_PATTERN.match(phone) is not None


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def validate_file(
    size: int,
    content_type: Optional[str],
    max_size: int = MAX_UPLOAD_BYTES,
    allowed_types: Sequence[str] = ALLOWED_UPLOAD_TYPES,
) -> Dict[str, object]:
    """
    Check an upload against size and type limits.

    Returns:
        {"valid": bool, "errors": [str, ...]}
    """
    errors: List[str] = []

    if size > max_size:
        errors.append(f"File size must be less than {max_size / (1024 * 1024):g}MB")

    if content_type not in allowed_types:
        errors.append(f"File type {content_type} is not allowed")

    return {"valid": not errors, "errors": errors}


def generate_unique_filename(original_name: str, owner_id: str) -> str:
    """<owner>_<epoch ms>_<random>.<ext> so uploads never collide."""
    extension = PurePath(original_name).suffix.lstrip(".") or "bin"
    timestamp = int(time.time() * 1000)
    random_part = uuid.uuid4().hex[:13]
    return f"{owner_id}_{timestamp}_{random_part}.{extension}"


def format_file_size(size_bytes: int) -> str:
    """Human readable size, e.g. 1536 -> '1.5 KB'."""
    if size_bytes <= 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    index = min(int(math.floor(math.log(size_bytes, 1024))), len(units) - 1)
    value = round(size_bytes / math.pow(1024, index), 2)
    return f"{value:g} {units[index]}"
