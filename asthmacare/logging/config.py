# =============================================================================
# asthmacare/logging/config.py
# Logging Configuration for AsthmaCare
# =============================================================================

import logging
import os
import sys
import time
from pathlib import Path
from datetime import date
from typing import Optional, Union


LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_DIR = Path(os.getenv("ASTHMACARE_LOG_DIR", "logs"))

# The supabase client stack (gotrue, postgrest, storage3, realtime) logs every request
QUIET_LOGGERS = (
    "urllib3",
    "httpx",
    "httpcore",
    "hpack",
    "supabase",
    "postgrest",
    "storage3",
    "realtime",
    "gotrue",
    "websockets",
)

_configured = False


def setup_logging(
    level: Union[int, str, None] = None,
    log_to_file: bool = True,
    log_filename: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure application-wide logging once per process.

    Streamlit re-executes the entry script on every interaction, so repeat
    calls are no-ops unless ``force`` is set.

    Args:
        level: Level or level name (default: $ASTHMACARE_LOG_LEVEL, else INFO)
        log_to_file: Also write to LOG_DIR/asthmacare_YYYY-MM-DD.log
        log_filename: Custom log filename
        force: Reconfigure even if already configured
    """
    global _configured
    if _configured and not force:
        return

    level = level or os.getenv("ASTHMACARE_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        filename = log_filename or f"asthmacare_{date.today():%Y-%m-%d}.log"
        handlers.append(logging.FileHandler(LOG_DIR / filename, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
    logging.getLogger("asthmacare").info(f"Logging initialized ({logging.getLevelName(level)})")


def get_logger(name: str) -> logging.Logger:
    """
    Usage:
        from asthmacare.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Symptom logged")
    """
    return logging.getLogger(name)


class LogContext:
    """
    Context manager for logging operation timing and status.

    Failures flagged ``recoverable`` (AsthmaCare errors such as a rejected
    record) are logged as warnings; anything else as an error with traceback.
    Exceptions are never suppressed.

    Usage:
        with LogContext(logger, "Uploading health report"):
            storage.upload(...)
        # Logs: "Uploading health report... started"
        # Logs: "Uploading health report... completed (0.42s)"
    """

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time = None

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self.start_time

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info(f"{self.operation}... started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.info(f"{self.operation}... completed ({self.elapsed:.2f}s)")
        elif getattr(exc_val, "recoverable", False):
            self.logger.warning(f"{self.operation}... failed ({self.elapsed:.2f}s): {exc_val}")
        else:
            self.logger.error(
                f"{self.operation}... failed ({self.elapsed:.2f}s): {exc_val}",
                exc_info=True,
            )
        return False
