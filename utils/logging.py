"""
Logging Configuration Module

Console logging for the form filling pipeline, as colored text or one JSON
object per line (``LOG_JSON``).

User speech must never reach the logs. Anything passed through ``extra``
under a transcript-like key (``transcript``, ``text``, ``raw_response``,
``prompt``) is replaced by its length before any handler sees it, so call
sites can hand over the value and still stay safe.

Usage:
    from utils.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Parsing transcript", extra={"transcript": text, "form": "Signup"})
    # -> extra.transcript == "<redacted 42 chars>"
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from config.settings import settings


# Keys whose values carry user speech or model output
REDACTED_KEYS = frozenset({"transcript", "text", "raw_response", "prompt"})

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def redact(value: Any) -> str:
    """Describe a sensitive value by its size only."""
    if value is None:
        return "<redacted>"
    return f"<redacted {len(str(value))} chars>"


def record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields a call site attached to the record via ``extra``."""
    return {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}


# =============================================================================
# Filters
# =============================================================================

class TranscriptRedactionFilter(logging.Filter):
    """Replaces transcript-like ``extra`` fields with their length."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key in REDACTED_KEYS:
            value = getattr(record, key, None)
            if key in vars(record) and not str(value).startswith("<redacted"):
                setattr(record, key, redact(value))
        return True


# =============================================================================
# Formatters
# =============================================================================

class ColoredFormatter(logging.Formatter):
    """Level-colored console lines; ``extra`` fields are appended as key=value."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        line = super().format(record)
        line = line.replace(record.levelname, f"{color}{record.levelname:8}{self.RESET}", 1)

        extras = record_extras(record)
        if extras:
            line += " │ " + " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
        return line


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }

        extras = record_extras(record)
        if extras:
            log_data["extra"] = extras

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


# =============================================================================
# Logger Configuration
# =============================================================================

def setup_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None
) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Log level name. Defaults to DEBUG if settings.DEBUG else INFO.
        json_format: JSON lines instead of colored text. Defaults to settings.LOG_JSON.
    """
    if level is None:
        level = "DEBUG" if settings.DEBUG else "INFO"
    if json_format is None:
        json_format = settings.LOG_JSON

    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(TranscriptRedactionFilter())
    handler.setFormatter(
        JSONFormatter() if json_format else ColoredFormatter(
            fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
            datefmt="%H:%M:%S"
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Request-level chatter from the HTTP client used for form pages
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# =============================================================================
# Pipeline Events
# =============================================================================

def log_api_call(
    service: str,
    operation: str,
    success: bool,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None
) -> None:
    """
    Log one call to an external capability (LLM provider, form page fetch).

    Args:
        service: Provider or capability name, e.g. "anthropic", "form-fetch"
        operation: Model name or target
        success: Whether the call succeeded
        duration_ms: Call duration in milliseconds
        error: Error message if failed
    """
    logger = get_logger("capability")

    msg = f"{service} | {operation}"
    if duration_ms is not None:
        msg += f" | {duration_ms:.0f}ms"

    extra = {"service": service, "success": success}
    if success:
        logger.info(msg, extra=extra)
    else:
        logger.error(f"{msg} | failed: {error}", extra=extra)


def log_fill_result(
    form_name: Optional[str],
    updated: int,
    errors: int,
    success: bool = True
) -> None:
    """Log the outcome of one transcript-to-form reconciliation."""
    logger = get_logger("form")
    msg = f"Fill {'done' if success else 'failed'} for '{(form_name or 'Form')[:50]}'"
    extra = {"updated": updated, "errors": errors}

    if success:
        logger.info(msg, extra=extra)
    else:
        logger.warning(msg, extra=extra)
