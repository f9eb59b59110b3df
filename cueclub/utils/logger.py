"""
Structured logging utility for cueclub.

Every record is emitted as a single JSON object so that booking checks and
bills can be traced by table, booking id and operation. Customer phone
numbers attached to conflicting bookings are masked before they are logged.
"""

import json
import logging
import os
import time
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Dict, Optional

DEFAULT_LOG_LEVEL = os.getenv("CUECLUB_LOG_LEVEL", "INFO").upper()


def mask_phone(phone: Optional[str]) -> str:
    """
    Mask a customer phone number for logs.

    Keeps an optional leading "+", the first two digits and the last four.

    Args:
        phone: Phone number such as "+1234567890" or "555-123-4567"

    Returns:
        Masked phone number string

    Example:
        >>> mask_phone("+1234567890")
        "+12****7890"
        >>> mask_phone("555-123-4567")
        "55****4567"
    """
    if not phone:
        return "unknown"

    prefix = "+" if phone.strip().startswith("+") else ""
    digits = "".join(ch for ch in phone if ch.isdigit())

    if len(digits) < 8:
        return "invalid"

    return f"{prefix}{digits[:2]}****{digits[-4:]}"


class StructuredLogger:
    """
    JSON-formatted logger with context injection and operation timing.
    """

    def __init__(self, name: str, level: Optional[str] = None):
        """
        Initialize structured logger.

        Args:
            name: Logger name (typically __name__ from calling module)
            level: Level name; defaults to CUECLUB_LOG_LEVEL or INFO
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, (level or DEFAULT_LOG_LEVEL), logging.INFO))

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
    ) -> str:
        """
        Format a log entry as JSON.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            message: Human-readable message
            operation: Operation name (e.g., "detect_conflicts", "final_bill")
            context: Context dict with table_id, booking_id, etc.
            duration_ms: Operation duration in milliseconds
            error: Error message if applicable

        Returns:
            JSON-formatted log string
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "message": message,
        }

        if operation:
            log_entry["operation"] = operation

        if context:
            log_entry["context"] = context

        if duration_ms is not None:
            log_entry["duration_ms"] = round(duration_ms, 2)

        if error:
            log_entry["error"] = error

        # default=str keeps datetimes and Decimals printable
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def debug(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Log debug message."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._format_log("DEBUG", message, operation, context))

    def info(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log info message."""
        self.logger.info(self._format_log("INFO", message, operation, context, duration_ms))

    def warning(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ):
        """Log warning message."""
        self.logger.warning(self._format_log("WARNING", message, operation, context, error=error))

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log error message."""
        self.logger.error(
            self._format_log("ERROR", message, operation, context, duration_ms, error)
        )


def log_operation(operation_name: str):
    """
    Decorator that logs start, duration and outcome of an operation.

    Exceptions are logged and re-raised unchanged.

    Usage:
        @log_operation("final_bill")
        def calculate_final_bill(start, end, rate):
            ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)
            context: Dict[str, Any] = {"function": func.__name__}

            if "phone" in kwargs:
                context["phone_masked"] = mask_phone(kwargs["phone"])

            logger.debug(f"Starting {operation_name}", operation=operation_name, context=context)

            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Failed {operation_name}",
                    operation=operation_name,
                    context=context,
                    error=str(e),
                    duration_ms=(time.perf_counter() - start) * 1000,
                )
                raise

            logger.debug(
                f"Completed {operation_name} in {(time.perf_counter() - start) * 1000:.2f}ms",
                operation=operation_name,
                context=context,
            )
            return result

        return wrapper

    return decorator


def get_logger(name: str) -> StructuredLogger:
    """
    Factory function to get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
