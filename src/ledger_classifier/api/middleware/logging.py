"""Request logging middleware.

Every request is logged with a request id and its duration. Bank account,
card and reference numbers are masked before paths or errors are logged.
"""

import json
import logging
import re
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


SENSITIVE_PATTERNS = [
    # Card numbers (13-19 digits, with or without spaces/dashes)
    (re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{1,7}\b"), "[CARD]"),
    # Partially masked account numbers, e.g. *****2689327
    (re.compile(r"\*+\d{3,}"), "[ACCOUNT]"),
    # Bank account and payment reference numbers (8+ digits)
    (re.compile(r"\b\d{8,}\b"), "[REF]"),
    # Email addresses
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b"), "[EMAIL]"),
]


def mask_sensitive(text: str) -> str:
    """Replace account, card and reference numbers with placeholders.

    Args:
        text: Input text, e.g. a request path or error message

    Returns:
        Text with sensitive numbers replaced
    """
    if not text:
        return text

    masked = text
    for pattern, replacement in SENSITIVE_PATTERNS:
        masked = pattern.sub(replacement, masked)

    return masked


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all HTTP requests with sensitive numbers masked."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        path = mask_sensitive(str(request.url.path))
        query = mask_sensitive(str(request.url.query)) or None

        start_time = time.perf_counter()

        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": path,
                "query": query,
                "client_ip": request.client.host if request.client else None,
            },
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            logger.error(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "error": mask_sensitive(str(exc)),
                },
            )
            raise

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        response.headers["X-Request-ID"] = request_id

        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        return response


class JSONLogFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    FIELDS = (
        "request_id",
        "method",
        "path",
        "query",
        "status_code",
        "duration_ms",
        "error_code",
        "client_ip",
        "rule",
        "batch_id",
    )

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": mask_sensitive(record.getMessage()),
        }

        for name in self.FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = mask_sensitive(self.formatException(record.exc_info))

        return json.dumps(log_data, default=str)
