"""
CIYield Centralized Logging: structured, correlated.

Usage:
    from ciyield.core.logging import get_logger
    logger = get_logger(__name__)
    logger.info("message", extra={"workflow": "ci.yml"})

Features:
    - JSON structured output (machine-parseable)
    - Correlation ID propagation via contextvars
    - Level and format driven by CIYIELD_LOG_LEVEL / CIYIELD_LOG_FORMAT
    - Always writes to stderr so stdout stays clean for tool transports
"""

import logging
import json
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from .config import LoggingSettings


# ─────────────────────────────────────────────────────────────
# Correlation ID Context
# ─────────────────────────────────────────────────────────────

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def set_correlation_id(cid: Optional[str] = None) -> str:
    """Set a correlation ID for the current context. Returns the ID."""
    cid = cid or uuid.uuid4().hex[:12]
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID."""
    return _correlation_id.get()


# ─────────────────────────────────────────────────────────────
# JSON Formatter
# ─────────────────────────────────────────────────────────────

_EXTRA_FIELDS = (
    "workflow",
    "workflow_count",
    "recommendation_count",
    "minutes_per_month",
    "duration_ms",
    "error_type",
)


class StructuredJSONFormatter(logging.Formatter):
    """
    Emits each log record as a single-line JSON object.
    Fields: timestamp, level, logger, message, correlation_id, module, function, line
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        cid = getattr(record, "correlation_id", None) or get_correlation_id()
        if cid:
            log_entry["correlation_id"] = cid

        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


# ─────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────

_configured = False


def configure_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
    stream=None,
) -> None:
    """
    Configure the `ciyield` logger hierarchy.
    Idempotent: only the first call installs a handler.
    """
    global _configured
    if _configured:
        return
    _configured = True

    settings = LoggingSettings.from_env()
    level = (level or settings.level).upper()
    fmt = fmt or settings.fmt

    root = logging.getLogger("ciyield")
    root.setLevel(getattr(logging, level, logging.INFO))

    handler = logging.StreamHandler(stream or sys.stderr)

    if fmt == "json":
        handler.setFormatter(StructuredJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        ))

    root.addHandler(handler)

    # The MCP SDK logs every request at INFO
    for noisy in ("mcp", "anyio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ─────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────

def get_logger(name: str) -> logging.Logger:
    """
    Get a namespaced logger under the 'ciyield' hierarchy.

    Usage:
        logger = get_logger(__name__)  # e.g., 'ciyield.analysis.cron'
    """
    configure_logging()

    if not name.startswith("ciyield"):
        name = f"ciyield.{name}"

    return logging.getLogger(name)


class TimedOperation:
    """
    Context manager for timing operations with automatic logging.

    Usage:
        with TimedOperation(logger, "cost_calculation", workflow_count=3):
            report = calculator.calculate(workflows, commits_per_day)
    """

    def __init__(self, logger: logging.Logger, operation: str, **extra):
        self.logger = logger
        self.operation = operation
        self.extra = extra
        self.start = None

    def __enter__(self):
        self.start = time.perf_counter()
        self.logger.debug(f"Starting: {self.operation}", extra=self.extra)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration_ms = round((time.perf_counter() - self.start) * 1000, 2)
        extras = {**self.extra, "duration_ms": duration_ms}

        if exc_type:
            extras["error_type"] = exc_type.__name__
            self.logger.error(
                f"Failed: {self.operation} ({duration_ms}ms)",
                extra=extras,
                exc_info=True,
            )
        else:
            self.logger.info(
                f"Completed: {self.operation} ({duration_ms}ms)",
                extra=extras,
            )
        return False
