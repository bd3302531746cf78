"""
Centralized Logging
-------------------
Structured logging with request_id propagation.

Design:
- Every tools/call request gets a unique request_id
- request_id propagates through: Dispatcher -> Tool -> Invoker
- Console output (Rich) goes to stderr; stdout belongs to the transport
- Optional JSON-lines file output with size-based rotation
- Severity discipline: INFO=state, WARNING=rejected input, ERROR=failed call

Usage:
    from infra.logging import get_logger, RequestContext

    logger = get_logger("tools")

    with RequestContext() as request_id:
        logger.info("Dispatching query_records")
"""

import contextvars
import json
import logging
import logging.handlers
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


ROOT_LOGGER = "sf_bridge"

_request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return f"req_{uuid.uuid4().hex[:12]}"


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return _request_id_var.get()


class RequestContext:
    """
    Context manager for request scoping.

    Usage:
        with RequestContext() as request_id:
            # All logs within this block carry request_id
            logger.info("Processing...")
    """

    def __init__(self, request_id: Optional[str] = None):
        self._request_id = request_id or generate_request_id()
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = _request_id_var.set(self._request_id)
        return self._request_id

    def __exit__(self, *args) -> None:
        if self._token is not None:
            _request_id_var.reset(self._token)


class RequestIdFilter(logging.Filter):
    """Logging filter that adds request_id to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured file logging."""

    EXTRA_FIELDS = ("tool_name", "execution_time_ms", "success", "error_kind")

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in self.EXTRA_FIELDS:
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Prefix console lines with the request id when one is set."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        request_id = getattr(record, "request_id", "-")
        if request_id and request_id != "-":
            return f"[{request_id}] {message}"
        return message


# Console bound to stderr: stdout carries the MCP transport
stderr_console = Console(stderr=True)

_logging_initialized = False
_log_file_path: Optional[Path] = None

MAX_LOG_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 3


def configure_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    console: bool = True,
    file: bool = False,
) -> None:
    """
    Configure the bridge logging system.

    Args:
        level: Logging level (default INFO)
        log_dir: Directory for log files (default: ./logs)
        console: Enable stderr console output
        file: Enable JSON file output
    """
    global _logging_initialized, _log_file_path

    if _logging_initialized:
        return

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.propagate = False

    request_filter = RequestIdFilter()

    if console:
        console_handler = RichHandler(
            console=stderr_console,
            rich_tracebacks=True,
            show_path=False,
        )
        console_handler.setLevel(level)
        console_handler.setFormatter(ConsoleFormatter("%(message)s"))
        console_handler.addFilter(request_filter)
        root_logger.addHandler(console_handler)

    if file:
        log_path = Path(log_dir) if log_dir else Path("logs")
        log_path.mkdir(parents=True, exist_ok=True)

        _log_file_path = log_path / "sf_bridge.log"

        file_handler = logging.handlers.RotatingFileHandler(
            _log_file_path,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)  # File gets everything
        file_handler.setFormatter(JSONFormatter())
        file_handler.addFilter(request_filter)
        root_logger.addHandler(file_handler)

    _logging_initialized = True


def get_log_file_path() -> Optional[Path]:
    """Path of the active JSON log file, if file logging is on."""
    return _log_file_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger in the bridge namespace.

    Args:
        name: Logger name (prefixed with 'sf_bridge.' if not already)
    """
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)


def log_request_end(
    request_id: str,
    tool_name: str,
    success: bool,
    execution_time_ms: float = 0.0,
    error: Optional[str] = None,
) -> None:
    """
    Log the end of a request with summary information.

    This is the REQUEST_END boundary event for post-mortems.
    """
    logger = get_logger("session")

    extra = {
        "request_id": request_id,
        "tool_name": tool_name,
        "success": success,
        "execution_time_ms": execution_time_ms,
    }

    if success:
        logger.info(
            f"REQUEST_END: tool={tool_name}, success=True, {execution_time_ms:.0f}ms",
            extra=extra,
        )
    else:
        extra["error_kind"] = error or "Unknown"
        logger.warning(
            f"REQUEST_END: tool={tool_name}, success=False, error={error or 'Unknown'}",
            extra=extra,
        )
