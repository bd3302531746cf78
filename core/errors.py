"""
Error Handling Module
---------------------
Typed errors for the tool bridge.

Every failure a caller can observe is one of the kinds in ErrorKind.
Errors are values (BridgeError) once they leave the process invoker;
the dispatcher never lets an exception escape to the transport.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
import logging
import traceback


class ErrorKind(str, Enum):
    """Externally visible error kinds."""
    VALIDATION_ERROR = "ValidationError"          # Input failed the schema check
    UNKNOWN_TOOL = "UnknownTool"                  # No such tool registered
    PROCESS_LAUNCH_ERROR = "ProcessLaunchError"   # Binary unreachable/unexecutable
    EXTERNAL_TOOL_ERROR = "ExternalToolError"     # CLI reported an error
    MALFORMED_OUTPUT_ERROR = "MalformedOutputError"  # stdout was not usable JSON
    INTERNAL_ERROR = "InternalError"              # Unexpected handler exception


@dataclass
class BridgeError:
    """
    Structured error with metadata.

    The public shape is {"error": kind, "message": message}; details and
    stack traces are for logs only.
    """
    kind: ErrorKind
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    stack_trace: Optional[str] = None

    @classmethod
    def from_exception(
        cls,
        exception: Exception,
        kind: ErrorKind,
        details: Optional[Dict] = None
    ) -> "BridgeError":
        """Create error from an exception."""
        return cls(
            kind=kind,
            message=str(exception),
            details=details,
            stack_trace=traceback.format_exc(),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Public error payload sent back to the caller."""
        return {"error": self.kind.value, "message": self.message}

    def __repr__(self) -> str:
        return f"BridgeError({self.kind.value}: {self.message})"


class DuplicateToolError(Exception):
    """Raised when two tools are registered under the same name."""


class ProcessLaunchError(Exception):
    """The external executable could not be started."""

    def __init__(self, executable: str, reason: str):
        self.executable = executable
        self.reason = reason
        super().__init__(f"Failed to launch '{executable}': {reason}")


class ErrorHandler:
    """
    Central error logger.

    Holds no per-request state, so one instance can serve concurrent
    requests.
    """

    LEVELS: Dict[ErrorKind, int] = {
        ErrorKind.VALIDATION_ERROR: logging.WARNING,
        ErrorKind.UNKNOWN_TOOL: logging.WARNING,
        ErrorKind.PROCESS_LAUNCH_ERROR: logging.ERROR,
        ErrorKind.EXTERNAL_TOOL_ERROR: logging.ERROR,
        ErrorKind.MALFORMED_OUTPUT_ERROR: logging.ERROR,
        ErrorKind.INTERNAL_ERROR: logging.CRITICAL,
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("sf_bridge.errors")

    def handle(self, error: BridgeError, tool_name: str = "") -> Dict[str, Any]:
        """Log an error and return its public payload."""
        level = self.LEVELS.get(error.kind, logging.ERROR)

        self._logger.log(
            level,
            f"{error.kind.value} in {tool_name or '<none>'}: {error.message}",
            extra={"tool_name": tool_name, "details": error.details},
        )

        if error.stack_trace and level >= logging.ERROR:
            self._logger.debug(f"Stack trace:\n{error.stack_trace}")

        return error.to_payload()


# Convenience functions

def create_validation_error(message: str, fields: Optional[List[str]] = None) -> BridgeError:
    """Create a validation error."""
    return BridgeError(
        kind=ErrorKind.VALIDATION_ERROR,
        message=message,
        details={"fields": fields or []}
    )


def create_unknown_tool_error(tool_name: str) -> BridgeError:
    """Create an unknown-tool error."""
    return BridgeError(
        kind=ErrorKind.UNKNOWN_TOOL,
        message=f"Unknown tool: {tool_name}",
        details={"tool": tool_name}
    )


def create_launch_error(message: str, executable: str = "") -> BridgeError:
    """Create a process launch error."""
    return BridgeError(
        kind=ErrorKind.PROCESS_LAUNCH_ERROR,
        message=message,
        details={"executable": executable}
    )


def create_external_tool_error(message: str, exit_status: Optional[int] = None) -> BridgeError:
    """Create an error reported by the external CLI."""
    return BridgeError(
        kind=ErrorKind.EXTERNAL_TOOL_ERROR,
        message=message,
        details={"exit_status": exit_status}
    )


def create_malformed_output_error(message: str) -> BridgeError:
    """Create an error for unparseable CLI output."""
    return BridgeError(
        kind=ErrorKind.MALFORMED_OUTPUT_ERROR,
        message=message,
    )
