# Core module - error taxonomy and normalized results
# Everything past the process invoker is a value, never an exception

from .errors import (
    BridgeError, ErrorKind, ErrorHandler,
    DuplicateToolError, ProcessLaunchError,
)
from .results import NormalizedResult, OrgListing, QueryRecords, render_json

__all__ = [
    "BridgeError", "ErrorKind", "ErrorHandler",
    "DuplicateToolError", "ProcessLaunchError",
    "NormalizedResult", "OrgListing", "QueryRecords", "render_json",
]
