"""
Result Normalizer
-----------------
Turns CapturedOutput into a NormalizedResult.

Policy, applied in order:
1. Launch failure (or exit 126/127) -> ProcessLaunchError
2. Any stderr text                  -> ExternalToolError (even with exit 0)
3. Non-zero exit, empty stderr      -> ExternalToolError
4. stdout not JSON                  -> MalformedOutputError
5. Per-tool payload extraction
"""

from typing import Any, Callable, Optional
import json

from core.errors import (
    ProcessLaunchError,
    create_external_tool_error,
    create_launch_error,
    create_malformed_output_error,
)
from core.results import NormalizedResult, OrgListing, Payload, QueryRecords

from .invoker import CapturedOutput


# Shell conventions for "cannot execute" and "command not found"
LAUNCH_EXIT_STATUSES = frozenset({126, 127})

Extractor = Callable[[Any], Payload]


class PayloadShapeError(ValueError):
    """Parsed JSON did not have the shape a tool expects."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def extract_org_listing(parsed: Any) -> OrgListing:
    """The whole parsed document is the org listing."""
    return OrgListing(data=parsed)


def extract_query_records(parsed: Any) -> QueryRecords:
    """Pull `result.records`; absence means no records."""
    result = parsed.get("result") if isinstance(parsed, dict) else None
    if not isinstance(result, dict):
        return QueryRecords(records=[])

    records = result.get("records")
    if records is None:
        return QueryRecords(records=[])
    if not isinstance(records, list):
        raise PayloadShapeError(
            f"Expected result.records to be a list, got {type(records).__name__}"
        )
    return QueryRecords(records=records)


def _cli_error_message(stdout: str) -> Optional[str]:
    """Best-effort read of the `message` field in the CLI's JSON error envelope."""
    try:
        parsed = json.loads(stdout)
    except ValueError:
        return None
    if isinstance(parsed, dict) and isinstance(parsed.get("message"), str):
        return parsed["message"]
    return None


def normalize(
    captured: Optional[CapturedOutput],
    extract: Extractor,
    launch_error: Optional[ProcessLaunchError] = None,
) -> NormalizedResult:
    """Apply the normalization policy to one invocation."""
    if launch_error is not None:
        return NormalizedResult.fail(
            create_launch_error(str(launch_error), launch_error.executable)
        )
    if captured is None:
        raise ValueError("normalize() needs captured output or a launch error")

    if captured.exit_status in LAUNCH_EXIT_STATUSES:
        executable = captured.argv[0] if captured.argv else ""
        detail = captured.stderr.strip() or f"exit status {captured.exit_status}"
        return NormalizedResult.fail(
            create_launch_error(f"Failed to launch '{executable}': {detail}", executable)
        )

    if captured.stderr:
        return NormalizedResult.fail(
            create_external_tool_error(captured.stderr, captured.exit_status)
        )

    if captured.exit_status != 0:
        message = _cli_error_message(captured.stdout) or (
            f"Command exited with status {captured.exit_status}"
        )
        return NormalizedResult.fail(
            create_external_tool_error(message, captured.exit_status)
        )

    try:
        parsed = json.loads(captured.stdout, parse_constant=_reject_constant)
    except ValueError as e:
        return NormalizedResult.fail(create_malformed_output_error(str(e)))

    try:
        payload = extract(parsed)
    except PayloadShapeError as e:
        return NormalizedResult.fail(create_malformed_output_error(str(e)))

    return NormalizedResult.ok(payload)
