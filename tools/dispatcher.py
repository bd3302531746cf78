"""
Tool Dispatcher
---------------
One request in, one response out.

Lookup -> validation -> handler -> response envelope. Every exception is
caught here and turned into an error response, so nothing raised by a
tool can reach the transport or stop the bridge.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.errors import (
    BridgeError,
    ErrorHandler,
    ErrorKind,
    create_unknown_tool_error,
)
from core.results import NormalizedResult, render_json
from infra.logging import RequestContext, generate_request_id, get_logger, log_request_end

from .registry import ToolRegistry


@dataclass
class InvocationRequest:
    """A decoded tools/call request."""
    tool_name: str
    arguments: Optional[Dict[str, Any]] = None
    request_id: str = field(default_factory=generate_request_id)


@dataclass
class ToolResponse:
    """Response envelope: exactly one text content item."""
    tool_name: str
    text: str
    is_error: bool = False
    error_kind: Optional[ErrorKind] = None
    execution_time_ms: float = 0.0
    request_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return not self.is_error

    @property
    def content(self) -> List[Dict[str, str]]:
        return [{"type": "text", "text": self.text}]

    def __repr__(self) -> str:
        status = "✓" if self.success else f"✗ {self.error_kind.value}"
        return f"ToolResponse({status} {self.tool_name})"


class ToolDispatcher:
    """
    Routes requests to registered tools.

    This is the ONLY entry point for tool execution. The registry is
    read-only after startup and the dispatcher holds no per-request state.
    """

    def __init__(self, registry: ToolRegistry, error_handler: Optional[ErrorHandler] = None):
        self.registry = registry
        self.error_handler = error_handler or ErrorHandler()
        self._logger = get_logger("tools.dispatcher")

    def handle(self, request: InvocationRequest) -> ToolResponse:
        """Handle one invocation request."""
        with RequestContext(request.request_id):
            start_time = datetime.now(timezone.utc)
            result = self._dispatch(request)
            execution_time = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
            response = self._to_response(request, result, execution_time)

            log_request_end(
                request.request_id,
                tool_name=request.tool_name,
                success=response.success,
                execution_time_ms=execution_time,
                error=None if response.success else response.error_kind.value,
            )
            return response

    def _dispatch(self, request: InvocationRequest) -> NormalizedResult:
        tool = self.registry.get(request.tool_name)
        if tool is None:
            return NormalizedResult.fail(create_unknown_tool_error(request.tool_name))

        record, error = tool.validate_args(request.arguments)
        if error is not None:
            return NormalizedResult.fail(error)

        self._logger.info(f"Dispatching {tool.name}")
        try:
            result = tool.handler(record)
        except Exception as e:
            self._logger.exception(f"Unhandled error in {tool.name}")
            return NormalizedResult.fail(
                BridgeError.from_exception(e, ErrorKind.INTERNAL_ERROR, {"tool": tool.name})
            )

        if not isinstance(result, NormalizedResult):
            return NormalizedResult.fail(BridgeError(
                kind=ErrorKind.INTERNAL_ERROR,
                message=f"Tool {tool.name} returned {type(result).__name__}, not a result",
            ))
        return result

    def _to_response(
        self,
        request: InvocationRequest,
        result: NormalizedResult,
        execution_time: float,
    ) -> ToolResponse:
        if result.success:
            try:
                text = result.to_text()
            except (TypeError, ValueError) as e:
                result = NormalizedResult.fail(
                    BridgeError.from_exception(e, ErrorKind.INTERNAL_ERROR)
                )
            else:
                return ToolResponse(
                    tool_name=request.tool_name,
                    text=text,
                    execution_time_ms=execution_time,
                    request_id=request.request_id,
                )

        payload = self.error_handler.handle(result.error, request.tool_name)
        return ToolResponse(
            tool_name=request.tool_name,
            text=render_json(payload),
            is_error=True,
            error_kind=result.error.kind,
            execution_time_ms=execution_time,
            request_id=request.request_id,
        )
