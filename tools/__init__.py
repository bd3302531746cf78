# Tools module - registry, command building, process invocation, dispatch

from .registry import Tool, ToolRegistry
from .invoker import ProcessInvoker, CapturedOutput
from .dispatcher import ToolDispatcher, InvocationRequest, ToolResponse
from .salesforce import create_salesforce_tools

__all__ = [
    "Tool", "ToolRegistry",
    "ProcessInvoker", "CapturedOutput",
    "ToolDispatcher", "InvocationRequest", "ToolResponse",
    "create_salesforce_tools",
]
