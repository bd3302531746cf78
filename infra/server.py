"""
MCP Stdio Server
----------------
Binds a ToolDispatcher to the MCP stdio transport.

tools/list  -> registry definitions
tools/call  -> dispatcher.handle() on a thread of its own per call;
               there is no shared pool, so calls never queue behind each other
"""

import asyncio
import concurrent.futures
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from tools.dispatcher import InvocationRequest, ToolDispatcher, ToolResponse

from .logging import get_logger, stderr_console


SERVER_NAME = "sf-mcp-server"
SERVER_VERSION = "1.0.0"
READY_BANNER = "Salesforce MCP Server running on stdio"


class ToolCallFailed(Exception):
    """
    Carries an error response out of the call_tool handler.

    The MCP SDK turns an exception raised by the handler into a tool
    result with isError set and str(exception) as its text.
    """

    def __init__(self, response: ToolResponse):
        self.response = response
        super().__init__(response.text)


class BridgeServer:
    """MCP server exposing the registered tools."""

    def __init__(
        self,
        dispatcher: ToolDispatcher,
        name: str = SERVER_NAME,
        version: str = SERVER_VERSION,
    ):
        self.dispatcher = dispatcher
        self.server = Server(name, version=version)
        self._logger = get_logger("infra.server")
        self._register_handlers()

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def _list_tools() -> List[types.Tool]:
            return self.list_tools()

        # Arguments are validated by the tool's own input model
        @self.server.call_tool(validate_input=False)
        async def _call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
            return await self.call_tool(name, arguments)

    def list_tools(self) -> List[types.Tool]:
        """Tool metadata for every registered tool."""
        return [
            types.Tool(
                name=definition["name"],
                description=definition["description"],
                inputSchema=definition["inputSchema"],
            )
            for definition in self.dispatcher.registry.get_tool_definitions()
        ]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        """Dispatch one tools/call request; raises ToolCallFailed on error."""
        request = InvocationRequest(tool_name=name, arguments=arguments)
        response = await self._dispatch_in_own_thread(request)

        if response.is_error:
            raise ToolCallFailed(response)
        return [types.TextContent(type="text", text=response.text)]

    async def _dispatch_in_own_thread(self, request: InvocationRequest) -> ToolResponse:
        loop = asyncio.get_running_loop()
        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="sf-bridge-call"
        )
        try:
            return await loop.run_in_executor(executor, self.dispatcher.handle, request)
        finally:
            executor.shutdown(wait=False)

    async def run(self) -> None:
        """Serve over stdio until the client disconnects."""
        async with stdio_server() as (read_stream, write_stream):
            stderr_console.print(READY_BANNER)
            self._logger.info(f"{len(self.dispatcher.registry)} tools available")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
