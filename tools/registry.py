"""
Tool Registry
-------------
Schema-validated tool definitions.

Each tool declares a pydantic input model. The model is both the contract
advertised to clients (as JSON Schema) and the validator that runs before
any external process is spawned.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type
import logging

from pydantic import BaseModel, ValidationError

from core.errors import BridgeError, DuplicateToolError, create_validation_error
from core.results import NormalizedResult


Handler = Callable[[BaseModel], NormalizedResult]


def format_validation_error(exc: ValidationError) -> Tuple[str, List[str]]:
    """
    Flatten pydantic errors into one message.

    Returns (message, field_names) with one "field: problem" entry per
    violated constraint.
    """
    problems = []
    fields = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "<input>"
        if err.get("type") == "missing":
            problems.append(f"{loc}: required field is missing")
        else:
            problems.append(f"{loc}: {err.get('msg', 'invalid value')}")
        fields.append(loc)
    return "Invalid arguments: " + "; ".join(problems), fields


@dataclass
class Tool:
    """
    Tool definition with input contract and handler.

    Each tool defines:
    - Name and description
    - Input model (pydantic) for its arguments
    - Handler turning a validated record into a NormalizedResult
    """
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Handler
    category: str = "salesforce"

    def input_schema(self) -> Dict[str, Any]:
        """JSON Schema of the input model, as advertised to clients."""
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        for prop in schema["properties"].values():
            prop.pop("title", None)
        return schema

    def validate_args(self, args: Optional[Dict[str, Any]]) -> Tuple[Optional[BaseModel], Optional[BridgeError]]:
        """
        Validate arguments against the input model.
        Returns (record, None) or (None, error).
        """
        if args is None:
            args = {}
        if not isinstance(args, dict):
            return None, create_validation_error(
                f"Invalid arguments: expected an object, got {type(args).__name__}"
            )

        try:
            return self.input_model.model_validate(args), None
        except ValidationError as e:
            message, fields = format_validation_error(e)
            return None, create_validation_error(message, fields)

    def to_definition(self) -> Dict[str, Any]:
        """Tool definition in MCP `tools/list` format."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }

    def __repr__(self) -> str:
        return f"Tool(name={self.name}, input={self.input_model.__name__})"


class ToolRegistry:
    """
    Registry for all available tools.

    Built once at startup and only read afterwards, so concurrent requests
    can share it without locking.
    """

    def __init__(self):
        self._tools: Dict[str, Tool] = {}
        self._logger = logging.getLogger("sf_bridge.tools.registry")

    def register(self, tool: Tool) -> None:
        """Register a tool. Duplicate names are a startup error."""
        if tool.name in self._tools:
            raise DuplicateToolError(f"Tool already registered: {tool.name}")

        self._tools[tool.name] = tool
        self._logger.info(f"Registered tool: {tool.name}")

    def get(self, name: str) -> Optional[Tool]:
        """Get a tool by exact name."""
        return self._tools.get(name)

    def list_tools(self) -> List[Tool]:
        """List all registered tools."""
        return list(self._tools.values())

    def get_tool_definitions(self) -> List[Dict[str, Any]]:
        """All tool definitions in MCP format."""
        return [tool.to_definition() for tool in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
