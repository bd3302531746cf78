"""
Salesforce Tools
----------------
Input contracts and handlers for the tools backed by the `sf` CLI.

Handlers run: build argv -> invoke -> normalize. They never raise for
expected failures; every outcome is a NormalizedResult.
"""

from typing import Any, Optional

from pydantic import (
    BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator, model_validator,
)

from core.errors import ProcessLaunchError
from core.results import NormalizedResult

from .commands import build_org_list_command, build_query_command
from .invoker import ProcessInvoker
from .normalizer import Extractor, extract_org_listing, extract_query_records, normalize
from .registry import Tool, ToolRegistry


LIST_ORGS_TOOL = "list_connected_salesforce_orgs"
QUERY_RECORDS_TOOL = "query_records"


class ListOrgsInput(BaseModel):
    """No arguments."""
    model_config = ConfigDict(extra="ignore")


class QueryRecordsInput(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    target_org: StrictStr = Field(
        ..., alias="targetOrg",
        description="Target Salesforce Org to execute the query against",
    )
    sobject: StrictStr = Field(
        ..., alias="sObject",
        description="Salesforce SObject to query from",
    )
    fields: StrictStr = Field(
        ..., description="Comma-separated list of fields to retrieve",
    )
    where: Optional[StrictStr] = Field(
        None, description="Optional WHERE clause for the query",
    )
    order_by: Optional[StrictStr] = Field(
        None, alias="orderBy",
        description="Optional ORDER BY clause for the query",
    )
    limit: Optional[StrictInt] = Field(
        None, ge=0,
        description="Optional limit for the number of records returned",
    )

    @field_validator("limit", mode="before")
    @classmethod
    def whole_number_limit(cls, value: Any) -> Any:
        # JSON clients may send 5.0 for 5
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @model_validator(mode="before")
    @classmethod
    def unwrap_input_envelope(cls, data: Any) -> Any:
        # Older clients nest the arguments under a single "input" key
        if isinstance(data, dict) and set(data) == {"input"} and isinstance(data["input"], dict):
            return data["input"]
        return data


def _invoke(invoker: ProcessInvoker, args: list, extract: Extractor) -> NormalizedResult:
    try:
        captured = invoker.run(args)
    except ProcessLaunchError as e:
        return normalize(None, extract, launch_error=e)
    return normalize(captured, extract)


def list_connected_orgs(invoker: ProcessInvoker, request: ListOrgsInput) -> NormalizedResult:
    """Run `sf org list --json`."""
    return _invoke(invoker, build_org_list_command(), extract_org_listing)


def query_records(invoker: ProcessInvoker, request: QueryRecordsInput) -> NormalizedResult:
    """Run a SOQL query through `sf data query --json`."""
    args = build_query_command(
        target_org=request.target_org,
        sobject=request.sobject,
        fields=request.fields,
        where=request.where,
        order_by=request.order_by,
        limit=request.limit,
    )
    return _invoke(invoker, args, extract_query_records)


def create_salesforce_tools(invoker: Optional[ProcessInvoker] = None) -> ToolRegistry:
    """Create a registry holding the Salesforce tools, bound to one invoker."""
    invoker = invoker or ProcessInvoker()
    registry = ToolRegistry()

    registry.register(Tool(
        name=LIST_ORGS_TOOL,
        description="List the Salesforce orgs connected to the local sf CLI",
        input_model=ListOrgsInput,
        handler=lambda request: list_connected_orgs(invoker, request),
    ))

    registry.register(Tool(
        name=QUERY_RECORDS_TOOL,
        description="Execute a SOQL query in Salesforce Org",
        input_model=QueryRecordsInput,
        handler=lambda request: query_records(invoker, request),
    ))

    return registry
