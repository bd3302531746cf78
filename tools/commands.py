"""
Command Builder
---------------
Pure functions mapping validated tool input to `sf` argument vectors.

Arguments are always a discrete list handed to the process as-is; nothing
here is ever joined into a shell string.

Caller-supplied fields, sObject, where and orderBy text is embedded
verbatim into the SOQL query. No escaping is performed.
"""

from typing import List, Optional


ORG_LIST_ARGS = ("org", "list", "--json")


def build_org_list_command() -> List[str]:
    """Argument vector for listing authorized orgs."""
    return list(ORG_LIST_ARGS)


def build_soql_query(
    fields: str,
    sobject: str,
    where: Optional[str] = None,
    limit: Optional[int] = None,
    order_by: Optional[str] = None,
) -> str:
    """
    Assemble a SOQL query.

    Clauses are appended in the fixed order WHERE, LIMIT, ORDER BY
    whichever of them are present.
    """
    query = f"SELECT {fields} FROM {sobject}"

    if where:
        query += f" WHERE {where}"
    if limit is not None:
        query += f" LIMIT {limit}"
    if order_by:
        query += f" ORDER BY {order_by}"

    return query


def build_query_command(
    target_org: str,
    sobject: str,
    fields: str,
    where: Optional[str] = None,
    order_by: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[str]:
    """Argument vector for `sf data query`."""
    query = build_soql_query(fields, sobject, where=where, limit=limit, order_by=order_by)
    return [
        "data",
        "query",
        "--target-org",
        target_org,
        "--query",
        query,
        "--json",
    ]
