"""
Static catalog of MCP tools exposed by Sutra.

Free tier: constraints, doc search, releases.
Pro tier: rules, patterns, decision guides.
"""

from typing import Any, Dict, Iterable, List

from ..entitlements.policy import (
    CONSTRAINTS_TOOL,
    DECISION_GUIDES_TOOL,
    DOC_SEARCH_TOOL,
    PATTERNS_TOOL,
    RELEASES_TOOL,
    RULES_TOOL,
)

_RELEASE_ID = {
    "type": "string",
    "description": 'Release identifier (e.g., "spring-26"). If not provided, uses the current release.',
}

_QUERY = {
    "type": "string",
    "description": "Natural language search query",
}

_CATEGORY = {
    "type": "string",
    "description": 'Filter by category (e.g., "security", "performance", "integration").',
}

_CONTEXT = {
    "type": "string",
    "description": 'Filter by context (e.g., "apex", "soql", "dml", "triggers", "lwc").',
}


def _max_results(default: int) -> Dict[str, Any]:
    return {"type": "number", "description": f"Maximum number of results (default: {default})"}


TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": CONSTRAINTS_TOOL,
        "description": (
            "Get Salesforce platform constraints including governor limits, platform rules, "
            "and best practices. Returns structured data with limit values, context, "
            "workarounds, and code examples. Powered by Mahakalp.dev"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "release_id": _RELEASE_ID,
                "constraint_type": {
                    "type": "string",
                    "enum": ["governor_limit", "platform_rule", "best_practice"],
                    "description": "Filter by constraint type. If not provided, returns all types.",
                },
                "constraint_ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Specific constraint IDs to fetch. If not provided, returns all.",
                },
                "context": _CONTEXT,
                "max_results": {
                    "type": "number",
                    "description": "Maximum number of constraints to return (default: 100)",
                },
            },
            "required": [],
        },
    },
    {
        "name": DOC_SEARCH_TOOL,
        "description": (
            "Search Salesforce official documentation using semantic search. Returns relevant "
            "documentation chunks for RAG context. Useful for answering questions about Apex, "
            "LWC, SOQL, or any Salesforce platform feature. Powered by Mahakalp.dev"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": _QUERY,
                "release_id": _RELEASE_ID,
                "topics": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Topic filters (e.g., ["soql", "triggers", "bulkification"])',
                },
                "max_results": _max_results(5),
            },
            "required": ["query"],
        },
    },
    {
        "name": RELEASES_TOOL,
        "description": (
            "Get information about Salesforce releases. Returns release metadata including "
            "API version, status, and release dates. Powered by Mahakalp.dev"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "release_id": {
                    "type": "string",
                    "description": (
                        "Specific release ID to get details for. "
                        "If not provided, returns the current release."
                    ),
                },
                "include_archived": {
                    "type": "boolean",
                    "description": "Include archived releases when listing all (default: false)",
                },
                "list_all": {
                    "type": "boolean",
                    "description": "List all releases instead of just the current one",
                },
            },
            "required": [],
        },
    },
    {
        "name": RULES_TOOL,
        "description": (
            "Query Salesforce development rules such as security, naming, and code review "
            "guidelines, with severity and code examples. Pro tier. Powered by Mahakalp.dev"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": _QUERY,
                "category": _CATEGORY,
                "severity": {
                    "type": "string",
                    "description": 'Filter by severity (e.g., "critical", "high", "medium", "low").',
                },
                "context": _CONTEXT,
                "max_results": _max_results(10),
            },
            "required": ["query"],
        },
    },
    {
        "name": PATTERNS_TOOL,
        "description": (
            "Search proven Salesforce implementation patterns (trigger frameworks, batch "
            "processing, integration patterns) with code examples. Pro tier. Powered by Mahakalp.dev"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": _QUERY,
                "category": _CATEGORY,
                "context": _CONTEXT,
                "max_results": _max_results(5),
            },
            "required": ["query"],
        },
    },
    {
        "name": DECISION_GUIDES_TOOL,
        "description": (
            "Search Salesforce architecture decision guides (e.g., Flow vs Apex, sync vs async) "
            "with recommendations. Pro tier. Powered by Mahakalp.dev"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": _QUERY,
                "category": _CATEGORY,
                "context": _CONTEXT,
                "max_results": _max_results(5),
            },
            "required": ["query"],
        },
    },
]

CATALOG_NAMES = frozenset(tool["name"] for tool in TOOL_DEFINITIONS)


def get_tool_definitions(allowed: Iterable[str]) -> List[Dict[str, Any]]:
    """Catalog entries whose name is in ``allowed``, in catalog order."""
    allowed = set(allowed)
    return [tool for tool in TOOL_DEFINITIONS if tool["name"] in allowed]
