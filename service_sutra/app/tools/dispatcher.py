"""
Tool dispatch: routes an MCP tool call to the matching Yantra client method.
"""

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, AbstractSet, Type

import pydantic
from opentelemetry import trace

from sutra_shared.errors import SutraException, ValidationError
from sutra_shared.logging import clear_context, get_logger, set_tool_context
from sutra_shared.metrics import MetricsCollector, get_metrics_collector

from ..adapters.models import (
    ApiResponse,
    ConstraintsQuery,
    DecisionGuidesQuery,
    DocSearchQuery,
    PatternsQuery,
    ReleasesQuery,
    RulesQuery,
)
from ..entitlements.policy import (
    CONSTRAINTS_TOOL,
    DECISION_GUIDES_TOOL,
    DOC_SEARCH_TOOL,
    PATTERNS_TOOL,
    RELEASES_TOOL,
    RULES_TOOL,
)

tracer = trace.get_tracer("sutra.tools")


class ToolResult(pydantic.BaseModel):
    """Structured outcome of a tool call."""

    payload: Dict[str, Any]
    is_error: bool = False

    @classmethod
    def failure(cls, message: str) -> "ToolResult":
        return cls(payload={"success": False, "error": message}, is_error=True)

    def to_text(self) -> str:
        if self.is_error:
            return json.dumps(self.payload)
        return json.dumps(self.payload, indent=2)


@dataclass(frozen=True)
class ToolHandler:
    """Binds a tool name to its argument model and client call."""
    request_model: Type[pydantic.BaseModel]
    call: Callable[[Any], Awaitable[ApiResponse]]
    requires_query: bool = False

    def build_request(self, arguments: Mapping[str, Any]) -> pydantic.BaseModel:
        if self.requires_query and not arguments.get("query"):
            raise ValidationError("query is required")

        # Unset and null arguments are dropped so model defaults apply
        provided = {key: value for key, value in arguments.items() if value is not None}
        try:
            return self.request_model.model_validate(provided)
        except pydantic.ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ValidationError(f"Invalid arguments: {problems}") from e


class ToolDispatcher:
    """Lookup-table dispatcher over the static tool catalog."""

    def __init__(self, client, metrics: Optional[MetricsCollector] = None):
        self.client = client
        self.logger = get_logger("sutra.tools.dispatcher")
        self.metrics = metrics or get_metrics_collector("sutra")
        self._handlers: Dict[str, ToolHandler] = {
            CONSTRAINTS_TOOL: ToolHandler(ConstraintsQuery, client.get_constraints),
            DOC_SEARCH_TOOL: ToolHandler(DocSearchQuery, client.search_docs, requires_query=True),
            RELEASES_TOOL: ToolHandler(ReleasesQuery, client.get_releases),
            RULES_TOOL: ToolHandler(RulesQuery, client.query_rules, requires_query=True),
            PATTERNS_TOOL: ToolHandler(PatternsQuery, client.search_patterns, requires_query=True),
            DECISION_GUIDES_TOOL: ToolHandler(DecisionGuidesQuery, client.search_decision_guides,
                                              requires_query=True),
        }

    @property
    def tool_names(self) -> AbstractSet[str]:
        return self._handlers.keys()

    async def handle(self, name: str, arguments: Optional[Mapping[str, Any]],
                     allowed: AbstractSet[str]) -> Optional[ToolResult]:
        """Run a tool call.

        Returns None when the tool is unknown or not in ``allowed``; every
        other outcome, including failures, is a ToolResult.
        """
        handler = self._handlers.get(name)
        if handler is None or name not in allowed:
            self.metrics.record_tool_call(name, "rejected")
            self.logger.warning("Tool not available", tool=name, known=handler is not None)
            return None

        set_tool_context(name)
        try:
            with tracer.start_as_current_span(f"tool.{name}"):
                return await self._run(name, handler, arguments or {})
        finally:
            clear_context()

    async def _run(self, name: str, handler: ToolHandler, arguments: Mapping[str, Any]) -> ToolResult:
        try:
            request = handler.build_request(arguments)
        except ValidationError as e:
            self.metrics.record_tool_call(name, "invalid")
            self.logger.info("Tool call rejected", error=e.message)
            return ToolResult.failure(e.message)

        try:
            response = await handler.call(request)
        except SutraException as e:
            self.metrics.record_tool_call(name, "error")
            self.logger.error("Tool call failed", code=e.code, error=e.message)
            return ToolResult.failure(e.message)
        except Exception as e:
            self.metrics.record_tool_call(name, "error")
            self.logger.exception("Unexpected tool failure", error=str(e))
            return ToolResult.failure(str(e) or type(e).__name__)

        self.metrics.record_tool_call(name, "success")
        self.logger.info("Tool call completed", count=getattr(response, "count", None))
        return ToolResult(payload=response.to_payload())
