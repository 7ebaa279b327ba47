"""
Unit tests for the tool dispatcher.
"""

import json

import pytest
from prometheus_client import CollectorRegistry
from unittest.mock import AsyncMock, MagicMock

from service_sutra.app.adapters.models import (
    ConstraintsResponse,
    DocSearchQuery,
    DocSearchResponse,
    ReleasesQuery,
    ReleasesResponse,
    RulesQuery,
    RulesResponse,
    PatternsResponse,
    DecisionGuidesResponse,
)
from service_sutra.app.entitlements.policy import ALL_TOOLS, FREE_TOOLS
from service_sutra.app.tools.dispatcher import ToolDispatcher, ToolResult
from sutra_shared.errors import ApiError, RequestTimeoutError
from sutra_shared.metrics import MetricsCollector
from sutra_shared.test_helpers import constraints_payload, search_payload


class TestToolDispatcher:
    """Test cases for ToolDispatcher."""

    @pytest.fixture
    def mock_client(self):
        """Mock Yantra client with canned responses."""
        client = MagicMock()
        client.get_constraints = AsyncMock(return_value=ConstraintsResponse(**constraints_payload(1)))
        client.search_docs = AsyncMock(return_value=DocSearchResponse(**search_payload("results", "apex")))
        client.get_releases = AsyncMock(return_value=ReleasesResponse(success=True, releases=[], count=0))
        client.query_rules = AsyncMock(return_value=RulesResponse(**search_payload("rules", "security")))
        client.search_patterns = AsyncMock(return_value=PatternsResponse(**search_payload("patterns", "batch")))
        client.search_decision_guides = AsyncMock(
            return_value=DecisionGuidesResponse(**search_payload("guides", "architecture"))
        )
        return client

    @pytest.fixture
    def metrics(self):
        return MetricsCollector("sutra-test", registry=CollectorRegistry())

    @pytest.fixture
    def dispatcher(self, mock_client, metrics):
        return ToolDispatcher(mock_client, metrics=metrics)

    def test_handles_every_catalog_tool(self, dispatcher):
        """Test the lookup table covers the full tool set."""
        assert set(dispatcher.tool_names) == ALL_TOOLS

    @pytest.mark.asyncio
    async def test_disallowed_tool_returns_none(self, dispatcher, mock_client):
        """Test a known tool outside the allow-set is not available."""
        result = await dispatcher.handle("mahakalp_sf_rules", {"query": "x"}, FREE_TOOLS)

        assert result is None
        mock_client.query_rules.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_tool_returns_none(self, dispatcher):
        """Test an unknown tool is not available even if listed in the allow-set."""
        result = await dispatcher.handle("unknown_tool", {}, ALL_TOOLS | {"unknown_tool"})
        assert result is None

    @pytest.mark.asyncio
    async def test_constraints(self, dispatcher, mock_client, metrics):
        """Test constraints tool calls get_constraints with typed params."""
        result = await dispatcher.handle(
            "mahakalp_sf_constraints",
            {"release_id": "spring-26", "constraint_type": "governor_limit", "max_results": 10},
            FREE_TOOLS
        )

        assert isinstance(result, ToolResult)
        assert result.is_error is False
        assert result.payload["success"] is True
        assert result.payload["count"] == 1

        params = mock_client.get_constraints.await_args.args[0]
        assert params.release_id == "spring-26"
        assert params.constraint_type.value == "governor_limit"
        assert params.max_results == 10
        assert params.context is None
        assert metrics.get_sample_value(
            "tool_calls_total", {"tool": "mahakalp_sf_constraints", "outcome": "success"}
        ) == 1.0

    @pytest.mark.asyncio
    async def test_doc_search(self, dispatcher, mock_client):
        """Test doc search forwards the query and applies the default cap."""
        await dispatcher.handle("mahakalp_sf_doc_search", {"query": "apex"}, FREE_TOOLS)

        mock_client.search_docs.assert_awaited_once_with(DocSearchQuery(query="apex"))
        assert mock_client.search_docs.await_args.args[0].max_results == 5

    @pytest.mark.asyncio
    async def test_releases(self, dispatcher, mock_client):
        """Test releases tool forwards list_all."""
        await dispatcher.handle("mahakalp_sf_releases", {"list_all": True}, FREE_TOOLS)

        mock_client.get_releases.assert_awaited_once_with(ReleasesQuery(list_all=True))

    @pytest.mark.asyncio
    async def test_pro_tools(self, dispatcher, mock_client):
        """Test pro tools dispatch when allowed."""
        await dispatcher.handle("mahakalp_sf_rules", {"query": "security"}, ALL_TOOLS)
        await dispatcher.handle("mahakalp_sf_patterns", {"query": "batch"}, ALL_TOOLS)
        await dispatcher.handle("mahakalp_sf_decision_guides", {"query": "architecture"}, ALL_TOOLS)

        mock_client.query_rules.assert_awaited_once_with(RulesQuery(query="security"))
        assert mock_client.search_patterns.await_args.args[0].query == "batch"
        assert mock_client.search_decision_guides.await_args.args[0].query == "architecture"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool,method", [
        ("mahakalp_sf_doc_search", "search_docs"),
        ("mahakalp_sf_rules", "query_rules"),
        ("mahakalp_sf_patterns", "search_patterns"),
        ("mahakalp_sf_decision_guides", "search_decision_guides"),
    ])
    async def test_missing_query_rejected_without_network(self, dispatcher, mock_client, tool, method):
        """Test search tools require a query and never call the client without one."""
        result = await dispatcher.handle(tool, {"max_results": 3}, ALL_TOOLS)

        assert result.is_error is True
        assert result.payload == {"success": False, "error": "query is required"}
        getattr(mock_client, method).assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_query_rejected(self, dispatcher, mock_client):
        """Test an empty query counts as missing."""
        result = await dispatcher.handle("mahakalp_sf_doc_search", {"query": ""}, FREE_TOOLS)

        assert result.payload["error"] == "query is required"
        mock_client.search_docs.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_arguments(self, dispatcher, mock_client):
        """Test invalid argument values become a structured error."""
        result = await dispatcher.handle(
            "mahakalp_sf_constraints", {"constraint_type": "bogus"}, FREE_TOOLS
        )

        assert result.is_error is True
        assert result.payload["success"] is False
        assert result.payload["error"].startswith("Invalid arguments: constraint_type")
        mock_client.get_constraints.assert_not_called()

    @pytest.mark.asyncio
    async def test_null_arguments_use_defaults(self, dispatcher, mock_client):
        """Test explicit nulls behave like omitted fields."""
        await dispatcher.handle("mahakalp_sf_doc_search", {"query": "soql", "max_results": None}, FREE_TOOLS)

        assert mock_client.search_docs.await_args.args[0].max_results == 5

    @pytest.mark.asyncio
    async def test_client_error_becomes_envelope(self, dispatcher, mock_client):
        """Test API faults are converted into a structured error."""
        mock_client.get_constraints.side_effect = ApiError(401, "Invalid API key")

        result = await dispatcher.handle("mahakalp_sf_constraints", {}, FREE_TOOLS)

        assert result.is_error is True
        assert result.payload == {"success": False, "error": "Yantra API error 401: Invalid API key"}

    @pytest.mark.asyncio
    async def test_timeout_becomes_envelope(self, dispatcher, mock_client):
        """Test timeouts are converted into a structured error."""
        mock_client.search_docs.side_effect = RequestTimeoutError(10.0)

        result = await dispatcher.handle("mahakalp_sf_doc_search", {"query": "apex"}, FREE_TOOLS)

        assert result.is_error is True
        assert "timed out" in result.payload["error"]

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_envelope(self, dispatcher, mock_client):
        """Test even unexpected exceptions never escape."""
        mock_client.get_releases.side_effect = RuntimeError("boom")

        result = await dispatcher.handle("mahakalp_sf_releases", None, FREE_TOOLS)

        assert result.is_error is True
        assert result.payload == {"success": False, "error": "boom"}


class TestToolResult:
    """Test ToolResult rendering."""

    def test_success_is_pretty_printed(self):
        result = ToolResult(payload={"success": True, "count": 0})
        assert result.to_text() == json.dumps({"success": True, "count": 0}, indent=2)

    def test_failure_is_compact(self):
        result = ToolResult.failure("query is required")
        assert result.to_text() == '{"success": false, "error": "query is required"}'
        assert result.is_error is True
