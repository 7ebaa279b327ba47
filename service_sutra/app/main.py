"""
Sutra MCP server.

Registers the Salesforce ecosystem knowledge tools and speaks MCP over stdio.
At startup the caller's entitlement decides which tools are listed:
no key, an invalid key or an unreachable billing backend gives the free tier
(3 tools); a valid pro or enterprise entitlement gives all 6.
"""

import asyncio
import signal
import sys
from typing import Any, Dict, FrozenSet, List, Optional

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from sutra_shared.config import SutraConfig, get_config
from sutra_shared.logging import configure_logging, get_logger
from sutra_shared.metrics import MetricsCollector, get_metrics_collector

from .adapters.yantra_client import USER_AGENT, YantraClient
from .entitlements.models import Entitlement
from .entitlements.policy import effective_tier, resolve_allowed_tools
from .entitlements.resolver import EntitlementResolver
from .tools.catalog import get_tool_definitions
from .tools.dispatcher import ToolDispatcher

SERVICE_NAME = "sutra"
SERVER_VERSION = "0.2.0"


class SutraService:
    """Holds the per-process state behind the MCP handlers."""

    def __init__(self,
                 config: Optional[SutraConfig] = None,
                 client: Optional[YantraClient] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.config = config or get_config()
        self.logger = get_logger("sutra.service")
        self.metrics = metrics or get_metrics_collector(SERVICE_NAME)
        self.client = client or YantraClient(self.config.request_config(), metrics=self.metrics)
        self.resolver = EntitlementResolver(self.client, metrics=self.metrics)
        self.dispatcher = ToolDispatcher(self.client, metrics=self.metrics)

        self.entitlement: Optional[Entitlement] = None
        self.allowed_tools: FrozenSet[str] = frozenset()
        self.tool_definitions: List[Dict[str, Any]] = []
        self._started = False

    async def start(self) -> None:
        """Resolve entitlement and the allow-set. Runs once per process."""
        if self._started:
            return

        self.entitlement = await self.resolver.fetch_entitlement()
        self.allowed_tools = resolve_allowed_tools(self.entitlement)
        self.tool_definitions = get_tool_definitions(self.allowed_tools)
        self._started = True

        if self.resolver.warning:
            self.logger.warning("Entitlement warning", warning=self.resolver.warning)

        self.logger.info(
            "Mahakalp Salesforce MCP server ready",
            api=self.client.base_url,
            tier=effective_tier(self.entitlement).value,
            tools=[tool["name"] for tool in self.tool_definitions]
        )

    async def check_api(self) -> bool:
        """Probe the Yantra API once and log when it is unreachable."""
        healthy = await self.client.health_check()
        if not healthy:
            self.logger.warning("Yantra API health check failed", api=self.client.base_url)
        return healthy

    def list_tools(self) -> List[types.Tool]:
        return [types.Tool(**definition) for definition in self.tool_definitions]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        result = await self.dispatcher.handle(name, arguments or {}, self.allowed_tools)
        if result is None:
            return types.CallToolResult(
                content=[types.TextContent(type="text", text=f"Unknown tool: {name}")],
                isError=True
            )

        return types.CallToolResult(
            content=[types.TextContent(type="text", text=result.to_text())],
            isError=result.is_error
        )


def create_server(service: SutraService) -> Server:
    """Create the MCP server bound to a started service."""
    server = Server(USER_AGENT, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return service.list_tools()

    # Arguments are validated by the dispatcher so errors keep the
    # {"success": false, "error": ...} shape.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        return await service.call_tool(name, arguments)

    return server


async def serve(config: Optional[SutraConfig] = None) -> None:
    """Start the service and run the MCP server over stdio."""
    config = config or get_config()
    configure_logging(SERVICE_NAME, config.log_level)

    service = SutraService(config)
    await service.start()
    server = create_server(service)

    async with stdio_server() as (read_stream, write_stream):
        # Health probe runs alongside the handshake.
        probe = asyncio.create_task(service.check_api())
        try:
            await server.run(read_stream, write_stream, server.create_initialization_options())
        finally:
            probe.cancel()


def _handle_sigterm(signum, frame):
    raise SystemExit(0)


def main() -> None:
    """Console entry point."""
    configure_logging(SERVICE_NAME)
    logger = get_logger("sutra.main")
    signal.signal(signal.SIGTERM, _handle_sigterm)

    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as e:
        logger.error("Failed to start", error=str(e), error_type=type(e).__name__)
        sys.exit(1)


if __name__ == "__main__":
    main()
