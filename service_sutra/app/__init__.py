"""
Sutra service package.

The service bridges MCP tool calls to the Yantra knowledge API, enforcing:
- Entitlements: resolved once at startup, failing open to the free tier
- Tool access: an allow-set derived from the entitlement gates every call
- Resilience: per-request timeouts and classified retries with linear backoff

Structure:
- app.main: MCP server wiring and the console entry point.
- app.adapters: Yantra HTTP client and its request/response models.
- app.entitlements: Entitlement models, resolver and tool-access policy.
- app.tools: Static tool catalog and the dispatcher.
"""
