"""
Shared utilities for the Sutra MCP server.

This package aggregates the building blocks used by the service package:

- config: Process configuration via pydantic-settings
- logging: Structured logging to stderr with trace correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- retry: Classified retries with linear backoff

Do not import from service_sutra into sutra_shared.
"""
