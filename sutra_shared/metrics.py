"""
Shared metrics for the Sutra MCP server.

Metrics live in a process-local registry; nothing is exported over HTTP since
the server only speaks stdio.
"""

from typing import Dict, Any, Optional
import threading

from prometheus_client import Counter, Histogram, CollectorRegistry


class MetricsCollector:
    """Centralized metrics collector."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up metrics for the service."""

        # Yantra API metrics
        self._metrics["api_requests_total"] = Counter(
            "api_requests_total",
            "Total Yantra API requests",
            ["endpoint", "outcome"],
            registry=self.registry
        )

        self._metrics["api_request_duration_seconds"] = Histogram(
            "api_request_duration_seconds",
            "Yantra API request duration in seconds",
            ["endpoint"],
            registry=self.registry
        )

        self._metrics["api_retries_total"] = Counter(
            "api_retries_total",
            "Total Yantra API retries",
            ["endpoint"],
            registry=self.registry
        )

        # Tool metrics
        self._metrics["tool_calls_total"] = Counter(
            "tool_calls_total",
            "Total MCP tool calls",
            ["tool", "outcome"],
            registry=self.registry
        )

        self._metrics["entitlement_resolutions_total"] = Counter(
            "entitlement_resolutions_total",
            "Total entitlement resolutions",
            ["outcome"],
            registry=self.registry
        )

    def record_api_request(self, endpoint: str, outcome: str, duration: float):
        """Record one Yantra API attempt."""
        self._metrics["api_requests_total"].labels(endpoint=endpoint, outcome=outcome).inc()
        self._metrics["api_request_duration_seconds"].labels(endpoint=endpoint).observe(duration)

    def record_retry(self, endpoint: str):
        """Record a retry of a Yantra API call."""
        self._metrics["api_retries_total"].labels(endpoint=endpoint).inc()

    def record_tool_call(self, tool: str, outcome: str):
        """Record a dispatched tool call."""
        self._metrics["tool_calls_total"].labels(tool=tool, outcome=outcome).inc()

    def record_entitlement_resolution(self, outcome: str):
        """Record an entitlement resolution outcome."""
        self._metrics["entitlement_resolutions_total"].labels(outcome=outcome).inc()

    def get_sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read a sample back from the registry."""
        return self.registry.get_sample_value(name, labels or {})


_metrics_collectors: Dict[str, MetricsCollector] = {}
_collectors_lock = threading.Lock()


def get_metrics_collector(service_name: str) -> MetricsCollector:
    """Get or create the metrics collector for a service."""
    with _collectors_lock:
        if service_name not in _metrics_collectors:
            _metrics_collectors[service_name] = MetricsCollector(service_name)
        return _metrics_collectors[service_name]
