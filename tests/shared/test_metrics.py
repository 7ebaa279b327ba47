"""
Tests for the metrics collector.
"""

from prometheus_client import CollectorRegistry

from sutra_shared.metrics import MetricsCollector, get_metrics_collector


def test_records_api_requests():
    metrics = MetricsCollector("sutra-test", registry=CollectorRegistry())

    metrics.record_api_request("/api/health", "success", 0.05)
    metrics.record_api_request("/api/health", "success", 0.07)
    metrics.record_retry("/api/health")

    assert metrics.get_sample_value("api_requests_total", {"endpoint": "/api/health", "outcome": "success"}) == 2.0
    assert metrics.get_sample_value("api_request_duration_seconds_count", {"endpoint": "/api/health"}) == 2.0
    assert metrics.get_sample_value("api_retries_total", {"endpoint": "/api/health"}) == 1.0


def test_records_tool_calls_and_entitlements():
    metrics = MetricsCollector("sutra-test", registry=CollectorRegistry())

    metrics.record_tool_call("mahakalp_sf_rules", "rejected")
    metrics.record_entitlement_resolution("absent")

    assert metrics.get_sample_value("tool_calls_total", {"tool": "mahakalp_sf_rules", "outcome": "rejected"}) == 1.0
    assert metrics.get_sample_value("entitlement_resolutions_total", {"outcome": "absent"}) == 1.0


def test_collectors_are_shared_per_service():
    assert get_metrics_collector("sutra-shared-test") is get_metrics_collector("sutra-shared-test")
