"""
Tests for the client metrics collector.
"""

from __future__ import annotations

from orgtodo_client.metrics import MetricsCollector


def test_counters():
    m = MetricsCollector()
    m.inc("onboarding_checks_total")
    m.inc("onboarding_checks_total", 2)

    assert m.get("onboarding_checks_total") == 3
    assert m.get("never_touched") == 0


def test_prometheus_export():
    m = MetricsCollector()
    m.inc("onboarding_retries_total")
    text = m.to_prometheus()

    assert "# HELP orgtodo_client_onboarding_retries_total Status re-queries scheduled" in text
    assert "# TYPE orgtodo_client_onboarding_retries_total counter" in text
    assert "orgtodo_client_onboarding_retries_total 1\n" in text
    assert "orgtodo_client_uptime_seconds" in text


def test_known_counters_exported_at_zero():
    text = MetricsCollector().to_prometheus()
    assert "orgtodo_client_onboarding_errors_total 0\n" in text
    assert "orgtodo_client_onboarding_degraded_total 0\n" in text


def test_ad_hoc_counter_has_no_help_line():
    m = MetricsCollector()
    m.inc("custom_total")
    text = m.to_prometheus()
    assert "orgtodo_client_custom_total 1\n" in text
    assert "# HELP orgtodo_client_custom_total" not in text
