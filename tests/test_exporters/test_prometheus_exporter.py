"""Tests for the Prometheus exporter"""

from datetime import datetime

import pytest
from prometheus_client import generate_latest

from workflow_alerts.alerts.alert_rule import AlertRule
from workflow_alerts.alerts.alerting_system import AlertingSystem
from workflow_alerts.collectors.metrics_collector import MetricsCollector
from workflow_alerts.exporters.prometheus_exporter import PrometheusExporter, percentile


@pytest.fixture
def metrics():
    collector = MetricsCollector()
    for duration in (100, 200, 300, 400):
        collector.record_http_request('GET', '/api/workflows', 200, duration)
    collector.record_http_request('POST', '/api/workflows', 500, 50)
    collector.record_error('DatabaseError')
    return collector


@pytest.fixture
def alerting(metrics):
    rule = AlertRule(
        id='database_connection_error',
        name='Database connection error',
        condition=lambda s: s.errors.get('DatabaseError', 0) > 0,
        severity='critical',
        cooldown_seconds=120,
    )
    system = AlertingSystem({}, metrics, channels=[], rules=[rule])
    yield system
    system.shutdown()


def test_percentile():
    assert percentile([], 0.5) == 0.0
    assert percentile([1.0, 2.0, 3.0, 4.0], 0.5) == 3.0
    assert percentile([1.0, 2.0, 3.0, 4.0], 0.99) == 4.0


class TestPrometheusExporter:
    """Test metrics exposed on scrape"""

    def test_application_metrics(self, metrics):
        exporter = PrometheusExporter({'prometheus': {'port': 9100}}, metrics)
        registry = exporter.registry

        assert registry.get_sample_value(
            'http_requests_total', {'method': 'GET', 'route': '/api/workflows', 'status': '200'}) == 4
        assert registry.get_sample_value('application_errors_total', {'type': 'DatabaseError'}) == 1
        assert registry.get_sample_value(
            'http_request_duration_seconds',
            {'method': 'GET', 'route': '/api/workflows', 'quantile': '0.5'}) == pytest.approx(0.3)
        assert registry.get_sample_value('process_uptime_seconds') >= 0
        assert registry.get_sample_value('alerts_stored') is None

    def test_alert_metrics(self, metrics, alerting):
        alerting.check_rules(datetime.now())
        registry = PrometheusExporter({}, metrics, alerting).registry

        assert registry.get_sample_value('alerts_active', {'severity': 'critical'}) == 1
        assert registry.get_sample_value('alerts_active', {'severity': 'low'}) == 0
        assert registry.get_sample_value('alerts_stored') == 1
        assert registry.get_sample_value('alerts_resolved') == 0
        assert registry.get_sample_value('alert_rules', {'state': 'enabled'}) == 1

    def test_exposition_format(self, metrics, alerting):
        output = generate_latest(PrometheusExporter({}, metrics, alerting).registry).decode()

        assert '# TYPE http_requests_total counter' in output
        assert 'alerts_active{severity="critical"}' in output

    def test_stop_without_start(self, metrics):
        exporter = PrometheusExporter({}, metrics)
        exporter.stop()

        assert exporter.running is False
