"""Prometheus HTTP exporter"""

from typing import Iterable, List, Optional

from prometheus_client import start_http_server
from prometheus_client.core import CollectorRegistry, CounterMetricFamily, GaugeMetricFamily, Metric

from workflow_alerts.alerts.alerting_system import AlertingSystem
from workflow_alerts.collectors.metrics_collector import MetricsCollector
from workflow_alerts.utils.logger import get_logger

QUANTILES = (0.5, 0.95, 0.99)


def percentile(sorted_values: List[float], quantile: float) -> float:
    """Nearest-rank percentile of an ascending list, 0 for an empty list"""
    if not sorted_values:
        return 0.0
    index = min(int(len(sorted_values) * quantile), len(sorted_values) - 1)
    return sorted_values[index]


class ApplicationMetricsCollector:
    """Custom Prometheus collector reading application and alert metrics on scrape"""

    def __init__(self, metrics: MetricsCollector, alerting: Optional[AlertingSystem] = None):
        self.metrics = metrics
        self.alerting = alerting

    def collect(self) -> Iterable[Metric]:
        yield from self._collect_http()
        yield from self._collect_errors()
        yield from self._collect_process()
        if self.alerting is not None:
            yield from self._collect_alerts()

    def _collect_http(self) -> Iterable[Metric]:
        requests_total = CounterMetricFamily(
            'http_requests',
            'Total number of HTTP requests',
            labels=['method', 'route', 'status']
        )
        for (method, route, status), count in self.metrics.get_http_request_counts().items():
            requests_total.add_metric([method, route, str(status)], count)
        yield requests_total

        durations = GaugeMetricFamily(
            'http_request_duration_seconds',
            'HTTP request duration quantiles in seconds',
            labels=['method', 'route', 'quantile']
        )
        for key, values in self.metrics.get_http_durations().items():
            method, route = key.split(':', 1)
            ordered = sorted(values)
            for quantile in QUANTILES:
                durations.add_metric(
                    [method, route, str(quantile)],
                    percentile(ordered, quantile) / 1000
                )
        yield durations

    def _collect_errors(self) -> Iterable[Metric]:
        errors = CounterMetricFamily(
            'application_errors',
            'Total number of application errors',
            labels=['type']
        )
        for error_type, count in self.metrics.get_error_counts().items():
            errors.add_metric([error_type], count)
        yield errors

    def _collect_process(self) -> Iterable[Metric]:
        system = self.metrics.get_system_resource_stats()

        memory = GaugeMetricFamily(
            'process_memory_usage_bytes',
            'Process and host memory usage in bytes',
            labels=['type']
        )
        memory.add_metric(['rss'], system.memory.rss)
        memory.add_metric(['host_used'], system.memory.used)
        memory.add_metric(['host_total'], system.memory.total)
        yield memory

        yield GaugeMetricFamily('process_uptime_seconds', 'Agent process uptime in seconds', value=system.uptime)

    def _collect_alerts(self) -> Iterable[Metric]:
        stats = self.alerting.get_alert_stats()

        active = GaugeMetricFamily('alerts_active', 'Active alerts by severity', labels=['severity'])
        for severity, count in stats['severity_counts'].items():
            active.add_metric([severity], count)
        yield active

        yield GaugeMetricFamily('alerts_stored', 'Alerts currently held in storage', value=stats['total_alerts'])
        yield GaugeMetricFamily('alerts_resolved', 'Resolved alerts currently held in storage',
                                value=stats['resolved_alerts'])

        rules = GaugeMetricFamily('alert_rules', 'Registered alert rules', labels=['state'])
        rules.add_metric(['enabled'], stats['enabled_rules_count'])
        rules.add_metric(['disabled'], stats['rules_count'] - stats['enabled_rules_count'])
        yield rules


class PrometheusExporter:
    """Prometheus HTTP server for exposing metrics"""

    def __init__(self, config, metrics: MetricsCollector, alerting: Optional[AlertingSystem] = None):
        """
        Initialize Prometheus exporter

        Args:
            config: Configuration dictionary
            metrics: Application metrics collector
            alerting: Alerting system whose statistics are exported
        """
        self.config = config
        self.logger = get_logger(self.__class__.__name__)

        self.host = config.get('prometheus', {}).get('host', '0.0.0.0')
        self.port = config.get('prometheus', {}).get('port', 9100)

        self.registry = CollectorRegistry()
        self.registry.register(ApplicationMetricsCollector(metrics, alerting))
        self.server = None
        self.running = False

    def start(self):
        """Start HTTP server"""
        try:
            self.logger.info(f"Starting Prometheus HTTP server on {self.host}:{self.port}")
            result = start_http_server(self.port, addr=self.host, registry=self.registry)
            # Newer prometheus_client releases return (server, thread)
            self.server = result[0] if isinstance(result, tuple) else None
            self.running = True
            self.logger.info(f"Metrics available at http://{self.host}:{self.port}/metrics")
        except OSError as e:
            self.logger.error(f"Failed to start Prometheus HTTP server: {e}")
            raise

    def stop(self):
        """Stop HTTP server"""
        if self.server is not None:
            self.server.shutdown()
            self.server = None
        self.running = False
        self.logger.info("Prometheus HTTP server stopped")
