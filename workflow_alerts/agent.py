"""Main agent orchestration"""

import signal
import threading
from typing import Any, Dict, Optional

from workflow_alerts import __version__
from workflow_alerts.alerts.alerting_system import AlertingSystem
from workflow_alerts.collectors.metrics_collector import MetricsCollector
from workflow_alerts.exporters.prometheus_exporter import PrometheusExporter
from workflow_alerts.utils.logger import get_logger


class Agent:
    """Owns the metrics collector, the alerting system and the exporter"""

    def __init__(self, config: Dict[str, Any], metrics: Optional[MetricsCollector] = None):
        """
        Initialize agent

        Args:
            config: Configuration dictionary
            metrics: Metrics collector shared with the host application
        """
        self.config = config
        self.logger = get_logger(self.__class__.__name__)
        self.metrics = metrics or MetricsCollector()
        self.alerting: Optional[AlertingSystem] = None
        self.exporter: Optional[PrometheusExporter] = None
        self._stop_event = threading.Event()
        self.running = False

        if config.get('alerting', {}).get('enabled', False):
            self.alerting = AlertingSystem(config['alerting'], self.metrics)
            self.logger.info("Alerting system initialized")
        else:
            self.logger.warning("Alerting disabled in configuration")

        if config.get('prometheus', {}).get('enabled', False):
            self.exporter = PrometheusExporter(config, self.metrics, self.alerting)

    def _setup_signal_handlers(self):
        """Setup signal handlers for graceful shutdown"""
        def signal_handler(signum, frame):
            self.logger.info(f"Received signal {signum}, initiating graceful shutdown...")
            self._stop_event.set()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def start(self):
        """Start background components without blocking"""
        self.logger.info(f"Starting agent v{__version__}...")
        self.running = True

        try:
            if self.exporter:
                self.exporter.start()
            if self.alerting:
                self.alerting.start()
        except Exception as e:
            self.logger.error(f"Agent error: {e}", exc_info=True)
            self.stop()
            raise

        self.logger.info("Agent started successfully")

    def run_forever(self):
        """Start the agent and block until SIGINT or SIGTERM"""
        self._setup_signal_handlers()
        self.start()

        try:
            while not self._stop_event.wait(1):
                pass
        finally:
            self.stop()

    def stop(self):
        """Stop the agent"""
        if not self.running:
            return

        self.logger.info("Stopping agent...")
        self.running = False
        self._stop_event.set()

        if self.alerting:
            self.alerting.shutdown()

        if self.exporter:
            self.exporter.stop()

        self.logger.info("Agent stopped")
