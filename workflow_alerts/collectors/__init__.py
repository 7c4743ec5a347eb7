"""
Application metrics collection.
"""

from workflow_alerts.collectors.metrics_collector import MetricsCollector
from workflow_alerts.collectors.snapshot import MetricsSnapshot

__all__ = ['MetricsCollector', 'MetricsSnapshot']
