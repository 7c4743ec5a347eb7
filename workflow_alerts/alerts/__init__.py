"""
Alert system module for the workflow monitoring agent.
"""

from workflow_alerts.alerts.alert_rule import AlertRule, load_alert_rules, threshold_rule
from workflow_alerts.alerts.alert_manager import AlertManager
from workflow_alerts.alerts.alert_evaluator import AlertEvaluator
from workflow_alerts.alerts.alerting_system import AlertingSystem
from workflow_alerts.alerts.notifier import Notifier

__all__ = [
    'AlertRule',
    'load_alert_rules',
    'threshold_rule',
    'AlertManager',
    'AlertEvaluator',
    'AlertingSystem',
    'Notifier',
]
