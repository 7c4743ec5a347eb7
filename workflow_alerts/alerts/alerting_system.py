"""
Alerting system: wires rules, storage and notification channels together
and drives the periodic evaluation and cleanup tasks.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from workflow_alerts.alerts.alert_evaluator import AlertEvaluator
from workflow_alerts.alerts.alert_manager import AlertManager, DEFAULT_RETENTION_DAYS
from workflow_alerts.alerts.alert_rule import AlertRule, load_alert_rules
from workflow_alerts.alerts.channels import BaseChannel, create_channels
from workflow_alerts.alerts.default_rules import get_default_rules
from workflow_alerts.alerts.notifier import Notifier
from workflow_alerts.alerts.storage import Alert, BaseStorage, InMemoryStorage
from workflow_alerts.collectors.metrics_collector import MetricsCollector
from workflow_alerts.utils.scheduler import PeriodicTask

logger = logging.getLogger(__name__)


class AlertingSystem:
    """Explicitly constructed alerting component with a start/stop lifecycle"""

    def __init__(self, config: Dict[str, Any], metrics_source: MetricsCollector,
                 channels: Optional[List[BaseChannel]] = None,
                 rules: Optional[List[AlertRule]] = None,
                 storage: Optional[BaseStorage] = None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize alerting system.

        Args:
            config: The ``alerting`` section of the configuration
            metrics_source: Provides metric snapshots for rule evaluation
            channels: Notification channels; built from config when omitted
            rules: Initial rules; defaults plus the YAML rules file when omitted
            storage: Alert storage; in-memory when omitted
            clock: Source of the current time
        """
        self.config = config
        self.evaluation_interval = config.get('evaluation_interval', 60)
        self.cleanup_interval = config.get('cleanup_interval', 3600)

        storage_config = config.get('storage', {})
        self.storage = storage or InMemoryStorage()

        if channels is None:
            channels = create_channels(config.get('channels', {}))
        self.notifier = Notifier(channels)

        self.alert_manager = AlertManager(
            self.storage,
            self.notifier,
            retention_days=storage_config.get('retention_days', DEFAULT_RETENTION_DAYS),
            clock=clock,
        )

        if rules is None:
            rules = self._load_rules()
        self.evaluator = AlertEvaluator(rules, metrics_source, self.alert_manager, clock=clock)

        self._evaluation_task = PeriodicTask('alert-evaluator', self.evaluation_interval, self.check_rules)
        self._cleanup_task = PeriodicTask('alert-cleanup', self.cleanup_interval, self.cleanup_resolved_alerts)

    def _load_rules(self) -> List[AlertRule]:
        rules = get_default_rules()

        rules_file = self.config.get('alert_rules_file')
        if rules_file:
            default_ids = {rule.id for rule in rules}
            for rule in load_alert_rules(rules_file):
                if rule.id in default_ids:
                    logger.warning(f"Ignoring rule {rule.id} from {rules_file}: id already used by a default rule")
                    continue
                rules.append(rule)

        return rules

    @property
    def running(self) -> bool:
        return self._evaluation_task.running

    def start(self) -> None:
        """Start the evaluation and cleanup tasks"""
        self._evaluation_task.start()
        self._cleanup_task.start()

        logger.info(
            f"Alerting system started (rules: {self.evaluator.get_rule_count()}, "
            f"channels: {len(self.notifier.channels)})"
        )

    def stop(self) -> None:
        """Stop the periodic tasks; alerts stay queryable until shutdown"""
        self._evaluation_task.stop()
        self._cleanup_task.stop()
        logger.info("Alerting system stopped")

    def shutdown(self) -> None:
        """Stop the tasks and release storage"""
        self.stop()
        self.alert_manager.shutdown()

    def check_rules(self, now: Optional[datetime] = None) -> List[Alert]:
        """Run one evaluation pass"""
        return self.evaluator.evaluate_all_rules(now)

    def cleanup_resolved_alerts(self, now: Optional[datetime] = None) -> int:
        """Run one cleanup sweep"""
        return self.alert_manager.cleanup_resolved_alerts(now)

    def add_rule(self, rule: AlertRule) -> None:
        self.evaluator.add_rule(rule)

    def remove_rule(self, rule_id: str) -> bool:
        return self.evaluator.remove_rule(rule_id)

    def set_rule_enabled(self, rule_id: str, enabled: bool) -> bool:
        return self.evaluator.set_rule_enabled(rule_id, enabled)

    def get_active_alerts(self) -> List[Alert]:
        return self.alert_manager.get_active_alerts()

    def get_all_alerts(self) -> List[Alert]:
        return self.alert_manager.get_all_alerts()

    def resolve_alert(self, alert_id: str, now: Optional[datetime] = None) -> bool:
        return self.alert_manager.resolve_alert(alert_id, now)

    def get_alert_stats(self) -> Dict[str, Any]:
        """
        Get aggregate alert statistics.

        Returns:
            Dict with total/active/resolved counts, active counts by
            severity and rule counts
        """
        stats = self.alert_manager.get_alert_counts()
        stats['rules_count'] = self.evaluator.get_rule_count()
        stats['enabled_rules_count'] = self.evaluator.get_enabled_rule_count()
        return stats
