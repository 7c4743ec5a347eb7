"""
Alert evaluator for checking rule conditions against metrics.
"""

import copy
import logging
import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional

from workflow_alerts.alerts.alert_rule import AlertRule
from workflow_alerts.alerts.alert_manager import AlertManager
from workflow_alerts.alerts.storage.base_storage import Alert
from workflow_alerts.collectors.metrics_collector import MetricsCollector

logger = logging.getLogger(__name__)


class AlertEvaluator:
    """Evaluates alert rules against current metrics, honouring per-rule cooldowns"""

    def __init__(self, rules: List[AlertRule], metrics_source: MetricsCollector,
                 alert_manager: AlertManager,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize alert evaluator.

        Args:
            rules: Initial alert rules
            metrics_source: Anything with a ``snapshot(now)`` method
            alert_manager: AlertManager for raising alerts
            clock: Source of the current time
        """
        self.metrics_source = metrics_source
        self.alert_manager = alert_manager
        self.clock = clock

        self._rules: List[AlertRule] = []
        self._last_triggered: Dict[str, datetime] = {}
        self._lock = threading.RLock()
        # Serializes whole passes so the cooldown check and update are atomic
        self._tick_lock = threading.Lock()

        for rule in rules:
            self.add_rule(rule)

        logger.info(f"Alert evaluator initialized with {len(self._rules)} rules")

    def evaluate_all_rules(self, now: Optional[datetime] = None) -> List[Alert]:
        """
        Evaluate every enabled rule whose cooldown has elapsed.

        A failing rule is logged and skipped; the remaining rules are still
        evaluated.

        Args:
            now: Evaluation time, defaults to the clock

        Returns:
            Alerts raised during this pass
        """
        now = now or self.clock()
        with self._tick_lock:
            return self._evaluate(now)

    def _evaluate(self, now: datetime) -> List[Alert]:
        due_rules = self._get_due_rules(now)
        if not due_rules:
            return []

        try:
            snapshot = self.metrics_source.snapshot(now)
        except Exception as e:
            for rule in due_rules:
                logger.error(f"Error checking alert rule {rule.id} ({rule.name}): metrics unavailable: {e}")
            return []

        raised = []
        for rule in due_rules:
            try:
                if not rule.condition(snapshot):
                    continue
                alert = self.alert_manager.trigger_alert(rule, snapshot, now)
            except Exception as e:
                logger.error(f"Error checking alert rule {rule.id} ({rule.name}): {e}", exc_info=True)
                continue

            with self._lock:
                # The rule may have been removed while it was evaluated
                if any(r is rule for r in self._rules):
                    self._last_triggered[rule.id] = now
            raised.append(alert)

        return raised

    def _get_due_rules(self, now: datetime) -> List[AlertRule]:
        due = []
        with self._lock:
            for rule in self._rules:
                if not rule.enabled:
                    logger.debug(f"Skipping disabled rule: {rule.id}")
                    continue

                last = self._last_triggered.get(rule.id)
                if last is not None and (now - last).total_seconds() < rule.cooldown_seconds:
                    logger.debug(f"Rule {rule.id} in cooldown")
                    continue

                due.append(rule)
        return due

    def add_rule(self, rule: AlertRule) -> None:
        """
        Add a new rule to the evaluator.

        The rule is copied, so later changes to the caller's instance have no
        effect; use set_rule_enabled to toggle it.

        Args:
            rule: Alert rule to add

        Raises:
            ValueError: If a rule with the same id is already registered
        """
        rule = copy.copy(rule)
        with self._lock:
            if any(r.id == rule.id for r in self._rules):
                raise ValueError(f"Alert rule already registered: {rule.id}")
            self._rules.append(rule)
        logger.info(f"Alert rule added: {rule.id} ({rule.name})")

    def remove_rule(self, rule_id: str) -> bool:
        """
        Remove a rule by id.

        Args:
            rule_id: Id of rule to remove

        Returns:
            True if rule was removed, False if not found
        """
        with self._lock:
            for i, rule in enumerate(self._rules):
                if rule.id == rule_id:
                    del self._rules[i]
                    self._last_triggered.pop(rule_id, None)
                    logger.info(f"Alert rule removed: {rule_id} ({rule.name})")
                    return True

        logger.warning(f"Rule not found: {rule_id}")
        return False

    def set_rule_enabled(self, rule_id: str, enabled: bool) -> bool:
        """Enable or disable a rule; returns False if the rule is unknown"""
        with self._lock:
            rule = self.get_rule(rule_id)
            if rule is None:
                logger.warning(f"Rule not found: {rule_id}")
                return False
            rule.enabled = enabled

        logger.info(f"Alert rule {rule_id} {'enabled' if enabled else 'disabled'}")
        return True

    def get_rule(self, rule_id: str) -> Optional[AlertRule]:
        with self._lock:
            for rule in self._rules:
                if rule.id == rule_id:
                    return rule
        return None

    def get_rules(self) -> List[AlertRule]:
        with self._lock:
            return list(self._rules)

    def get_rule_count(self) -> int:
        """Get total number of rules"""
        with self._lock:
            return len(self._rules)

    def get_enabled_rule_count(self) -> int:
        """Get number of enabled rules"""
        with self._lock:
            return sum(1 for rule in self._rules if rule.enabled)
