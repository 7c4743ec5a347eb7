"""
Alert manager for creating, resolving and pruning alerts.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from workflow_alerts.alerts.alert_rule import AlertRule, SEVERITIES
from workflow_alerts.alerts.notifier import Notifier
from workflow_alerts.alerts.storage.base_storage import BaseStorage, Alert
from workflow_alerts.collectors.snapshot import MetricsSnapshot
from workflow_alerts.utils.helpers import generate_alert_id

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 7


class AlertManager:
    """Manages alert lifecycle and notifications"""

    def __init__(self, storage: BaseStorage, notifier: Notifier,
                 retention_days: float = DEFAULT_RETENTION_DAYS,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize alert manager.

        Args:
            storage: Storage backend for raised alerts
            notifier: Delivers new alerts to notification channels
            retention_days: How long resolved alerts are kept
            clock: Source of the current time
        """
        self.storage = storage
        self.notifier = notifier
        self.retention = timedelta(days=retention_days)
        self.clock = clock

        logger.info("Alert manager initialized")

    def trigger_alert(self, rule: AlertRule, snapshot: MetricsSnapshot,
                      now: Optional[datetime] = None) -> Alert:
        """
        Create and store an alert for a rule that fired, then notify.

        Args:
            rule: Alert rule that triggered
            snapshot: Metrics the rule fired on
            now: Trigger time, defaults to the clock

        Returns:
            The new alert
        """
        now = now or self.clock()

        alert = Alert(
            alert_id=generate_alert_id(now.timestamp()),
            rule_id=rule.id,
            name=rule.name,
            severity=rule.severity,
            message=rule.render_message(snapshot),
            timestamp=now,
            metadata=rule.build_metadata(snapshot),
        )
        self.storage.save_alert(alert)

        logger.warning(
            f"Alert triggered: {alert.alert_id} ({rule.name}, severity: {rule.severity}): "
            f"{alert.message}"
        )

        self.notifier.notify(alert)
        return alert

    def resolve_alert(self, alert_id: str, now: Optional[datetime] = None) -> bool:
        """
        Mark alert as resolved.

        Unknown and already-resolved ids are ignored.

        Args:
            alert_id: Alert identifier
            now: Resolution time, defaults to the clock

        Returns:
            True if the alert moved from active to resolved
        """
        alert = self.storage.resolve_alert(alert_id, now or self.clock())
        if alert is None:
            logger.debug(f"Resolve ignored for unknown or resolved alert: {alert_id}")
            return False

        logger.info(f"Alert resolved: {alert_id} ({alert.name})")
        return True

    def get_active_alerts(self) -> List[Alert]:
        """Get all unresolved alerts"""
        return self.storage.get_active_alerts()

    def get_all_alerts(self) -> List[Alert]:
        """Get every stored alert"""
        return self.storage.get_all_alerts()

    def get_alert(self, alert_id: str) -> Optional[Alert]:
        return self.storage.get_alert(alert_id)

    def get_alert_counts(self) -> Dict:
        """Get total, active and resolved counts plus active counts by severity"""
        alerts = self.storage.get_all_alerts()
        active = [a for a in alerts if not a.resolved]

        severity_counts = {severity: 0 for severity in reversed(SEVERITIES)}
        for alert in active:
            severity_counts[alert.severity] += 1

        return {
            'total_alerts': len(alerts),
            'active_alerts': len(active),
            'resolved_alerts': len(alerts) - len(active),
            'severity_counts': severity_counts,
        }

    def cleanup_resolved_alerts(self, now: Optional[datetime] = None) -> int:
        """
        Delete resolved alerts older than the retention window.

        Args:
            now: Reference time, defaults to the clock

        Returns:
            Number of alerts deleted
        """
        cutoff = (now or self.clock()) - self.retention
        deleted_count = self.storage.cleanup_resolved_alerts(cutoff)
        if deleted_count > 0:
            logger.info(f"Cleaned up {deleted_count} resolved alerts")
        return deleted_count

    def shutdown(self) -> None:
        """Shutdown alert manager and cleanup resources"""
        logger.info("Shutting down alert manager")
        self.storage.close()
