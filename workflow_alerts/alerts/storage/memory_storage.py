"""
In-memory storage backend for raised alerts.
"""

import copy
import logging
import threading
from datetime import datetime
from typing import List, Optional

from workflow_alerts.alerts.storage.base_storage import BaseStorage, Alert

logger = logging.getLogger(__name__)


class InMemoryStorage(BaseStorage):
    """Process-local alert list guarded by a lock

    Readers get copies, so callers can never mutate stored alerts directly.
    """

    def __init__(self):
        self._alerts: List[Alert] = []
        self._lock = threading.Lock()

        logger.info("Initialized in-memory alert storage")

    def save_alert(self, alert: Alert) -> None:
        """Append a new alert"""
        with self._lock:
            self._alerts.append(copy.deepcopy(alert))
        logger.debug(f"Saved alert: {alert.alert_id}")

    def get_alert(self, alert_id: str) -> Optional[Alert]:
        """Retrieve alert by ID"""
        with self._lock:
            alert = self._find(alert_id)
            return copy.deepcopy(alert) if alert else None

    def resolve_alert(self, alert_id: str, resolved_at: datetime) -> Optional[Alert]:
        """Resolve an active alert once; later calls leave it untouched"""
        with self._lock:
            alert = self._find(alert_id)
            if alert is None or alert.resolved:
                return None

            alert.resolved = True
            alert.resolved_at = resolved_at
            return copy.deepcopy(alert)

    def get_active_alerts(self) -> List[Alert]:
        """Get all unresolved alerts"""
        with self._lock:
            return [copy.deepcopy(a) for a in self._alerts if not a.resolved]

    def get_all_alerts(self) -> List[Alert]:
        """Get every stored alert"""
        with self._lock:
            return copy.deepcopy(self._alerts)

    def cleanup_resolved_alerts(self, cutoff: datetime) -> int:
        """Delete alerts resolved before the cutoff"""
        with self._lock:
            before = len(self._alerts)
            self._alerts = [
                a for a in self._alerts
                if not a.resolved or a.resolved_at is None or a.resolved_at >= cutoff
            ]
            deleted_count = before - len(self._alerts)

        if deleted_count > 0:
            logger.debug(f"Deleted {deleted_count} alerts resolved before {cutoff.isoformat()}")
        return deleted_count

    def close(self) -> None:
        """Drop all alerts"""
        with self._lock:
            self._alerts.clear()
        logger.debug("Closed in-memory alert storage")

    def _find(self, alert_id: str) -> Optional[Alert]:
        for alert in self._alerts:
            if alert.alert_id == alert_id:
                return alert
        return None
