"""
Base storage interface for raised alerts.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class Alert:
    """Alert instance data"""
    alert_id: str
    rule_id: str
    name: str
    severity: str
    message: str
    timestamp: datetime
    resolved: bool = False
    resolved_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        """Convert to a JSON-friendly dictionary"""
        return {
            'alert_id': self.alert_id,
            'rule_id': self.rule_id,
            'name': self.name,
            'severity': self.severity,
            'message': self.message,
            'timestamp': self.timestamp.isoformat(),
            'resolved': self.resolved,
            'resolved_at': self.resolved_at.isoformat() if self.resolved_at else None,
            'metadata': self.metadata,
        }


class BaseStorage(ABC):
    """Abstract base class for alert storage backends"""

    @abstractmethod
    def save_alert(self, alert: Alert) -> None:
        """
        Append a new alert.

        Args:
            alert: Alert instance to save
        """
        pass

    @abstractmethod
    def get_alert(self, alert_id: str) -> Optional[Alert]:
        """
        Retrieve alert by ID.

        Args:
            alert_id: Unique alert identifier

        Returns:
            Alert instance or None if not found
        """
        pass

    @abstractmethod
    def resolve_alert(self, alert_id: str, resolved_at: datetime) -> Optional[Alert]:
        """
        Mark an active alert as resolved.

        Args:
            alert_id: Alert identifier
            resolved_at: Resolution timestamp

        Returns:
            The resolved alert, or None if the id is unknown or already resolved
        """
        pass

    @abstractmethod
    def get_active_alerts(self) -> List[Alert]:
        """Get all unresolved alerts, oldest first"""
        pass

    @abstractmethod
    def get_all_alerts(self) -> List[Alert]:
        """Get every stored alert, oldest first"""
        pass

    @abstractmethod
    def cleanup_resolved_alerts(self, cutoff: datetime) -> int:
        """
        Delete resolved alerts whose resolution time is before ``cutoff``.

        Unresolved alerts are never deleted.

        Args:
            cutoff: Alerts resolved strictly before this instant are removed

        Returns:
            Number of alerts deleted
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release storage resources"""
        pass
