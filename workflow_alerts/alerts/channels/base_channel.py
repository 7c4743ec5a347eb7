"""
Base notification channel interface.
"""

from abc import ABC, abstractmethod
from typing import Dict
import logging

from workflow_alerts.alerts.storage.base_storage import Alert

logger = logging.getLogger(__name__)

FOOTER_TEXT = 'Investment Workflow Manager'


class BaseChannel(ABC):
    """Abstract base class for notification channels"""

    channel_type = 'base'

    def __init__(self, config: Dict):
        self.config = config
        self.enabled = config.get('enabled', True)
        self.timeout = config.get('timeout', 10)

    @abstractmethod
    def send(self, alert: Alert) -> bool:
        """
        Send alert notification.

        Args:
            alert: Alert to deliver

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass

    def format_title(self, alert: Alert) -> str:
        """Title line shared by the chat channels"""
        return f"\U0001F6A8 {alert.name}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(enabled={self.enabled})"
