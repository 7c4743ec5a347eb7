"""
Email notification channel placeholder.
"""

import logging
from typing import Dict

from workflow_alerts.alerts.channels.base_channel import BaseChannel
from workflow_alerts.alerts.storage.base_storage import Alert

logger = logging.getLogger(__name__)


class EmailChannel(BaseChannel):
    """Logs the email that would be sent; no mail transport is wired up"""

    channel_type = 'email'

    def __init__(self, config: Dict):
        """
        Initialize email channel.

        Args:
            config: Email configuration dict with to and from_address
        """
        super().__init__(config)
        self.to_address = config['to']
        self.from_address = config.get('from_address') or 'alerts@yourdomain.com'

        logger.info(f"Email channel initialized (to: {self.to_address})")

    def send(self, alert: Alert) -> bool:
        message = self.create_message(alert)
        logger.info(
            f"Email notification would be sent to {message['to']} "
            f"(subject: {message['subject']}, alert: {alert.alert_id})"
        )
        return True

    def create_message(self, alert: Alert) -> Dict[str, str]:
        """Build the headers and body of the alert email"""
        return {
            'to': self.to_address,
            'from': self.from_address,
            'subject': f"Alert: {alert.name}",
            'body': (f"{alert.message}\n\n"
                     f"Severity: {alert.severity.upper()}\n"
                     f"Time: {alert.timestamp.isoformat()}"),
        }
