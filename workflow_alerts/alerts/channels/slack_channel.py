"""
Slack notification channel using webhooks.
"""

import logging
from typing import Dict

import requests

from workflow_alerts.alerts.channels.base_channel import BaseChannel, FOOTER_TEXT
from workflow_alerts.alerts.storage.base_storage import Alert

logger = logging.getLogger(__name__)

SEVERITY_COLORS = {
    'critical': 'danger',
    'high': 'warning',
    'medium': 'good',
    'low': '#36a64f',
}


class SlackChannel(BaseChannel):
    """Slack notification channel via webhooks"""

    channel_type = 'slack'

    def __init__(self, config: Dict):
        """
        Initialize Slack channel.

        Args:
            config: Slack configuration dict with webhook_url
        """
        super().__init__(config)
        self.webhook_url = config['webhook_url']
        self.channel = config.get('channel') or '#alerts'

        logger.info(f"Slack channel initialized (channel: {self.channel})")

    def send(self, alert: Alert) -> bool:
        """Post the alert as a Slack attachment"""
        try:
            payload = self.create_payload(alert)

            response = requests.post(
                self.webhook_url,
                json=payload,
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout
            )
            response.raise_for_status()

            logger.info(f"Slack notification sent for alert: {alert.alert_id}")
            return True

        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send Slack notification for alert {alert.alert_id}: {e}")
            return False

    def create_payload(self, alert: Alert) -> Dict:
        """Create Slack webhook payload"""
        attachment = {
            "color": SEVERITY_COLORS.get(alert.severity, 'good'),
            "title": self.format_title(alert),
            "text": alert.message,
            "fields": [
                {
                    "title": "Severity",
                    "value": alert.severity.upper(),
                    "short": True
                },
                {
                    "title": "Time",
                    "value": alert.timestamp.isoformat(),
                    "short": True
                },
            ],
            "footer": FOOTER_TEXT,
            "ts": int(alert.timestamp.timestamp()),
        }

        return {
            "channel": self.channel,
            "attachments": [attachment]
        }
