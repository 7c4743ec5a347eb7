"""
Discord notification channel using webhooks.
"""

import logging
from typing import Dict

import requests

from workflow_alerts.alerts.channels.base_channel import BaseChannel, FOOTER_TEXT
from workflow_alerts.alerts.storage.base_storage import Alert

logger = logging.getLogger(__name__)

# Embed colours keyed by severity
SEVERITY_COLORS = {
    'critical': 0xFF0000,
    'high': 0xFF8C00,
    'medium': 0xFFFF00,
    'low': 0x00FF00,
}
DEFAULT_COLOR = 0x808080


class DiscordChannel(BaseChannel):
    """Discord notification channel via webhook embeds"""

    channel_type = 'discord'

    def __init__(self, config: Dict):
        """
        Initialize Discord channel.

        Args:
            config: Discord configuration dict with webhook_url
        """
        super().__init__(config)
        self.webhook_url = config['webhook_url']

        logger.info("Discord channel initialized")

    def send(self, alert: Alert) -> bool:
        """Post the alert as a Discord embed"""
        try:
            response = requests.post(
                self.webhook_url,
                json=self.create_payload(alert),
                timeout=self.timeout
            )
            response.raise_for_status()

            logger.info(f"Discord notification sent for alert: {alert.alert_id}")
            return True

        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send Discord notification for alert {alert.alert_id}: {e}")
            return False

    def create_payload(self, alert: Alert) -> Dict:
        """Create Discord webhook payload"""
        embed = {
            "title": self.format_title(alert),
            "description": alert.message,
            "color": SEVERITY_COLORS.get(alert.severity, DEFAULT_COLOR),
            "fields": [
                {
                    "name": "Severity",
                    "value": alert.severity.upper(),
                    "inline": True
                },
                {
                    "name": "Time",
                    "value": alert.timestamp.isoformat(),
                    "inline": True
                },
            ],
            "footer": {"text": FOOTER_TEXT},
            "timestamp": alert.timestamp.isoformat(),
        }

        return {"embeds": [embed]}
