"""
Custom webhook notification channel.
"""

import logging
from typing import Dict

import requests

from workflow_alerts.alerts.channels.base_channel import BaseChannel
from workflow_alerts.alerts.storage.base_storage import Alert

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ('POST', 'PUT', 'PATCH')


class WebhookChannel(BaseChannel):
    """Custom webhook notification channel"""

    channel_type = 'webhook'

    def __init__(self, config: Dict):
        """
        Initialize webhook channel.

        Args:
            config: Webhook configuration dict with url, method, headers
        """
        super().__init__(config)
        self.url = config['url']
        self.method = (config.get('method') or 'POST').upper()
        self.headers = dict(config.get('headers') or {})

        if self.method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}. Must be one of {SUPPORTED_METHODS}")

        # Ensure Content-Type is set
        if 'Content-Type' not in self.headers:
            self.headers['Content-Type'] = 'application/json'

        logger.info(f"Webhook channel initialized (url: {self.url}, method: {self.method})")

    def send(self, alert: Alert) -> bool:
        """Deliver the alert envelope to the webhook"""
        try:
            response = requests.request(
                self.method,
                self.url,
                json=self.create_payload(alert),
                headers=self.headers,
                timeout=self.timeout
            )
            response.raise_for_status()

            logger.info(f"Webhook notification sent for alert: {alert.alert_id}")
            return True

        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send webhook notification for alert {alert.alert_id}: {e}")
            return False

    def create_payload(self, alert: Alert) -> Dict:
        """Create webhook payload"""
        data = alert.to_dict()
        return {
            "alert": {
                "id": data['alert_id'],
                "name": data['name'],
                "severity": data['severity'],
                "message": data['message'],
                "timestamp": data['timestamp'],
                "metadata": data['metadata'],
            }
        }
