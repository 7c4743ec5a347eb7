"""
Concurrent fan-out of alerts to notification channels.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List

from workflow_alerts.alerts.channels.base_channel import BaseChannel
from workflow_alerts.alerts.storage.base_storage import Alert

logger = logging.getLogger(__name__)


class Notifier:
    """Delivers each alert to every enabled channel

    Deliveries run concurrently and are awaited as a batch. A failing
    channel is logged and never affects the others or the caller.
    """

    def __init__(self, channels: List[BaseChannel]):
        """
        Initialize notifier.

        Args:
            channels: Notification channels, read-only after construction

        Raises:
            ValueError: If two channels share a channel type
        """
        channel_types = [channel.channel_type for channel in channels]
        duplicates = sorted({t for t in channel_types if channel_types.count(t) > 1})
        if duplicates:
            raise ValueError(f"Duplicate notification channel type: {', '.join(duplicates)}")

        self.channels = list(channels)

    @property
    def enabled_channels(self) -> List[BaseChannel]:
        return [channel for channel in self.channels if channel.enabled]

    def notify(self, alert: Alert) -> Dict[str, bool]:
        """
        Send an alert through all enabled channels.

        Args:
            alert: Alert to deliver

        Returns:
            Delivery result keyed by channel type
        """
        channels = self.enabled_channels
        if not channels:
            logger.debug(f"No enabled channels for alert {alert.alert_id}")
            return {}

        logger.info(f"Sending notifications for alert {alert.alert_id} to {len(channels)} channels")

        with ThreadPoolExecutor(max_workers=len(channels),
                                thread_name_prefix='notifier') as executor:
            futures = [
                (channel, executor.submit(self._send, channel, alert))
                for channel in channels
            ]
            results = {channel.channel_type: future.result() for channel, future in futures}

        failed = [name for name, ok in results.items() if not ok]
        if failed:
            logger.warning(f"Notification failed for alert {alert.alert_id} via: {', '.join(failed)}")

        return results

    @staticmethod
    def _send(channel: BaseChannel, alert: Alert) -> bool:
        try:
            success = channel.send(alert)
        except Exception as e:
            logger.error(
                f"Error sending notification via {channel.channel_type} for {alert.alert_id}: {e}",
                exc_info=True
            )
            return False

        if success:
            logger.info(f"Notification sent via {channel.channel_type} for {alert.alert_id}")
        else:
            logger.error(f"Failed to send notification via {channel.channel_type} for {alert.alert_id}")
        return bool(success)
