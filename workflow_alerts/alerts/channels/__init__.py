"""
Notification channels for alert delivery.
"""

import logging
from typing import Dict, List

from workflow_alerts.alerts.channels.base_channel import BaseChannel
from workflow_alerts.alerts.channels.discord_channel import DiscordChannel
from workflow_alerts.alerts.channels.email_channel import EmailChannel
from workflow_alerts.alerts.channels.slack_channel import SlackChannel
from workflow_alerts.alerts.channels.webhook_channel import WebhookChannel

logger = logging.getLogger(__name__)

CHANNEL_CLASSES = {
    'slack': SlackChannel,
    'discord': DiscordChannel,
    'email': EmailChannel,
    'webhook': WebhookChannel,
}


def create_channels(channel_config: Dict) -> List[BaseChannel]:
    """
    Initialize notification channels enabled in config.

    Args:
        channel_config: Mapping of channel type to its configuration dict

    Returns:
        List of channel instances in slack, discord, email, webhook order
    """
    channels = []

    for channel_type, channel_class in CHANNEL_CLASSES.items():
        config = channel_config.get(channel_type, {})
        if not config.get('enabled', False):
            continue

        try:
            channels.append(channel_class(config))
            logger.info(f"{channel_type.capitalize()} channel initialized")
        except (KeyError, ValueError) as e:
            logger.error(f"Failed to initialize {channel_type} channel: {e}")

    if not channels:
        logger.warning("No notification channels enabled")

    return channels


__all__ = [
    'BaseChannel',
    'DiscordChannel',
    'EmailChannel',
    'SlackChannel',
    'WebhookChannel',
    'CHANNEL_CLASSES',
    'create_channels',
]
