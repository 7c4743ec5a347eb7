"""Tests for concurrent notification fan-out"""

import logging
from datetime import datetime
from unittest.mock import patch

import pytest
import requests

from workflow_alerts.alerts.channels.discord_channel import DiscordChannel
from workflow_alerts.alerts.channels.slack_channel import SlackChannel
from workflow_alerts.alerts.channels.webhook_channel import WebhookChannel
from workflow_alerts.alerts.notifier import Notifier
from workflow_alerts.alerts.storage.base_storage import Alert


def make_alert():
    return Alert(
        alert_id="alert_1700000000000_abc123xyz",
        rule_id="high_error_rate",
        name="High error rate",
        severity="high",
        message="HTTP request error rate above 5%",
        timestamp=datetime(2024, 3, 4, 12, 0, 0),
    )


class TestNotifier:
    """Test delivery isolation between channels"""

    def test_delivers_to_every_enabled_channel(self, make_channel):
        channels = [make_channel('slack'), make_channel('discord'), make_channel('webhook')]
        alert = make_alert()

        results = Notifier(channels).notify(alert)

        assert results == {'slack': True, 'discord': True, 'webhook': True}
        for channel in channels:
            assert channel.sent == [alert]

    def test_disabled_channel_skipped(self, make_channel):
        enabled = make_channel('slack')
        disabled = make_channel('webhook')
        disabled.enabled = False

        results = Notifier([enabled, disabled]).notify(make_alert())

        assert results == {'slack': True}
        assert disabled.sent == []

    def test_raising_channel_isolated(self, make_channel, caplog):
        """Test one channel raising does not block the others or the caller"""
        good_a = make_channel('slack')
        bad = make_channel('discord', raises=True)
        good_b = make_channel('webhook')

        with caplog.at_level(logging.ERROR):
            results = Notifier([good_a, bad, good_b]).notify(make_alert())

        assert results == {'slack': True, 'discord': False, 'webhook': True}
        assert len(good_a.sent) == 1
        assert len(good_b.sent) == 1
        assert "discord" in caplog.text

    def test_no_channels(self):
        assert Notifier([]).notify(make_alert()) == {}

    def test_duplicate_channel_types_rejected(self, make_channel):
        """Test results stay one entry per channel type"""
        with pytest.raises(ValueError, match="Duplicate notification channel type: slack"):
            Notifier([make_channel('slack'), make_channel('webhook'), make_channel('slack')])

    def test_unreachable_endpoint_isolated(self, caplog):
        """Test an unreachable HTTP endpoint only fails its own channel"""
        slack = SlackChannel({'webhook_url': 'https://hooks.slack.test/ok'})
        discord = DiscordChannel({'webhook_url': 'https://discord.test/ok'})
        webhook = WebhookChannel({'url': 'http://unreachable.invalid/hook'})

        def fake_request(method, url, **kwargs):
            if 'unreachable' in url:
                raise requests.exceptions.ConnectionError("connection refused")
            response = requests.Response()
            response.status_code = 204
            return response

        with patch("requests.post", side_effect=lambda url, **kw: fake_request("POST", url, **kw)) as mock_post, \
                patch("requests.request", side_effect=fake_request) as mock_request, \
                caplog.at_level(logging.ERROR):
            results = Notifier([slack, discord, webhook]).notify(make_alert())

        assert results == {"slack": True, "discord": True, "webhook": False}
        posted_urls = sorted(call.args[0] for call in mock_post.call_args_list)
        assert posted_urls == ["https://discord.test/ok", "https://hooks.slack.test/ok"]
        assert mock_request.call_count == 1
        assert "Failed to send webhook notification" in caplog.text
