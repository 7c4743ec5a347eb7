"""Shared fixtures for alerting tests"""

from datetime import datetime
from typing import List

import pytest

from workflow_alerts.alerts.channels.base_channel import BaseChannel
from workflow_alerts.alerts.notifier import Notifier
from workflow_alerts.alerts.storage.memory_storage import InMemoryStorage
from workflow_alerts.alerts.alert_manager import AlertManager
from workflow_alerts.collectors.snapshot import MetricsSnapshot


class StaticMetricsSource:
    """Returns a fixed snapshot stamped with the evaluation time"""

    def __init__(self, snapshot: MetricsSnapshot = None):
        self.base = snapshot or MetricsSnapshot()
        self.calls = 0
        self.error = None

    def snapshot(self, now=None):
        self.calls += 1
        if self.error:
            raise self.error
        self.base.taken_at = now or datetime.now()
        return self.base


class RecordingChannel(BaseChannel):
    """Channel that records alerts instead of delivering them"""

    def __init__(self, channel_type='webhook', fail=False, raises=False):
        super().__init__({'enabled': True})
        self.channel_type = channel_type
        self.fail = fail
        self.raises = raises
        self.sent: List = []

    def send(self, alert):
        if self.raises:
            raise ConnectionError(f"{self.channel_type} unreachable")
        if self.fail:
            return False
        self.sent.append(alert)
        return True


@pytest.fixture
def metrics_source():
    return StaticMetricsSource()


@pytest.fixture
def make_channel():
    """Factory for recording channels"""
    return RecordingChannel


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def storage():
    storage = InMemoryStorage()
    yield storage
    storage.close()


@pytest.fixture
def alert_manager(storage, channel):
    return AlertManager(storage, Notifier([channel]), retention_days=7)
