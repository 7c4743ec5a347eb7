"""
Storage backends for raised alerts.
"""

from workflow_alerts.alerts.storage.base_storage import BaseStorage, Alert
from workflow_alerts.alerts.storage.memory_storage import InMemoryStorage

__all__ = ['BaseStorage', 'Alert', 'InMemoryStorage']
