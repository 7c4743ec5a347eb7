"""
Built-in alert rules seeded on every start.
"""

from dataclasses import asdict
from typing import List

from workflow_alerts.alerts.alert_rule import AlertRule
from workflow_alerts.collectors.snapshot import MetricsSnapshot
from workflow_alerts.utils.helpers import format_megabytes, safe_divide

MINUTE = 60

WORKING_HOURS = range(9, 19)  # 09:00 through 18:59


def _file_upload_failure_rate(snapshot: MetricsSnapshot):
    """Failure rate in percent, or None unless both upload counters exist"""
    uploads = snapshot.business.metrics_by_name.get('file_upload')
    upload_errors = snapshot.business.metrics_by_name.get('file_upload_error')
    if not uploads or not upload_errors:
        return None
    return safe_divide(upload_errors.count, uploads.count) * 100


def _low_active_users(snapshot: MetricsSnapshot) -> bool:
    if snapshot.taken_at.hour not in WORKING_HOURS:
        return False
    return snapshot.users.active_users_last_hour < 5


def _file_upload_failure(snapshot: MetricsSnapshot) -> bool:
    rate = _file_upload_failure_rate(snapshot)
    return rate is not None and rate > 10


def _error_rate_message(snapshot: MetricsSnapshot) -> str:
    return (f"\nCurrent error rate: {snapshot.http.error_rate:.2f}%"
            f"\nTotal requests: {snapshot.http.total_requests}")


def _memory_message(snapshot: MetricsSnapshot) -> str:
    memory = snapshot.system.memory
    return (f"\nMemory usage: {memory.usage_percent:.2f}%"
            f"\nUsed memory: {format_megabytes(memory.used)}"
            f"\nTotal memory: {format_megabytes(memory.total)}")


def _file_upload_message(snapshot: MetricsSnapshot) -> str:
    rate = _file_upload_failure_rate(snapshot)
    if rate is None:
        return ""
    uploads = snapshot.business.metrics_by_name['file_upload']
    upload_errors = snapshot.business.metrics_by_name['file_upload_error']
    return (f"\nFile upload failure rate: {rate:.2f}%"
            f"\nSuccessful uploads: {uploads.count - upload_errors.count}"
            f"\nFailed uploads: {upload_errors.count}")


def get_default_rules() -> List[AlertRule]:
    """Build a fresh copy of the default rule set"""
    return [
        AlertRule(
            id='high_error_rate',
            name='High error rate',
            condition=lambda s: s.http.error_rate > 5,
            severity='high',
            cooldown_seconds=5 * MINUTE,
            description='HTTP request error rate above 5%',
            message_builder=_error_rate_message,
            metadata_builder=lambda s: asdict(s.http),
        ),
        AlertRule(
            id='slow_response_time',
            name='Slow response time',
            condition=lambda s: s.http.average_response_time_ms > 2000,
            severity='medium',
            cooldown_seconds=10 * MINUTE,
            description='Average response time above 2 seconds',
            message_builder=lambda s: f"\nAverage response time: {s.http.average_response_time_ms:.2f}ms",
            metadata_builder=lambda s: asdict(s.http),
        ),
        AlertRule(
            id='high_memory_usage',
            name='High memory usage',
            condition=lambda s: s.system.memory.usage_percent > 90,
            severity='critical',
            cooldown_seconds=5 * MINUTE,
            description='Memory usage above 90%',
            message_builder=_memory_message,
            metadata_builder=lambda s: asdict(s.system),
        ),
        AlertRule(
            id='low_active_users',
            name='Unusually low active users',
            condition=_low_active_users,
            severity='low',
            cooldown_seconds=30 * MINUTE,
            description='Unusually few active users during working hours',
            message_builder=lambda s: f"\nActive users in the last hour: {s.users.active_users_last_hour}",
            metadata_builder=lambda s: asdict(s.users),
        ),
        AlertRule(
            id='database_connection_error',
            name='Database connection error',
            condition=lambda s: s.errors.get('DatabaseError', 0) > 0,
            severity='critical',
            cooldown_seconds=2 * MINUTE,
            description='Database connection errors detected',
            message_builder=lambda s: f"\nDatabase errors: {s.errors.get('DatabaseError', 0)}",
        ),
        AlertRule(
            id='file_upload_failure',
            name='High file upload failure rate',
            condition=_file_upload_failure,
            severity='medium',
            cooldown_seconds=15 * MINUTE,
            description='File upload failure rate above 10%',
            message_builder=_file_upload_message,
        ),
    ]
