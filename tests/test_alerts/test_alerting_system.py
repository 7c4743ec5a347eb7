"""Tests for the AlertingSystem facade"""

import time
from datetime import datetime, timedelta

import pytest

from workflow_alerts.alerts.alert_rule import AlertRule
from workflow_alerts.alerts.alerting_system import AlertingSystem
from workflow_alerts.collectors.snapshot import HttpRequestStats, MetricsSnapshot

NOW = datetime(2024, 3, 4, 12, 0, 0)


def error_rate_rule(rule_id="high_error_rate", severity="high", cooldown_seconds=300):
    return AlertRule(
        id=rule_id,
        name="High error rate",
        condition=lambda s: s.http.error_rate > 5,
        severity=severity,
        cooldown_seconds=cooldown_seconds,
        description="HTTP request error rate above 5%",
    )


@pytest.fixture
def failing_metrics(metrics_source):
    metrics_source.base = MetricsSnapshot(http=HttpRequestStats(total_requests=100, error_rate=12.0))
    return metrics_source


@pytest.fixture
def system(failing_metrics, make_channel):
    config = {'evaluation_interval': 60, 'cleanup_interval': 3600, 'storage': {'retention_days': 7}}
    system = AlertingSystem(config, failing_metrics, channels=[make_channel('slack')], rules=[error_rate_rule()])
    yield system
    system.shutdown()


class TestAlertingSystem:
    """Test the wired alerting system"""

    def test_check_rules_triggers_and_notifies(self, system):
        alerts = system.check_rules(NOW)

        assert len(alerts) == 1
        assert system.notifier.channels[0].sent == alerts
        assert [a.alert_id for a in system.get_active_alerts()] == [alerts[0].alert_id]

    def test_cooldown_between_ticks(self, system):
        assert len(system.check_rules(NOW)) == 1
        assert system.check_rules(NOW + timedelta(minutes=1)) == []
        assert len(system.check_rules(NOW + timedelta(minutes=5))) == 1

    def test_stats(self, system):
        system.add_rule(error_rate_rule("disabled_rule", severity="low"))
        system.set_rule_enabled("disabled_rule", False)
        alert = system.check_rules(NOW)[0]

        stats = system.get_alert_stats()
        assert stats['total_alerts'] == 1
        assert stats['active_alerts'] == 1
        assert stats['severity_counts']['high'] == 1
        assert stats['rules_count'] == 2
        assert stats['enabled_rules_count'] == 1

        assert system.resolve_alert(alert.alert_id, NOW) is True
        stats = system.get_alert_stats()
        assert stats['active_alerts'] == 0
        assert stats['resolved_alerts'] == 1

    def test_cleanup_uses_retention(self, system):
        alert = system.check_rules(NOW)[0]
        system.resolve_alert(alert.alert_id, NOW)

        assert system.cleanup_resolved_alerts(NOW + timedelta(days=6)) == 0
        assert system.cleanup_resolved_alerts(NOW + timedelta(days=8)) == 1
        assert system.get_all_alerts() == []

    def test_remove_rule(self, system):
        assert system.remove_rule("high_error_rate") is True
        assert system.check_rules(NOW) == []
        assert system.remove_rule("high_error_rate") is False

    def test_start_and_stop(self, failing_metrics, make_channel):
        channel = make_channel('webhook')
        system = AlertingSystem(
            {'evaluation_interval': 0.05, 'cleanup_interval': 0.05},
            failing_metrics,
            channels=[channel],
            rules=[error_rate_rule(cooldown_seconds=3600)],
        )

        system.start()
        try:
            assert system.running
            deadline = time.time() + 2
            while not channel.sent and time.time() < deadline:
                time.sleep(0.01)
        finally:
            system.stop()

        assert not system.running
        assert len(channel.sent) == 1
        assert failing_metrics.calls >= 1


class TestRuleLoading:
    """Test default and file-based rule seeding"""

    def test_defaults_loaded_when_no_rules_given(self, metrics_source):
        system = AlertingSystem({}, metrics_source, channels=[])

        assert system.get_alert_stats()['rules_count'] == 6

    def test_rules_file_extends_defaults(self, metrics_source, tmp_path):
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text(
            "alert_rules:\n"
            "  - id: high_error_rate\n"
            "    metric: http.error_rate\n"
            "    condition: {operator: '>', threshold: 1}\n"
            "  - id: workflow_execution_errors\n"
            "    metric: errors.WorkflowExecutionError\n"
            "    condition: {operator: '>=', threshold: 1}\n"
            "    severity: high\n"
        )

        system = AlertingSystem({'alert_rules_file': str(rules_file)}, metrics_source, channels=[])

        assert system.get_alert_stats()['rules_count'] == 7
        rule = system.evaluator.get_rule('high_error_rate')
        assert rule.severity == 'high'
        assert rule.description == 'HTTP request error rate above 5%'

    def test_channels_built_from_config(self, metrics_source):
        config = {
            'channels': {
                'slack': {'enabled': True, 'webhook_url': 'https://hooks.slack.test/x'},
                'email': {'enabled': False, 'to': 'ops@example.com'},
            },
        }

        system = AlertingSystem(config, metrics_source, rules=[])

        assert [c.channel_type for c in system.notifier.channels] == ['slack']
