"""Tests for configuration loading"""

import pytest

from workflow_alerts.config.settings import (
    get_default_config,
    load_config,
    merge_configs,
    override_from_env,
    validate_config,
)

CHANNEL_ENV_VARS = [
    'SLACK_WEBHOOK_URL', 'SLACK_CHANNEL', 'DISCORD_WEBHOOK_URL', 'ALERT_EMAIL', 'SMTP_FROM',
    'ALERT_WEBHOOK_URL', 'ALERT_WEBHOOK_METHOD', 'ALERT_WEBHOOK_HEADERS',
    'LOG_LEVEL', 'LOG_FILE', 'LOG_FORMAT', 'PROMETHEUS_ENABLED', 'PROMETHEUS_PORT', 'PROMETHEUS_HOST',
    'ALERT_EVALUATION_INTERVAL', 'ALERT_CLEANUP_INTERVAL', 'ALERT_RETENTION_DAYS', 'ALERT_RULES_FILE',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in CHANNEL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestEnvironmentOverrides:
    """Test environment driven channel configuration"""

    def test_no_env_leaves_channels_disabled(self):
        config = override_from_env(get_default_config())

        assert not any(ch['enabled'] for ch in config['alerting']['channels'].values())

    def test_channel_env_enables_channels(self, monkeypatch):
        monkeypatch.setenv('SLACK_WEBHOOK_URL', 'https://hooks.slack.test/x')
        monkeypatch.setenv('SLACK_CHANNEL', '#ops')
        monkeypatch.setenv('DISCORD_WEBHOOK_URL', 'https://discord.test/x')
        monkeypatch.setenv('ALERT_EMAIL', 'ops@example.com')

        channels = override_from_env(get_default_config())['alerting']['channels']

        assert channels['slack']['enabled'] is True
        assert channels['slack']['channel'] == '#ops'
        assert channels['discord']['webhook_url'] == 'https://discord.test/x'
        assert channels['email']['to'] == 'ops@example.com'
        assert channels['email']['from_address'] == 'alerts@yourdomain.com'
        assert channels['webhook']['enabled'] is False

    def test_webhook_env(self, monkeypatch):
        monkeypatch.setenv('ALERT_WEBHOOK_URL', 'https://example.test/hook')
        monkeypatch.setenv('ALERT_WEBHOOK_METHOD', 'put')
        monkeypatch.setenv('ALERT_WEBHOOK_HEADERS', '{"Authorization": "Bearer token"}')

        webhook = override_from_env(get_default_config())['alerting']['channels']['webhook']

        assert webhook['enabled'] is True
        assert webhook['method'] == 'PUT'
        assert webhook['headers'] == {'Authorization': 'Bearer token'}

    @pytest.mark.parametrize("headers", ['not json', '["a", "b"]'])
    def test_webhook_headers_must_be_object(self, monkeypatch, headers):
        monkeypatch.setenv('ALERT_WEBHOOK_URL', 'https://example.test/hook')
        monkeypatch.setenv('ALERT_WEBHOOK_HEADERS', headers)

        with pytest.raises(ValueError, match="ALERT_WEBHOOK_HEADERS"):
            override_from_env(get_default_config())

    def test_alerting_intervals(self, monkeypatch):
        monkeypatch.setenv('ALERT_EVALUATION_INTERVAL', '15')
        monkeypatch.setenv('ALERT_RETENTION_DAYS', '3')

        alerting = override_from_env(get_default_config())['alerting']

        assert alerting['evaluation_interval'] == 15.0
        assert alerting['storage']['retention_days'] == 3.0


class TestValidation:
    """Test configuration validation"""

    def test_defaults_are_valid(self):
        with pytest.warns(UserWarning, match="no channels"):
            validate_config(get_default_config())

    def test_invalid_port(self):
        config = get_default_config()
        config['prometheus']['port'] = 70000

        with pytest.raises(ValueError, match="Invalid Prometheus port"):
            validate_config(config)

    def test_invalid_log_format(self):
        config = get_default_config()
        config['agent']['log_format'] = 'xml'

        with pytest.raises(ValueError, match="Invalid log format"):
            validate_config(config)

    def test_enabled_channel_needs_url(self):
        config = get_default_config()
        config['alerting']['channels']['discord']['enabled'] = True

        with pytest.raises(ValueError, match="Discord channel enabled"):
            validate_config(config)

    def test_unsupported_storage(self):
        config = get_default_config()
        config['alerting']['channels']['email'].update({'enabled': True, 'to': 'ops@example.com'})
        config['alerting']['storage']['type'] = 'sqlite'

        with pytest.raises(ValueError, match="Unsupported storage type"):
            validate_config(config)

    def test_non_positive_interval(self):
        config = get_default_config()
        config['alerting']['evaluation_interval'] = 0

        with pytest.raises(ValueError, match="evaluation_interval"):
            validate_config(config)


class TestLoadConfig:
    """Test loading from YAML"""

    def test_merge_configs(self):
        merged = merge_configs({'a': {'b': 1, 'c': 2}, 'd': 3}, {'a': {'b': 10}})
        assert merged == {'a': {'b': 10, 'c': 2}, 'd': 3}

    def test_yaml_then_env(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "agent:\n"
            "  log_level: debug\n"
            "alerting:\n"
            "  evaluation_interval: 30\n"
            "  channels:\n"
            "    webhook:\n"
            "      enabled: true\n"
            "      url: https://example.test/from-file\n"
        )
        monkeypatch.setenv('ALERT_WEBHOOK_URL', 'https://example.test/from-env')

        config = load_config(str(config_file))

        assert config['agent']['log_level'] == 'debug'
        assert config['alerting']['evaluation_interval'] == 30
        assert config['alerting']['channels']['webhook']['url'] == 'https://example.test/from-env'
        assert config['alerting']['channels']['slack']['channel'] == '#alerts'

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("agent: [unclosed\n")

        with pytest.raises(ValueError, match="Failed to load config"):
            load_config(str(config_file))
