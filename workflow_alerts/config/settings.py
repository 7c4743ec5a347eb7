"""Configuration management"""

import json
import os
import warnings
import yaml
from pathlib import Path
from typing import Dict, Any


def get_default_config() -> Dict[str, Any]:
    """Get default configuration"""
    return {
        'agent': {
            'log_level': 'INFO',
            'log_file': None,
            'log_format': 'text',
        },
        'prometheus': {
            'enabled': True,
            'port': 9100,
            'host': '0.0.0.0',
        },
        'alerting': {
            'enabled': True,
            'evaluation_interval': 60,
            'cleanup_interval': 3600,
            'alert_rules_file': None,
            'channels': {
                'slack': {
                    'enabled': False,
                    'webhook_url': '',
                    'channel': '#alerts',
                    'timeout': 10,
                },
                'discord': {
                    'enabled': False,
                    'webhook_url': '',
                    'timeout': 10,
                },
                'email': {
                    'enabled': False,
                    'to': '',
                    'from_address': 'alerts@yourdomain.com',
                },
                'webhook': {
                    'enabled': False,
                    'url': '',
                    'method': 'POST',
                    'headers': {'Content-Type': 'application/json'},
                    'timeout': 10,
                },
            },
            'storage': {
                'type': 'memory',
                'retention_days': 7,
            },
        },
    }


def load_config(config_path: str = None) -> Dict[str, Any]:
    """
    Load configuration from file and environment variables

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Configuration dictionary
    """
    # Start with defaults
    config = get_default_config()

    # Load from YAML file if provided
    if config_path and Path(config_path).exists():
        try:
            with open(config_path, 'r') as f:
                yaml_config = yaml.safe_load(f)
                if yaml_config:
                    config = merge_configs(config, yaml_config)
        except (OSError, yaml.YAMLError) as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")

    # Override with environment variables
    config = override_from_env(config)

    validate_config(config)

    return config


def merge_configs(base: Dict, override: Dict) -> Dict:
    """Recursively merge two configuration dictionaries"""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def override_from_env(config: Dict) -> Dict:
    """Override configuration from environment variables

    Setting a channel's URL or recipient variable enables that channel.
    """

    # Agent settings
    if 'LOG_LEVEL' in os.environ:
        config['agent']['log_level'] = os.environ['LOG_LEVEL'].upper()
    if 'LOG_FILE' in os.environ:
        config['agent']['log_file'] = os.environ['LOG_FILE']
    if 'LOG_FORMAT' in os.environ:
        config['agent']['log_format'] = os.environ['LOG_FORMAT'].lower()

    # Prometheus settings
    if 'PROMETHEUS_ENABLED' in os.environ:
        config['prometheus']['enabled'] = os.environ['PROMETHEUS_ENABLED'].lower() == 'true'
    if 'PROMETHEUS_PORT' in os.environ:
        config['prometheus']['port'] = int(os.environ['PROMETHEUS_PORT'])
    if 'PROMETHEUS_HOST' in os.environ:
        config['prometheus']['host'] = os.environ['PROMETHEUS_HOST']

    # Alerting settings
    alerting = config['alerting']
    if 'ALERT_EVALUATION_INTERVAL' in os.environ:
        alerting['evaluation_interval'] = float(os.environ['ALERT_EVALUATION_INTERVAL'])
    if 'ALERT_CLEANUP_INTERVAL' in os.environ:
        alerting['cleanup_interval'] = float(os.environ['ALERT_CLEANUP_INTERVAL'])
    if 'ALERT_RETENTION_DAYS' in os.environ:
        alerting['storage']['retention_days'] = float(os.environ['ALERT_RETENTION_DAYS'])
    if 'ALERT_RULES_FILE' in os.environ:
        alerting['alert_rules_file'] = os.environ['ALERT_RULES_FILE']

    # Channels
    channels = alerting['channels']

    if os.environ.get('SLACK_WEBHOOK_URL'):
        channels['slack']['enabled'] = True
        channels['slack']['webhook_url'] = os.environ['SLACK_WEBHOOK_URL']
        if os.environ.get('SLACK_CHANNEL'):
            channels['slack']['channel'] = os.environ['SLACK_CHANNEL']

    if os.environ.get('DISCORD_WEBHOOK_URL'):
        channels['discord']['enabled'] = True
        channels['discord']['webhook_url'] = os.environ['DISCORD_WEBHOOK_URL']

    if os.environ.get('ALERT_EMAIL'):
        channels['email']['enabled'] = True
        channels['email']['to'] = os.environ['ALERT_EMAIL']
        if os.environ.get('SMTP_FROM'):
            channels['email']['from_address'] = os.environ['SMTP_FROM']

    if os.environ.get('ALERT_WEBHOOK_URL'):
        channels['webhook']['enabled'] = True
        channels['webhook']['url'] = os.environ['ALERT_WEBHOOK_URL']
        if os.environ.get('ALERT_WEBHOOK_METHOD'):
            channels['webhook']['method'] = os.environ['ALERT_WEBHOOK_METHOD'].upper()
        if os.environ.get('ALERT_WEBHOOK_HEADERS'):
            try:
                headers = json.loads(os.environ['ALERT_WEBHOOK_HEADERS'])
            except json.JSONDecodeError as e:
                raise ValueError(f"ALERT_WEBHOOK_HEADERS must be a JSON object: {e}")
            if not isinstance(headers, dict):
                raise ValueError("ALERT_WEBHOOK_HEADERS must be a JSON object")
            channels['webhook']['headers'] = headers

    return config


def validate_config(config: Dict):
    """
    Validate configuration values

    Raises:
        ValueError: If configuration is invalid
    """
    # Validate Prometheus port
    port = config['prometheus']['port']
    if not (1 <= port <= 65535):
        raise ValueError(f"Invalid Prometheus port: {port}. Must be between 1 and 65535")

    # Validate log level
    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    log_level = config['agent']['log_level'].upper()
    if log_level not in valid_log_levels:
        raise ValueError(f"Invalid log level: {log_level}. Must be one of {valid_log_levels}")

    valid_log_formats = ['text', 'json']
    if config['agent']['log_format'] not in valid_log_formats:
        raise ValueError(f"Invalid log format: {config['agent']['log_format']}. Must be one of {valid_log_formats}")

    if not config.get('alerting', {}).get('enabled', False):
        return

    alerting = config['alerting']

    for key in ('evaluation_interval', 'cleanup_interval'):
        interval = alerting.get(key, 0)
        if interval <= 0:
            raise ValueError(f"Invalid {key}: {interval}. Must be > 0")

    channels = alerting['channels']
    if not any(ch.get('enabled', False) for ch in channels.values()):
        warnings.warn("Alerting enabled but no channels configured")

    if channels['slack'].get('enabled') and not channels['slack'].get('webhook_url'):
        raise ValueError("Slack channel enabled but webhook_url not set")

    if channels['discord'].get('enabled') and not channels['discord'].get('webhook_url'):
        raise ValueError("Discord channel enabled but webhook_url not set")

    if channels['email'].get('enabled') and not channels['email'].get('to'):
        raise ValueError("Email channel enabled but to not set")

    if channels['webhook'].get('enabled'):
        if not channels['webhook'].get('url'):
            raise ValueError("Webhook channel enabled but url not set")
        method = (channels['webhook'].get('method') or 'POST').upper()
        if method not in ('POST', 'PUT', 'PATCH'):
            raise ValueError(f"Unsupported webhook method: {method}")

    storage_type = alerting['storage'].get('type', 'memory')
    if storage_type != 'memory':
        raise ValueError(f"Unsupported storage type: {storage_type}. Only 'memory' is currently supported")

    retention_days = alerting['storage'].get('retention_days', 7)
    if retention_days <= 0:
        raise ValueError(f"Invalid retention_days: {retention_days}. Must be > 0")
