"""
Alert rule data structures and loading utilities.
"""

import yaml
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
import logging
import operator as op

from workflow_alerts.collectors.snapshot import MetricsSnapshot

logger = logging.getLogger(__name__)

# Lowest to highest
SEVERITIES = ['low', 'medium', 'high', 'critical']

OPERATORS = {
    '>': op.gt,
    '<': op.lt,
    '>=': op.ge,
    '<=': op.le,
    '==': op.eq,
    '!=': op.ne,
}

Condition = Callable[[MetricsSnapshot], bool]
MessageBuilder = Callable[[MetricsSnapshot], str]
MetadataBuilder = Callable[[MetricsSnapshot], Dict[str, Any]]


def severity_rank(severity: str) -> int:
    """Position of a severity in the low < medium < high < critical ordering"""
    return SEVERITIES.index(severity)


@dataclass
class AlertRule:
    """Alert rule definition

    Only ``enabled`` is expected to change after the rule is registered.
    """
    id: str
    name: str
    condition: Condition
    severity: str  # low, medium, high, critical
    cooldown_seconds: float
    enabled: bool = True
    description: str = ""
    message_builder: Optional[MessageBuilder] = None
    metadata_builder: Optional[MetadataBuilder] = None

    def __post_init__(self):
        """Validate rule configuration"""
        if not self.id:
            raise ValueError("Rule id must not be empty")

        if not callable(self.condition):
            raise ValueError(f"Condition of rule {self.id} must be callable")

        if self.severity not in SEVERITIES:
            raise ValueError(f"Invalid severity: {self.severity}. Must be one of {SEVERITIES}")

        if self.cooldown_seconds < 0:
            raise ValueError(f"cooldown_seconds must be >= 0, got {self.cooldown_seconds}")

    def render_message(self, snapshot: MetricsSnapshot) -> str:
        """
        Build the alert message: the description followed by current values.

        Args:
            snapshot: Metrics snapshot the rule fired on

        Returns:
            Message text
        """
        message = self.description
        if self.message_builder:
            message += self.message_builder(snapshot)
        return message

    def build_metadata(self, snapshot: MetricsSnapshot) -> Dict[str, Any]:
        """Collect the metrics relevant to this rule"""
        metrics = self.metadata_builder(snapshot) if self.metadata_builder else {}
        return {'metrics': metrics}


def threshold_condition(metric: str, operator: str, threshold: float) -> Condition:
    """
    Build a condition comparing one snapshot value with a threshold.

    Args:
        metric: Dotted snapshot path, e.g. ``http.error_rate``
        operator: One of >, <, >=, <=, ==, !=
        threshold: Value to compare against

    Returns:
        Condition callable
    """
    if operator not in OPERATORS:
        raise ValueError(f"Invalid operator: {operator}. Must be one of {list(OPERATORS)}")

    compare = OPERATORS[operator]

    def condition(snapshot: MetricsSnapshot) -> bool:
        return compare(snapshot.get_value(metric), threshold)

    return condition


def threshold_rule(rule_id: str, name: str, metric: str, operator: str,
                   threshold: float, severity: str, cooldown_seconds: float,
                   enabled: bool = True, description: str = "") -> AlertRule:
    """Create a rule that fires when ``metric <operator> threshold``"""
    return AlertRule(
        id=rule_id,
        name=name,
        condition=threshold_condition(metric, operator, threshold),
        severity=severity,
        cooldown_seconds=cooldown_seconds,
        enabled=enabled,
        description=description or f"{metric} {operator} {threshold}",
        message_builder=lambda s: f"\n{metric}: {s.get_value(metric):.2f}",
        metadata_builder=lambda s: {metric: s.get_value(metric)},
    )


def load_alert_rules(rules_file: str) -> List[AlertRule]:
    """
    Load threshold alert rules from YAML file.

    Args:
        rules_file: Path to YAML configuration file

    Returns:
        List of AlertRule objects

    Raises:
        FileNotFoundError: If rules file doesn't exist
        ValueError: If rules file has invalid format
    """
    try:
        with open(rules_file, 'r') as f:
            config = yaml.safe_load(f)

        if not config or 'alert_rules' not in config:
            logger.warning(f"No alert_rules found in {rules_file}")
            return []

        rules = []
        for rule_config in config['alert_rules']:
            try:
                condition = rule_config.get('condition', {})

                rule = threshold_rule(
                    rule_id=rule_config['id'],
                    name=rule_config.get('name', rule_config['id']),
                    metric=rule_config['metric'],
                    operator=condition.get('operator', '>'),
                    threshold=float(condition.get('threshold', 0)),
                    severity=rule_config.get('severity', 'medium'),
                    cooldown_seconds=float(rule_config.get('cooldown_minutes', 5)) * 60,
                    enabled=rule_config.get('enabled', True),
                    description=rule_config.get('description', ''),
                )
                rules.append(rule)
                logger.debug(f"Loaded alert rule: {rule.id}")

            except (KeyError, ValueError, TypeError) as e:
                logger.error(f"Failed to load rule {rule_config.get('id', 'unknown')}: {e}")
                continue

        logger.info(f"Loaded {len(rules)} alert rules from {rules_file}")
        return rules

    except FileNotFoundError:
        logger.error(f"Alert rules file not found: {rules_file}")
        raise
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML file {rules_file}: {e}")
        raise ValueError(f"Invalid YAML format: {e}")
