"""
Typed point-in-time view of application metrics consumed by alert rules.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List


@dataclass
class HttpRequestStats:
    """Aggregated HTTP request statistics"""
    total_requests: int = 0
    requests_by_method: Dict[str, int] = field(default_factory=dict)
    requests_by_status: Dict[str, int] = field(default_factory=dict)
    average_response_time_ms: float = 0.0
    error_rate: float = 0.0  # percent of requests with status >= 400


@dataclass
class MemoryStats:
    """Memory usage figures in bytes"""
    rss: int = 0
    total: int = 0
    used: int = 0
    available: int = 0
    usage_percent: float = 0.0


@dataclass
class SystemResourceStats:
    """Process and host resource usage"""
    memory: MemoryStats = field(default_factory=MemoryStats)
    cpu_user: float = 0.0
    cpu_system: float = 0.0
    uptime: float = 0.0
    python_version: str = ''
    platform: str = ''


@dataclass
class UserBehaviorStats:
    """User activity over the last hour and day"""
    total_users: int = 0
    active_users_last_hour: int = 0
    active_users_last_day: int = 0
    total_actions: int = 0
    actions_last_hour: int = 0
    actions_last_day: int = 0
    top_actions: List[Dict[str, Any]] = field(default_factory=list)
    top_users: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class BusinessMetricStat:
    """Occurrences and summed value of one named business metric"""
    count: int = 0
    total_value: float = 0.0


@dataclass
class BusinessMetricsStats:
    """Business counters grouped by name"""
    total_metrics: int = 0
    daily_metrics: int = 0
    weekly_metrics: int = 0
    metrics_by_name: Dict[str, BusinessMetricStat] = field(default_factory=dict)
    weekly_trends: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)


@dataclass
class MetricsSnapshot:
    """Everything an alert rule may look at, taken at a single instant"""
    taken_at: datetime = field(default_factory=datetime.now)
    http: HttpRequestStats = field(default_factory=HttpRequestStats)
    system: SystemResourceStats = field(default_factory=SystemResourceStats)
    users: UserBehaviorStats = field(default_factory=UserBehaviorStats)
    business: BusinessMetricsStats = field(default_factory=BusinessMetricsStats)
    errors: Dict[str, int] = field(default_factory=dict)

    def get_value(self, path: str) -> float:
        """
        Resolve a dotted path to a numeric value.

        Mapping segments are looked up by key, everything else by attribute,
        so both ``http.error_rate`` and ``errors.DatabaseError`` work. Missing
        mapping keys resolve to 0.

        Args:
            path: Dotted path, e.g. ``system.memory.usage_percent``

        Returns:
            Numeric value at the path

        Raises:
            KeyError: If an attribute segment does not exist
            TypeError: If the path does not end on a number
        """
        current: Any = self
        for part in path.split('.'):
            if isinstance(current, dict):
                current = current.get(part, 0)
            elif hasattr(current, part):
                current = getattr(current, part)
            else:
                raise KeyError(f"Unknown metric path: {path}")

        if isinstance(current, bool) or not isinstance(current, (int, float)):
            raise TypeError(f"Metric path {path} is not numeric: {current!r}")
        return float(current)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary"""
        data = asdict(self)
        data['taken_at'] = self.taken_at.isoformat()
        return data
