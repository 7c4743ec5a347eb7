"""Application metrics collector"""

import os
import platform
import threading
import time
from collections import Counter, defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Deque, Dict, List, Optional

import psutil

from workflow_alerts.collectors.snapshot import (
    BusinessMetricStat,
    BusinessMetricsStats,
    HttpRequestStats,
    MemoryStats,
    MetricsSnapshot,
    SystemResourceStats,
    UserBehaviorStats,
)
from workflow_alerts.utils.helpers import safe_divide
from workflow_alerts.utils.logger import get_logger

MAX_DURATIONS_PER_ROUTE = 1000
MAX_USER_BEHAVIORS = 10000
MAX_BUSINESS_METRICS = 5000


@dataclass
class UserBehavior:
    """Single recorded user action"""
    user_id: str
    action: str
    timestamp: datetime
    ip: str = ''
    user_agent: Optional[str] = None
    session_id: Optional[str] = None


@dataclass
class BusinessMetric:
    """Single recorded business event"""
    name: str
    value: float
    tags: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


class MetricsCollector:
    """Collects request, error, user and business metrics in memory"""

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)
        self._lock = threading.Lock()
        self._process = psutil.Process(os.getpid())

        self._http_requests: Counter = Counter()
        self._http_durations: Dict[str, Deque[float]] = defaultdict(
            lambda: deque(maxlen=MAX_DURATIONS_PER_ROUTE)
        )
        self._errors: Counter = Counter()
        self._user_behaviors: Deque[UserBehavior] = deque(maxlen=MAX_USER_BEHAVIORS)
        self._business_metrics: Deque[BusinessMetric] = deque(maxlen=MAX_BUSINESS_METRICS)
        self._system_metrics: Dict[str, float] = {}

    def record_http_request(self, method: str, route: str, status_code: int,
                            duration_ms: float) -> None:
        """
        Record a handled HTTP request.

        Args:
            method: HTTP method
            route: Route pattern that served the request
            status_code: Response status code
            duration_ms: Handling time in milliseconds
        """
        with self._lock:
            self._http_requests[(method.upper(), route, int(status_code))] += 1
            self._http_durations[f"{method.upper()}:{route}"].append(float(duration_ms))

    def record_error(self, error_type: str) -> None:
        """Count one occurrence of an application error type"""
        with self._lock:
            self._errors[error_type] += 1

    def record_user_behavior(self, user_id: str, action: str,
                             timestamp: Optional[datetime] = None, ip: str = '',
                             user_agent: Optional[str] = None,
                             session_id: Optional[str] = None) -> None:
        """Record a user action"""
        behavior = UserBehavior(
            user_id=user_id,
            action=action,
            timestamp=timestamp or datetime.now(),
            ip=ip,
            user_agent=user_agent,
            session_id=session_id,
        )
        with self._lock:
            self._user_behaviors.append(behavior)

    def record_business_metric(self, name: str, value: float = 1,
                               tags: Optional[Dict[str, Any]] = None,
                               timestamp: Optional[datetime] = None) -> None:
        """
        Record a named business event such as ``file_upload``.

        Args:
            name: Metric name
            value: Value to add for this occurrence
            tags: Free-form context
            timestamp: Event time, defaults to now
        """
        metric = BusinessMetric(
            name=name,
            value=float(value),
            tags=tags or {},
            timestamp=timestamp or datetime.now(),
        )
        with self._lock:
            self._business_metrics.append(metric)

    def record_system_metric(self, name: str, value: float) -> None:
        """Store the latest value of a system gauge"""
        with self._lock:
            self._system_metrics[name] = float(value)

    def get_http_request_stats(self) -> HttpRequestStats:
        """Aggregate request counts, error rate and average latency"""
        with self._lock:
            requests = dict(self._http_requests)
            durations = [d for series in self._http_durations.values() for d in series]

        stats = HttpRequestStats()
        error_count = 0

        for (method, _route, status), count in requests.items():
            stats.total_requests += count
            stats.requests_by_method[method] = stats.requests_by_method.get(method, 0) + count
            status_key = str(status)
            stats.requests_by_status[status_key] = stats.requests_by_status.get(status_key, 0) + count
            if status >= 400:
                error_count += count

        stats.average_response_time_ms = safe_divide(sum(durations), len(durations))
        stats.error_rate = safe_divide(error_count, stats.total_requests) * 100
        return stats

    def get_user_behavior_stats(self, now: Optional[datetime] = None) -> UserBehaviorStats:
        """Summarise user activity relative to ``now``"""
        now = now or datetime.now()
        one_hour_ago = now - timedelta(hours=1)
        one_day_ago = now - timedelta(days=1)

        with self._lock:
            behaviors = list(self._user_behaviors)

        recent = [b for b in behaviors if b.timestamp >= one_hour_ago]
        daily = [b for b in behaviors if b.timestamp >= one_day_ago]

        return UserBehaviorStats(
            total_users=len({b.user_id for b in behaviors}),
            active_users_last_hour=len({b.user_id for b in recent}),
            active_users_last_day=len({b.user_id for b in daily}),
            total_actions=len(behaviors),
            actions_last_hour=len(recent),
            actions_last_day=len(daily),
            top_actions=[
                {'action': action, 'count': count}
                for action, count in Counter(b.action for b in daily).most_common(10)
            ],
            top_users=[
                {'user_id': user_id, 'count': count}
                for user_id, count in Counter(b.user_id for b in daily).most_common(10)
            ],
        )

    def get_business_metrics_stats(self, now: Optional[datetime] = None) -> BusinessMetricsStats:
        """Group business metrics of the last day by name and build weekly trends"""
        now = now or datetime.now()
        one_day_ago = now - timedelta(days=1)
        one_week_ago = now - timedelta(days=7)

        with self._lock:
            metrics = list(self._business_metrics)

        daily = [m for m in metrics if m.timestamp >= one_day_ago]
        weekly = [m for m in metrics if m.timestamp >= one_week_ago]

        by_name: Dict[str, BusinessMetricStat] = {}
        for metric in daily:
            stat = by_name.setdefault(metric.name, BusinessMetricStat())
            stat.count += 1
            stat.total_value += metric.value

        return BusinessMetricsStats(
            total_metrics=len(metrics),
            daily_metrics=len(daily),
            weekly_metrics=len(weekly),
            metrics_by_name=by_name,
            weekly_trends=self._calculate_weekly_trends(weekly),
        )

    def get_system_resource_stats(self) -> SystemResourceStats:
        """Read memory, CPU and uptime figures via psutil"""
        vm = psutil.virtual_memory()
        cpu_times = self._process.cpu_times()

        memory = MemoryStats(
            rss=self._process.memory_info().rss,
            total=vm.total,
            used=vm.used,
            available=vm.available,
            usage_percent=vm.percent,
        )

        return SystemResourceStats(
            memory=memory,
            cpu_user=cpu_times.user,
            cpu_system=cpu_times.system,
            uptime=time.time() - self._process.create_time(),
            python_version=platform.python_version(),
            platform=f"{platform.system().lower()}-{platform.machine()}",
        )

    def get_error_counts(self) -> Dict[str, int]:
        """Get error counts keyed by error type"""
        with self._lock:
            return dict(self._errors)

    def get_http_request_counts(self) -> Dict[tuple, int]:
        """Get raw request counts keyed by (method, route, status)"""
        with self._lock:
            return dict(self._http_requests)

    def get_http_durations(self) -> Dict[str, List[float]]:
        """Get retained durations keyed by ``METHOD:route``"""
        with self._lock:
            return {key: list(series) for key, series in self._http_durations.items()}

    def get_system_metrics(self) -> Dict[str, float]:
        """Get the latest recorded system gauges"""
        with self._lock:
            return dict(self._system_metrics)

    def snapshot(self, now: Optional[datetime] = None) -> MetricsSnapshot:
        """
        Take a typed snapshot of all metric families.

        Args:
            now: Reference time for windowed statistics

        Returns:
            MetricsSnapshot instance
        """
        now = now or datetime.now()
        return MetricsSnapshot(
            taken_at=now,
            http=self.get_http_request_stats(),
            system=self.get_system_resource_stats(),
            users=self.get_user_behavior_stats(now),
            business=self.get_business_metrics_stats(now),
            errors=self.get_error_counts(),
        )

    def reset(self) -> None:
        """Drop every recorded metric"""
        with self._lock:
            self._http_requests.clear()
            self._http_durations.clear()
            self._errors.clear()
            self._user_behaviors.clear()
            self._business_metrics.clear()
            self._system_metrics.clear()
        self.logger.info("Metrics reset")

    def export_metrics(self) -> Dict[str, Any]:
        """Export raw counters and computed statistics as plain data"""
        snapshot = self.snapshot()
        raw = {
            'http_requests': {
                f"{method}:{route}:{status}": count
                for (method, route, status), count in self.get_http_request_counts().items()
            },
            'http_durations': self.get_http_durations(),
            'errors': self.get_error_counts(),
            'system_metrics': self.get_system_metrics(),
        }
        statistics = snapshot.to_dict()
        statistics['timestamp'] = datetime.now().isoformat()
        return {
            'raw_metrics': raw,
            'statistics': statistics,
        }

    @staticmethod
    def _calculate_weekly_trends(metrics: List[BusinessMetric]) -> Dict[str, List[Dict[str, Any]]]:
        daily_totals: Dict[str, Dict[str, float]] = defaultdict(lambda: defaultdict(float))
        for metric in metrics:
            day = metric.timestamp.date().isoformat()
            daily_totals[metric.name][day] += metric.value

        return {
            name: [{'date': day, 'value': value} for day, value in sorted(days.items())]
            for name, days in daily_totals.items()
        }
