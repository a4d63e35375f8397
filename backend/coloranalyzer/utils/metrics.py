"""
Color Analyzer Metrics Collection
In-process counters and per-stage timings for the analysis pipeline.
"""
import time
from collections import Counter, defaultdict, deque
from typing import Any, Deque, Dict, Optional, Sequence
from threading import Lock

from coloranalyzer.config import config


class MetricsCollector:
    """
    Lock-guarded in-process metrics collector.

    Timings and bucket counts keep only the most recent ``max_samples``
    values per series, so memory stays flat in a long-running service.
    """

    def __init__(self, max_samples: Optional[int] = None):
        self._lock = Lock()
        self.max_samples = max_samples or config.METRICS_MAX_SAMPLES
        self._counters: Dict[str, int] = Counter()
        self._timings: Dict[str, Deque[float]] = defaultdict(self._new_series)
        self._bucket_counts: Deque[int] = self._new_series()
        self._start_time = time.time()

    def _new_series(self) -> Deque:
        return deque(maxlen=self.max_samples)

    def increment_analysis_count(self):
        """Count a started analysis."""
        with self._lock:
            self._counters["analyses_total"] += 1

    def increment_success_count(self):
        with self._lock:
            self._counters["analyses_succeeded_total"] += 1

    def increment_failure_count(self, error_type: str):
        """Count a failed analysis by error class name."""
        with self._lock:
            self._counters[f"analyses_failed_total_{error_type}"] += 1

    def record_timing(self, stage: str, duration_ms: float):
        with self._lock:
            self._timings[f"{stage}_duration_ms"].append(duration_ms)

    def record_bucket_count(self, count: int):
        """Record the distinct bucket count of one histogram."""
        with self._lock:
            self._bucket_counts.append(count)

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Summarize recorded timings per stage."""
        with self._lock:
            return {
                stage: self._describe(timings)
                for stage, timings in self._timings.items()
                if timings
            }

    def get_bucket_count_stats(self) -> Dict[str, float]:
        with self._lock:
            if not self._bucket_counts:
                return {}
            return self._describe(self._bucket_counts)

    def get_uptime_seconds(self) -> float:
        return time.time() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        """Get complete metrics summary."""
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
            "bucket_count_stats": self.get_bucket_count_stats()
        }

    def reset(self):
        """Reset all metrics (for testing)."""
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._bucket_counts.clear()
            self._start_time = time.time()

    @classmethod
    def _describe(cls, values: Sequence[float]) -> Dict[str, float]:
        return {
            "count": len(values),
            "mean": sum(values) / len(values),
            "min": min(values),
            "max": max(values),
            "p50": cls._percentile(values, 50),
            "p95": cls._percentile(values, 95)
        }

    @staticmethod
    def _percentile(data: Sequence[float], percentile: int) -> float:
        """Linear-interpolated percentile."""
        if not data:
            return 0.0

        sorted_data = sorted(data)
        k = (len(sorted_data) - 1) * percentile / 100
        f = int(k)
        c = k - f

        if f + 1 < len(sorted_data):
            return sorted_data[f] + c * (sorted_data[f + 1] - sorted_data[f])
        return sorted_data[f]


# Global metrics instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    global _metrics
    if _metrics is not None:
        _metrics.reset()
