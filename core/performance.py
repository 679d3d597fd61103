import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Dict, List, Optional

from core.logger import get_logger

logger = get_logger(__name__)


class PerformanceMonitor:
    """Track durations and outcomes of target checks within one poll cycle"""

    def __init__(self):
        self.durations_ms: Dict[str, List[float]] = defaultdict(list)
        self.failure_counts: Dict[str, int] = defaultdict(int)

    @contextmanager
    def measure(self, operation_name: str, context: Optional[Dict] = None):
        """
        Context manager to measure operation duration.

        Usage:
            with monitor.measure("check_target", {"host": "example.com"}):
                ...
        """
        start_time = time.perf_counter()
        failed = False

        try:
            yield
        except Exception:
            failed = True
            self.failure_counts[operation_name] += 1
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.durations_ms[operation_name].append(duration_ms)

            if failed:
                logger.warning(
                    f"{operation_name} failed",
                    duration_ms=duration_ms,
                    context=context or {},
                )
            else:
                logger.debug(
                    f"{operation_name} completed",
                    duration_ms=duration_ms,
                    context=context or {},
                )

    def get_stats(self, operation_name: str) -> Dict:
        durations = self.durations_ms.get(operation_name)
        if not durations:
            return {}

        failures = self.failure_counts[operation_name]
        return {
            "operation": operation_name,
            "count": len(durations),
            "failure_count": failures,
            "success_rate": (len(durations) - failures) / len(durations) * 100,
            "avg_duration_ms": sum(durations) / len(durations),
            "max_duration_ms": max(durations),
        }

    def log_summary(self):
        """Log performance summary for all operations"""
        if not self.durations_ms:
            logger.info("No performance metrics collected yet")
            return

        for op_name in self.durations_ms:
            stats = self.get_stats(op_name)
            logger.info(
                f"{op_name}: "
                f"{stats['count']} runs, "
                f"{stats['success_rate']:.1f}% success, "
                f"avg {stats['avg_duration_ms']:.0f}ms "
                f"(max {stats['max_duration_ms']:.0f}ms)"
            )

    def reset(self):
        self.durations_ms.clear()
        self.failure_counts.clear()


# Global instance
_performance_monitor = None


def get_performance_monitor() -> PerformanceMonitor:
    """Get singleton performance monitor instance"""
    global _performance_monitor
    if _performance_monitor is None:
        _performance_monitor = PerformanceMonitor()
    return _performance_monitor
