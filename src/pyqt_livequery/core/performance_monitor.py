"""Lookup latency monitoring for pyqt-livequery.

Provides a context manager for timing synchronous work and an accumulator
for latencies measured across the dispatch → settle boundary.
"""

import time
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, List

PERFORMANCE_LOGGER_NAME = "pyqt_livequery.performance"

perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)


@contextmanager
def timer(operation_name: str, threshold_ms: float = 0.0, **kwargs):
    """Context manager for timing operations.

    Args:
        operation_name: Name of the operation being timed
        threshold_ms: Only log if operation takes longer than this (in milliseconds)
        **kwargs: Additional context to include in log message

    Example:
        with timer("Filter catalog", threshold_ms=5.0, query=query):
            matches = matcher(records, query)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000

        if elapsed_ms >= threshold_ms:
            msg = f"{operation_name}: {elapsed_ms:.2f}ms"
            if kwargs:
                args_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
                msg += f" ({args_str})"
            perf_logger.debug(msg)


@dataclass(frozen=True)
class LatencyStats:
    count: int
    total_ms: float
    avg_ms: float
    min_ms: float
    max_ms: float


class PerformanceMonitor:
    """Accumulates timing statistics for repeated operations.

    Example:
        monitor = get_monitor("search lookup")
        started = monitor.start()
        ...  # later, when the lookup settles
        monitor.stop(started)

        monitor.report()  # Logs summary statistics
    """

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.timings: List[float] = []

    @staticmethod
    def start() -> float:
        return time.perf_counter()

    def stop(self, started: float) -> float:
        """Record the time elapsed since started and return it in ms."""
        elapsed_ms = (time.perf_counter() - started) * 1000
        self.record(elapsed_ms)
        return elapsed_ms

    def record(self, elapsed_ms: float) -> None:
        self.timings.append(elapsed_ms)
        perf_logger.debug(f"{self.operation_name}: {elapsed_ms:.2f}ms")

    @contextmanager
    def measure(self):
        """Measure a single synchronous operation."""
        started = self.start()
        try:
            yield
        finally:
            self.stop(started)

    def stats(self) -> LatencyStats:
        if not self.timings:
            return LatencyStats(0, 0.0, 0.0, 0.0, 0.0)
        total_ms = sum(self.timings)
        return LatencyStats(
            count=len(self.timings),
            total_ms=total_ms,
            avg_ms=total_ms / len(self.timings),
            min_ms=min(self.timings),
            max_ms=max(self.timings),
        )

    def report(self):
        """Log summary statistics."""
        if not self.timings:
            perf_logger.debug(f"{self.operation_name}: No measurements")
            return

        stats = self.stats()
        perf_logger.debug(
            f"{self.operation_name} - "
            f"Count: {stats.count}, "
            f"Total: {stats.total_ms:.2f}ms, "
            f"Avg: {stats.avg_ms:.2f}ms, "
            f"Min: {stats.min_ms:.2f}ms, "
            f"Max: {stats.max_ms:.2f}ms"
        )

    def reset(self):
        """Clear all timings."""
        self.timings.clear()


# Global monitors, one per coordinator name
_monitors: Dict[str, PerformanceMonitor] = {}


def get_monitor(operation_name: str) -> PerformanceMonitor:
    """Get or create a global monitor for an operation."""
    if operation_name not in _monitors:
        _monitors[operation_name] = PerformanceMonitor(operation_name)
    return _monitors[operation_name]

