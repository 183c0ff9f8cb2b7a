"""Performance monitoring utilities for GemShield."""

import functools
import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, TypeVar

from rich.console import Console
from rich.table import Table

F = TypeVar('F', bound=Callable[..., Any])

BENCHMARK_ENV = "GEM_SHIELD_VERBOSE_BENCHMARK"


@dataclass
class PerformanceMetrics:
    """Timing of one measured operation."""

    function_name: str
    execution_time: float
    items: int = 0


class PerformanceMonitor:
    """Collects timings of named operations."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.metrics: List[PerformanceMetrics] = []

    @contextmanager
    def measure(self, name: str) -> Iterator[PerformanceMetrics]:
        """Context manager for timing an operation.

        The yielded metric may be updated with an item count by the caller.

        Args:
            name: Name of the operation being measured
        """
        metric = PerformanceMetrics(function_name=name, execution_time=0.0)
        start_time = time.perf_counter()
        try:
            yield metric
        finally:
            metric.execution_time = time.perf_counter() - start_time
            if self.enabled:
                self.metrics.append(metric)

    def get_summary(self) -> Dict[str, Any]:
        """Get performance summary.

        Returns:
            Dictionary with performance summary
        """
        if not self.metrics:
            return {}

        total_time = sum(m.execution_time for m in self.metrics)
        return {
            "total_executions": len(self.metrics),
            "total_time": total_time,
            "average_time": total_time / len(self.metrics),
            "metrics": list(self.metrics),
        }

    def print_summary(self, console: Console) -> None:
        """Print a table of recorded timings."""
        summary = self.get_summary()
        if not summary:
            return

        table = Table(title="Performance Summary")
        table.add_column("Operation", style="cyan")
        table.add_column("Items", style="blue", justify="right")
        table.add_column("Time", style="green", justify="right")

        for metric in summary["metrics"]:
            table.add_row(metric.function_name, str(metric.items), f"{metric.execution_time:.4f}s")
        table.add_row("total", "", f"{summary['total_time']:.4f}s", style="bold")

        console.print(table)

    def clear(self) -> None:
        self.metrics.clear()


def benchmark(func: F) -> F:
    """Log the wall time of ``func`` when GEM_SHIELD_VERBOSE_BENCHMARK is set."""
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        end_time = time.perf_counter()

        if os.environ.get(BENCHMARK_ENV):
            logger = logging.getLogger("gem_shield.performance")
            logger.info(f"{func.__name__} took {end_time - start_time:.4f} seconds")
        return result
    return wrapper
