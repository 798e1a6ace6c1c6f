from __future__ import annotations

from .app import BenchCLIOptions, app, main, run_bench
from .benchmark import RangeBenchmarkResult, benchmark_range_search

__all__ = [
    "BenchCLIOptions",
    "RangeBenchmarkResult",
    "app",
    "benchmark_range_search",
    "main",
    "run_bench",
]
