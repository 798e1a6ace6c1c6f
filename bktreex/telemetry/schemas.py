from __future__ import annotations

from typing import Tuple

RANGE_BENCHMARK_SCHEMA_ID = "bktreex.range_benchmark.v1"
RANGE_BENCHMARK_FIELDNAMES: Tuple[str, ...] = (
    "schema_id",
    "run_id",
    "timestamp",
    "metric",
    "words",
    "queries",
    "radius",
    "workers",
    "tree_depth",
    "build_seconds",
    "sequential_seconds",
    "concurrent_seconds",
    "mean_matches",
    "equivalent",
    "speedup",
)


__all__ = [
    "RANGE_BENCHMARK_FIELDNAMES",
    "RANGE_BENCHMARK_SCHEMA_ID",
]
