"""Telemetry schema identifiers and run metadata for benchmark artefacts."""

from .runs import generate_run_id, utc_timestamp
from .schemas import (
    RANGE_BENCHMARK_FIELDNAMES,
    RANGE_BENCHMARK_SCHEMA_ID,
)

__all__ = [
    "RANGE_BENCHMARK_FIELDNAMES",
    "RANGE_BENCHMARK_SCHEMA_ID",
    "generate_run_id",
    "utc_timestamp",
]
