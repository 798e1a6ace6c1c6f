from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

from bktreex import available_metrics
from bktreex import config as bx_config
from bktreex.telemetry import (
    RANGE_BENCHMARK_FIELDNAMES,
    RANGE_BENCHMARK_SCHEMA_ID,
    generate_run_id,
    utc_timestamp,
)

from .benchmark import RangeBenchmarkResult, benchmark_range_search


@dataclass
class BenchCLIOptions:
    words: int = 5_000
    queries: int = 200
    radius: int = 1
    edits: int = 1
    workers: int | None = None
    seed: int = 0
    metric: str = "levenshtein"
    run_id: str | None = None
    output: str | None = None


app = typer.Typer(
    add_completion=False,
    pretty_exceptions_enable=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Compare sequential and concurrent BK-tree range searches.",
)

_SHAPE_PANEL = "Benchmark shape"
_RUNTIME_PANEL = "Runtime controls"
_TELEMETRY_PANEL = "Telemetry"


@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    words: Annotated[
        int,
        typer.Option(
            "--words",
            min=1,
            help="Number of random words inserted before querying.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 5_000,
    queries: Annotated[
        int,
        typer.Option(
            "--queries",
            min=1,
            help="Number of queries per search variant.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 200,
    radius: Annotated[
        int,
        typer.Option(
            "--radius",
            min=0,
            help="Search radius.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 1,
    edits: Annotated[
        int,
        typer.Option(
            "--edits",
            min=0,
            help="Random substitutions applied to corpus words to form queries.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 1,
    seed: Annotated[
        int,
        typer.Option(
            "--seed",
            help="Random seed for word/query generation.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 0,
    workers: Annotated[
        Optional[int],
        typer.Option(
            "--workers",
            min=1,
            help="Concurrent search pool size (defaults to BKTREEX_SEARCH_WORKERS or CPU count).",
            rich_help_panel=_RUNTIME_PANEL,
        ),
    ] = None,
    metric: Annotated[
        str,
        typer.Option(
            "--metric",
            case_sensitive=False,
            help="Registered string metric to index with.",
            rich_help_panel=_RUNTIME_PANEL,
        ),
    ] = "levenshtein",
    run_id: Annotated[
        Optional[str],
        typer.Option(
            "--run-id",
            help="Optional run identifier recorded in the summary.",
            rich_help_panel=_TELEMETRY_PANEL,
        ),
    ] = None,
    output: Annotated[
        Optional[str],
        typer.Option(
            "--output",
            help="Append the JSON summary to this JSONL file as well as printing it.",
            rich_help_panel=_TELEMETRY_PANEL,
        ),
    ] = None,
) -> None:
    metric = metric.lower()
    if metric not in available_metrics() or metric == "bit_hamming":
        raise typer.BadParameter(
            f"Unsupported metric '{metric}' for word benchmarks.", param_hint="--metric"
        )
    options = BenchCLIOptions(
        words=words,
        queries=queries,
        radius=radius,
        edits=edits,
        workers=workers,
        seed=seed,
        metric=metric,
        run_id=run_id,
        output=output,
    )
    ctx.obj = options
    if ctx.invoked_subcommand is None:
        run_bench(options)


def _summary(options: BenchCLIOptions, result: RangeBenchmarkResult) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "schema_id": RANGE_BENCHMARK_SCHEMA_ID,
        "run_id": options.run_id or generate_run_id(),
        "timestamp": utc_timestamp(),
        "metric": options.metric,
    }
    payload.update(asdict(result))
    payload["speedup"] = result.speedup
    missing = [field for field in RANGE_BENCHMARK_FIELDNAMES if field not in payload]
    if missing:
        raise RuntimeError(f"Benchmark summary missing fields: {missing}")
    return payload


def run_bench(options: BenchCLIOptions) -> Dict[str, Any]:
    bx_config.runtime_config()
    result = benchmark_range_search(
        words=options.words,
        queries=options.queries,
        radius=options.radius,
        workers=options.workers,
        seed=options.seed,
        metric=options.metric,
        edits=options.edits,
    )
    payload = _summary(options, result)
    line = json.dumps(payload, sort_keys=True)
    typer.echo(line)
    if options.output:
        target = Path(options.output).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
    if not result.equivalent:
        typer.echo("sequential and concurrent results differ", err=True)
        raise typer.Exit(code=1)
    return payload


def main() -> None:
    app()


__all__ = ["BenchCLIOptions", "app", "main", "run_bench"]
