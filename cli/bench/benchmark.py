from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from numpy.random import default_rng

from bktreex import BKTree, ConcurrentRangeSearch
from tests.utils.datasets import word_dataset


@dataclass(frozen=True)
class RangeBenchmarkResult:
    words: int
    queries: int
    radius: int
    workers: int
    tree_depth: int
    build_seconds: float
    sequential_seconds: float
    concurrent_seconds: float
    mean_matches: float
    equivalent: bool

    @property
    def speedup(self) -> float:
        if self.concurrent_seconds <= 0:
            return float("inf")
        return self.sequential_seconds / self.concurrent_seconds


def _build_tree(words: Sequence[str], metric: str) -> Tuple[BKTree[str], float]:
    tree: BKTree[str] = BKTree(metric)
    start = time.perf_counter()
    tree.extend(words)
    return tree, time.perf_counter() - start


def benchmark_range_search(
    *,
    words: int,
    queries: int,
    radius: int,
    workers: int | None,
    seed: int,
    metric: str = "levenshtein",
    edits: int = 1,
) -> RangeBenchmarkResult:
    """Time sequential and concurrent range searches over the same tree and queries."""

    corpus, query_words = word_dataset(default_rng(seed), words=words, queries=queries, edits=edits)
    tree, build_seconds = _build_tree(corpus, metric)

    sequential: List[frozenset] = []
    start = time.perf_counter()
    for query in query_words:
        sequential.append(frozenset(tree.range_search(query, radius)))
    sequential_seconds = time.perf_counter() - start

    concurrent: List[frozenset] = []
    with ConcurrentRangeSearch(workers) as searcher:
        start = time.perf_counter()
        for query in query_words:
            result = searcher.search(tree, query, radius).raise_if_incomplete()
            concurrent.append(frozenset(result.items))
        concurrent_seconds = time.perf_counter() - start
        used_workers = searcher.workers

    total_matches = sum(len(found) for found in sequential)
    return RangeBenchmarkResult(
        words=len(tree),
        queries=len(query_words),
        radius=radius,
        workers=used_workers,
        tree_depth=tree.depth(),
        build_seconds=build_seconds,
        sequential_seconds=sequential_seconds,
        concurrent_seconds=concurrent_seconds,
        mean_matches=total_matches / len(query_words) if query_words else 0.0,
        equivalent=sequential == concurrent,
    )


__all__ = ["RangeBenchmarkResult", "benchmark_range_search"]
