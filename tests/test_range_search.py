from __future__ import annotations

from typing import Callable, List

import pytest
from numpy.random import default_rng

from bktreex import BKTree, levenshtein, padded_hamming, range_search
from tests.utils.datasets import word_dataset

CANONICAL = ["cat", "cats", "bat", "hat", "cast"]


class _CountingDistance:
    def __init__(self, distance: Callable[[str, str], int]) -> None:
        self._distance = distance
        self.calls = 0

    def __call__(self, lhs: str, rhs: str) -> int:
        self.calls += 1
        return self._distance(lhs, rhs)


def _bruteforce(words: List[str], query: str, radius: int) -> List[str]:
    return sorted(word for word in words if levenshtein(word, query) <= radius)


def test_canonical_fixture_with_positional_edit_distance():
    # "cast" differs from "cat" in two positions, so only the other three
    # neighbours fall within radius 1.
    tree = BKTree.from_items(CANONICAL, padded_hamming)

    result = tree.range_search("cat", 1)

    assert set(result) == {"cat", "cats", "bat", "hat"}
    assert result == ["cat", "cats", "bat", "hat"]


def test_canonical_fixture_with_levenshtein_includes_single_insertion():
    tree = BKTree.from_items(CANONICAL, levenshtein)

    result = tree.range_search("cat", 1)

    assert result == ["cat", "cats", "bat", "hat", "cast"]


def test_pruning_skips_subtrees_outside_window():
    counting = _CountingDistance(padded_hamming)
    tree = BKTree.from_items(CANONICAL, counting)
    counting.calls = 0

    assert tree.range_search("cat", 0) == ["cat"]
    assert counting.calls == 1

    counting.calls = 0
    tree.range_search("cat", 1)
    # Root, cats, bat and hat are visited; cast (key 2 under the root) is pruned.
    assert counting.calls == 4


def test_empty_tree_returns_empty():
    tree = BKTree(levenshtein)

    assert tree.range_search("anything", 0) == []
    assert tree.range_search("anything", 10) == []


def test_negative_radius_returns_empty():
    tree = BKTree.from_items(CANONICAL, levenshtein)

    assert tree.range_search("cat", -1) == []
    assert tree.range_search("cat", -100, return_distances=True) == []


def test_every_item_finds_itself_at_radius_zero():
    words, _ = word_dataset(default_rng(1), words=250, queries=0)
    tree = BKTree.from_items(words, levenshtein)

    for word in words:
        assert word in tree.range_search(word, 0)


@pytest.mark.parametrize("seed", [2, 3])
def test_results_grow_monotonically_with_radius(seed: int):
    words, queries = word_dataset(default_rng(seed), words=200, queries=10, edits=2)
    tree = BKTree.from_items(words, levenshtein)

    for query in queries:
        previous: set = set()
        for radius in range(0, 5):
            current = set(tree.range_search(query, radius))
            assert previous <= current
            previous = current


@pytest.mark.parametrize("radius", [0, 1, 2, 3])
def test_matches_bruteforce_scan(radius: int):
    words, queries = word_dataset(default_rng(7), words=300, queries=15, edits=1)
    tree = BKTree.from_items(words, levenshtein)

    for query in queries:
        assert sorted(tree.range_search(query, radius)) == _bruteforce(words, query, radius)


def test_return_distances_pairs_items_with_distance():
    tree = BKTree.from_items(CANONICAL, levenshtein)

    pairs = tree.range_search("cast", 1, return_distances=True)

    assert sorted(pairs) == [("cast", 0), ("cat", 1)]
    for item, dist in pairs:
        assert dist == levenshtein(item, "cast")


def test_discovery_order_is_deterministic():
    words, queries = word_dataset(default_rng(13), words=150, queries=5, edits=1)
    tree = BKTree.from_items(words, levenshtein)

    for query in queries:
        assert tree.range_search(query, 2) == tree.range_search(query, 2)


def test_module_level_function_matches_method():
    tree = BKTree.from_items(CANONICAL, levenshtein)

    assert range_search(tree, "hat", 1) == tree.range_search("hat", 1)


def test_distance_errors_propagate():
    def _flaky(lhs: str, rhs: str) -> int:
        if "x" in (lhs, rhs):
            raise ValueError("unsupported item")
        return levenshtein(lhs, rhs)

    tree = BKTree.from_items(CANONICAL, _flaky)

    with pytest.raises(ValueError, match="unsupported item"):
        tree.range_search("x", 1)
