from __future__ import annotations

import numpy as np
import pytest
from numpy.random import default_rng

from bktreex import (
    BKTree,
    HashCode,
    Metric,
    MetricItem,
    MetricRegistry,
    Word,
    available_metrics,
    bit_hamming,
    get_metric,
    hamming,
    levenshtein,
    padded_hamming,
    register_metric,
)
from tests.utils.datasets import random_hashes, random_words


def _reference_levenshtein(lhs: str, rhs: str) -> int:
    previous = list(range(len(rhs) + 1))
    for i, left in enumerate(lhs, start=1):
        current = [i]
        for j, right in enumerate(rhs, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (left != right),
                )
            )
        previous = current
    return previous[-1]


@pytest.mark.parametrize(
    ("lhs", "rhs", "expected"),
    [
        ("", "", 0),
        ("", "abc", 3),
        ("abc", "", 3),
        ("cat", "cat", 0),
        ("cat", "cats", 1),
        ("cat", "cast", 1),
        ("cats", "cast", 2),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("😀a", "a", 1),
    ],
)
def test_levenshtein_known_values(lhs: str, rhs: str, expected: int):
    assert levenshtein(lhs, rhs) == expected
    assert levenshtein(rhs, lhs) == expected


def test_levenshtein_matches_reference_dp():
    rng = default_rng(23)
    words = random_words(rng, 120, min_length=0, max_length=10, alphabet="abcd")
    for lhs, rhs in zip(words[::2], words[1::2]):
        assert levenshtein(lhs, rhs) == _reference_levenshtein(lhs, rhs)


def test_levenshtein_accepts_token_sequences():
    assert levenshtein(["the", "quick", "fox"], ["the", "slow", "fox"]) == 1
    assert levenshtein(np.array([1, 2, 3]), np.array([1, 3])) == 1


def test_levenshtein_returns_python_int():
    assert type(levenshtein("abc", "abd")) is int


def test_hamming_counts_differences():
    assert hamming("karolin", "kathrin") == 3
    assert hamming([1, 0, 1, 1], [1, 1, 1, 0]) == 2
    assert hamming(np.zeros(8, dtype=bool), np.ones(8, dtype=bool)) == 8


def test_hamming_rejects_unequal_lengths():
    with pytest.raises(ValueError, match="equal shapes"):
        hamming("abc", "ab")


def test_padded_hamming_counts_missing_positions():
    assert padded_hamming("cat", "cats") == 1
    assert padded_hamming("cat", "cast") == 2
    assert padded_hamming("cat", "bat") == 1
    assert padded_hamming("", "abc") == 3
    assert padded_hamming("abc", "abc") == 0


def test_padded_hamming_triangle_inequality_on_samples():
    words = random_words(default_rng(29), 40, min_length=0, max_length=6, alphabet="ab")
    for a in words[:15]:
        for b in words[15:30]:
            for c in words[30:]:
                assert padded_hamming(a, c) <= padded_hamming(a, b) + padded_hamming(b, c)


def test_bit_hamming():
    assert bit_hamming(0b1011, 0b0001) == 2
    assert bit_hamming(0, 0) == 0
    assert bit_hamming(2**64 - 1, 0) == 64


def test_hash_code_constructors():
    code = HashCode.from_bits([1, 0, 1])
    assert code.value == 0b101
    assert code.bits == 3

    hexed = HashCode.from_hex("0xff00")
    assert hexed.value == 0xFF00
    assert hexed.bits == 16
    assert hexed.hex() == "ff00"

    with pytest.raises(ValueError):
        HashCode(-1)
    with pytest.raises(ValueError):
        HashCode(256, bits=8)


def test_hash_code_near_duplicate_lookup():
    hashes = random_hashes(default_rng(31), 200)
    tree = BKTree()
    tree.extend(HashCode(value) for value in hashes)

    nearby = HashCode(hashes[42] ^ 0b101)
    matches = tree.range_search(nearby, 2)

    assert HashCode(hashes[42]) in matches
    for match in matches:
        assert bit_hamming(match.value, nearby.value) <= 2


def test_items_satisfy_protocol():
    assert isinstance(Word("cat"), MetricItem)
    assert isinstance(HashCode(1), MetricItem)
    assert not isinstance("cat", MetricItem)


def test_builtin_metrics_registered():
    names = available_metrics()

    for name in ("levenshtein", "hamming", "padded_hamming", "bit_hamming"):
        assert name in names
    assert get_metric("LEVENSHTEIN")("cat", "bat") == 1


def test_metric_registry_registers_and_retrieves():
    registry = MetricRegistry()
    metric = Metric("absolute", lambda a, b: abs(a - b))
    registry.register(metric)

    assert registry.get("Absolute") is metric
    assert registry.names() == ("absolute",)
    with pytest.raises(ValueError):
        registry.register(metric)
    registry.register(Metric("absolute", lambda a, b: 0), overwrite=True)
    assert registry.get("absolute")(1, 5) == 0
    with pytest.raises(KeyError):
        registry.get("missing")


def test_global_registration_is_usable_by_trees():
    register_metric(Metric("test_abs_diff", lambda a, b: abs(a - b)), overwrite=True)

    tree = BKTree("test_abs_diff")
    tree.extend([5, 1, 9, 6])

    assert sorted(tree.range_search(5, 1)) == [5, 6]
