from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np


def as_codes(value: str | Sequence[Any] | np.ndarray) -> np.ndarray:
    if isinstance(value, str):
        if not value:
            return np.empty(0, dtype=np.uint32)
        return np.frombuffer(value.encode("utf-32-le"), dtype=np.uint32)
    if isinstance(value, np.ndarray):
        return value.ravel()
    return np.asarray(list(value))


def levenshtein(lhs: str | Sequence[Any], rhs: str | Sequence[Any]) -> int:
    """Unit-cost edit distance (insert, delete, substitute).

    Rows of the dynamic programme are computed with NumPy: substitutions and
    deletions come from the previous row directly and the insertion chain is
    resolved with a running minimum over ``row[j] - j``.
    """

    a = as_codes(lhs)
    b = as_codes(rhs)
    if a.shape[0] < b.shape[0]:
        a, b = b, a
    width = b.shape[0]
    if width == 0:
        return int(a.shape[0])
    offsets = np.arange(width + 1, dtype=np.int64)
    previous = offsets.copy()
    current = np.empty(width + 1, dtype=np.int64)
    for i in range(1, a.shape[0] + 1):
        mismatch = (b != a[i - 1]).astype(np.int64)
        current[0] = i
        current[1:] = np.minimum(previous[1:] + 1, previous[:-1] + mismatch)
        current[:] = np.minimum.accumulate(current - offsets) + offsets
        previous, current = current, previous
    return int(previous[width])


@dataclass(frozen=True)
class Word:
    """String item measured by :func:`levenshtein`."""

    text: str

    def distance_to(self, other: "Word") -> int:
        return levenshtein(self.text, other.text)

    def __str__(self) -> str:
        return self.text


__all__ = ["Word", "as_codes", "levenshtein"]
