#!/usr/bin/env python
"""Quick-start guide for bktreex library usage.

Run with: python -m bktreex

This module intentionally avoids importing bktreex internals to provide
a fast, clean startup for displaying help text.
"""

from __future__ import annotations

QUICKSTART = """\
================================================================================
                                 BKTREEX
          BK-tree index for fuzzy lookup in discrete metric spaces
================================================================================

INSTALLATION
------------
    pip install bktreex

BASIC USAGE (edit distance)
---------------------------
    from bktreex import BKTree, levenshtein

    tree = BKTree(levenshtein)
    tree.extend(["cat", "cats", "bat", "hat", "cast"])

    # Every word within edit distance 1 of "cat", in discovery order
    matches = tree.range_search("cat", 1)

    # With distances, sorted post hoc
    ranked = sorted(tree.range_search("cat", 2, return_distances=True),
                    key=lambda pair: pair[1])

CUSTOM ITEMS
------------
Items may carry their own metric instead of binding one to the tree:

    from dataclasses import dataclass
    from bktreex import BKTree

    @dataclass(frozen=True)
    class Pitch:
        semitone: int

        def distance_to(self, other: "Pitch") -> int:
            return abs(self.semitone - other.semitone)

    tree = BKTree()          # uses item.distance_to(other)
    tree.insert(Pitch(60))

The metric must be symmetric and obey the triangle inequality; violations
are not detected and make searches miss matches.

CONCURRENT SEARCH
-----------------
    from bktreex import CancellationToken, ConcurrentRangeSearch

    token = CancellationToken()
    with ConcurrentRangeSearch(workers=8) as searcher:
        result = searcher.search(tree, "cat", 1, token, timeout=2.0)

    if result.complete:
        print(set(result.items))
    # token.cancel() from another thread abandons the query; an abandoned
    # query returns complete=False and no items.

NEAR-DUPLICATE HASHES
---------------------
    from bktreex import BKTree, HashCode

    tree = BKTree()
    tree.insert(HashCode.from_hex("f0e1d2c3b4a59687"))
    tree.range_search(HashCode.from_hex("f0e1d2c3b4a59686"), 4)

CONFIGURATION
-------------
    BKTREEX_LOG_LEVEL            logging level for the "bktreex" logger (INFO)
    BKTREEX_ENABLE_DIAGNOSTICS   CPU/RSS figures in operation logs (1)
    BKTREEX_SEARCH_WORKERS       default concurrent search pool size (CPU count)

BENCHMARKING CLI
----------------
    python -m cli.bench --words 20000 --queries 200 --radius 2

================================================================================
"""


def main() -> None:
    """Print quick-start guide."""
    print(QUICKSTART)


if __name__ == "__main__":
    main()
