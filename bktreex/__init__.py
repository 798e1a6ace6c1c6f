"""bktreex: BK-tree index for fuzzy lookup in discrete metric spaces.

Quick Start
-----------
>>> from bktreex import BKTree, levenshtein
>>>
>>> tree = BKTree(levenshtein)
>>> tree.extend(["cat", "cats", "bat", "hat", "cast"])
>>> sorted(tree.range_search("cat", 1))
['bat', 'cast', 'cat', 'cats', 'hat']

Concurrent search
-----------------
>>> from bktreex import CancellationToken
>>>
>>> token = CancellationToken()
>>> items, complete = tree.range_search_concurrent("cat", 1, token, timeout=5.0)

Classes
-------
BKTree : The index. Insert items, then issue radius queries.
ConcurrentRangeSearch : Reusable thread pool for parallel radius queries.
CancellationToken : Caller-side switch to abandon a concurrent query.
RangeSearchResult : Items plus completeness flag from a concurrent query.
"""

from importlib.metadata import version as _pkg_version

try:
    __version__ = _pkg_version("bktreex")
except Exception:  # pragma: no cover - best effort during local development
    __version__ = "0.0.1"

from .core import (
    BKNode,
    BKTree,
    Metric,
    MetricItem,
    MetricRegistry,
    available_metrics,
    get_metric,
    new_tree,
    register_metric,
)
from .errors import CancellationIncomplete
from .metrics import HashCode, Word, bit_hamming, hamming, levenshtein, padded_hamming
from .queries import (
    CancellationToken,
    ConcurrentRangeSearch,
    RangeSearchResult,
    range_search,
    range_search_concurrent,
)

__all__ = [
    "__version__",
    "BKNode",
    "BKTree",
    "CancellationIncomplete",
    "CancellationToken",
    "ConcurrentRangeSearch",
    "HashCode",
    "Metric",
    "MetricItem",
    "MetricRegistry",
    "RangeSearchResult",
    "Word",
    "available_metrics",
    "bit_hamming",
    "get_metric",
    "hamming",
    "levenshtein",
    "new_tree",
    "padded_hamming",
    "range_search",
    "range_search_concurrent",
    "register_metric",
]
