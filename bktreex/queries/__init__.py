"""Range queries over BK-trees."""

from .concurrent import (
    CancellationToken,
    ConcurrentRangeSearch,
    RangeSearchResult,
    range_search_concurrent,
)
from .range import range_search

__all__ = [
    "CancellationToken",
    "ConcurrentRangeSearch",
    "RangeSearchResult",
    "range_search",
    "range_search_concurrent",
]
