"""Core data structures for the BK-tree index."""

from .metrics import (
    Distance,
    DistanceFn,
    Metric,
    MetricItem,
    MetricRegistry,
    available_metrics,
    get_metric,
    register_metric,
)
from .node import BKNode
from .tree import BKTree, new_tree

__all__ = [
    "BKNode",
    "BKTree",
    "Distance",
    "DistanceFn",
    "Metric",
    "MetricItem",
    "MetricRegistry",
    "available_metrics",
    "get_metric",
    "new_tree",
    "register_metric",
]
