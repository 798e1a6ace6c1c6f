from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Protocol, Tuple, TypeVar, runtime_checkable

T = TypeVar("T")

Distance = int
DistanceFn = Callable[[Any, Any], Distance]


@runtime_checkable
class MetricItem(Protocol):
    """Capability of an indexable item: report an integer distance to a peer.

    Implementations must be deterministic, non-negative, symmetric and obey the
    triangle inequality. None of this is verified; a violating metric makes
    range searches silently miss matches.
    """

    def distance_to(self, other: Any) -> Distance:
        ...


def item_distance(lhs: MetricItem, rhs: MetricItem) -> Distance:
    """Distance binding used by trees built without an explicit metric."""

    method = getattr(lhs, "distance_to", None)
    if method is None:
        raise TypeError(
            f"{type(lhs).__name__} does not implement distance_to(); "
            "pass a distance callable or metric name to the tree."
        )
    return method(rhs)


@dataclass(frozen=True)
class Metric:
    """Named distance function usable as a tree's distance binding."""

    name: str
    distance: DistanceFn

    def __call__(self, lhs: Any, rhs: Any) -> Distance:
        return self.distance(lhs, rhs)


class MetricRegistry:
    """Minimal registry for metrics selectable by name."""

    def __init__(self) -> None:
        self._metrics: Dict[str, Metric] = {}

    def register(self, metric: Metric, *, overwrite: bool = False) -> None:
        name = metric.name.lower()
        if not overwrite and name in self._metrics:
            raise ValueError(f"Metric '{metric.name}' already registered.")
        self._metrics[name] = metric

    def get(self, name: str) -> Metric:
        key = name.lower()
        if key not in self._metrics:
            raise KeyError(f"Metric '{name}' not registered.")
        return self._metrics[key]

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._metrics.keys()))


_REGISTRY = MetricRegistry()


def register_metric(metric: Metric, *, overwrite: bool = False) -> None:
    _REGISTRY.register(metric, overwrite=overwrite)


def get_metric(name: str) -> Metric:
    """Return a registered metric, loading the bundled ones on first use."""

    _ensure_builtin_metrics()
    return _REGISTRY.get(name)


def available_metrics() -> Tuple[str, ...]:
    _ensure_builtin_metrics()
    return _REGISTRY.names()


def resolve_distance(distance: DistanceFn | str | None) -> DistanceFn:
    if distance is None:
        return item_distance
    if isinstance(distance, str):
        return get_metric(distance)
    if not callable(distance):
        raise TypeError(f"Distance must be callable or a metric name, got {type(distance).__name__}.")
    return distance


def _ensure_builtin_metrics() -> None:
    # Deferred so the core never imports concrete metrics at module load.
    import bktreex.metrics  # noqa: F401


__all__ = [
    "Distance",
    "DistanceFn",
    "Metric",
    "MetricItem",
    "MetricRegistry",
    "available_metrics",
    "get_metric",
    "item_distance",
    "register_metric",
    "resolve_distance",
]
