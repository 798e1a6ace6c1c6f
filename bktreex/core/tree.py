from __future__ import annotations

from collections import deque
from concurrent.futures import Executor
from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from bktreex.core.metrics import DistanceFn, resolve_distance
from bktreex.core.node import BKNode
from bktreex.diagnostics import log_operation
from bktreex.logging import get_logger
from bktreex.queries.concurrent import (
    CancellationToken,
    RangeSearchResult,
    range_search_concurrent as _range_search_concurrent,
)
from bktreex.queries.range import range_search as _range_search

T = TypeVar("T")

LOGGER = get_logger("core.tree")


class BKTree(Generic[T]):
    """Burkhard-Keller tree over items of a discrete metric space.

    Each edge is labelled with the exact distance between parent and child,
    computed once when the child is attached. Range searches use those labels
    and the triangle inequality to skip subtrees that cannot hold a match.

    ``distance`` binds the metric for this tree: a callable ``(a, b) -> int``,
    the name of a registered metric, or ``None`` to call ``a.distance_to(b)``
    on the items themselves. The tree must not be mutated while a search is
    running.
    """

    def __init__(self, distance: DistanceFn | str | None = None) -> None:
        self.distance: DistanceFn = resolve_distance(distance)
        self.root: Optional[BKNode[T]] = None
        self._size = 0

    @classmethod
    def from_items(cls, items: Iterable[T], distance: DistanceFn | str | None = None) -> "BKTree[T]":
        tree: BKTree[T] = cls(distance)
        tree.extend(items)
        return tree

    # Construction

    def insert(self, item: T) -> None:
        """Attach ``item`` below the first node with a free slot at its distance."""

        if self.root is None:
            self.root = BKNode(item)
            self._size = 1
            return
        current = self.root
        while True:
            dist = int(self.distance(current.item, item))
            child = current.children.get(dist)
            if child is None:
                current.attach(dist, item)
                self._size += 1
                return
            current = child

    def extend(self, items: Iterable[T]) -> None:
        with log_operation(LOGGER, "extend") as op_log:
            before = self._size
            for item in items:
                self.insert(item)
            op_log.add_metadata(items=self._size - before, size=self._size)

    # Queries

    def range_search(
        self,
        query: T,
        radius: int,
        *,
        return_distances: bool = False,
    ) -> List[T] | List[Tuple[T, int]]:
        return _range_search(self, query, radius, return_distances=return_distances)

    def range_search_concurrent(
        self,
        query: T,
        radius: int,
        cancellation: CancellationToken | None = None,
        *,
        timeout: float | None = None,
        workers: int | None = None,
        executor: Executor | None = None,
        return_distances: bool = False,
    ) -> RangeSearchResult:
        return _range_search_concurrent(
            self,
            query,
            radius,
            cancellation,
            timeout=timeout,
            workers=workers,
            executor=executor,
            return_distances=return_distances,
        )

    # Introspection

    def is_empty(self) -> bool:
        return self.root is None

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __iter__(self) -> Iterator[T]:
        """Yield stored items breadth-first, children in key order."""

        if self.root is None:
            return
        pending = deque([self.root])
        while pending:
            node = pending.popleft()
            yield node.item
            pending.extend(node.children[key] for key in sorted(node.children))

    def __contains__(self, item: object) -> bool:
        # Radius-0 window: only the child keyed by the current distance can hold a match.
        node = self.root
        while node is not None:
            dist = int(self.distance(node.item, item))
            if dist == 0 and node.item == item:
                return True
            node = node.children.get(dist)
        return False

    def depth(self) -> int:
        """Number of nodes on the longest root-to-leaf path (0 when empty)."""

        if self.root is None:
            return 0
        deepest = 0
        stack = [(self.root, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children.values())
        return deepest

    def structure(self) -> Any:
        """Nested ``(item, ((key, subtree), ...))`` snapshot, children sorted by key.

        Two trees compare equal under this view exactly when they have the same
        parent/child/key relationships.
        """

        if self.root is None:
            return None
        built: Dict[int, Any] = {}
        stack: List[Tuple[BKNode[T], bool]] = [(self.root, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                built[id(node)] = (
                    node.item,
                    tuple((key, built.pop(id(node.children[key]))) for key in sorted(node.children)),
                )
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in node.children.values())
        return built[id(self.root)]

    def __repr__(self) -> str:
        return f"BKTree(size={self._size}, depth={self.depth()})"


def new_tree(distance: DistanceFn | str | None = None) -> BKTree[Any]:
    """Create an empty tree bound to ``distance`` (see :class:`BKTree`)."""

    return BKTree(distance)


__all__ = ["BKTree", "new_tree"]
