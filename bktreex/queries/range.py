from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Any, Deque, List, Tuple

from bktreex.core.node import BKNode
from bktreex.diagnostics import log_operation
from bktreex.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover - typing only
    from bktreex.core.tree import BKTree


LOGGER = get_logger("queries.range")


def range_search(
    tree: "BKTree[Any]",
    query: Any,
    radius: int,
    *,
    return_distances: bool = False,
) -> List[Any] | List[Tuple[Any, int]]:
    """Return every indexed item within ``radius`` of ``query``.

    Traversal is breadth-first, so results come back in discovery order, which
    is deterministic for a fixed tree and query but is not sorted by distance.
    """

    with log_operation(LOGGER, "range_search") as op_log:
        return _range_search_impl(
            op_log,
            tree,
            query,
            int(radius),
            return_distances=return_distances,
        )


def _range_search_impl(
    op_log: Any,
    tree: "BKTree[Any]",
    query: Any,
    radius: int,
    *,
    return_distances: bool,
) -> List[Any] | List[Tuple[Any, int]]:
    op_log.add_metadata(radius=radius)
    if radius < 0:
        LOGGER.debug("Negative radius %d; returning no matches.", radius)
        op_log.add_metadata(visited=0, matches=0)
        return []
    if tree.root is None:
        op_log.add_metadata(visited=0, matches=0)
        return []

    distance = tree.distance
    pending: Deque[BKNode[Any]] = deque([tree.root])
    results: List[Any] = []
    visited = 0
    while pending:
        cand = pending.popleft()
        visited += 1
        dist = int(distance(cand.item, query))
        if dist <= radius:
            results.append((cand.item, dist) if return_distances else cand.item)
        pending.extend(cand.children_within(dist, radius))

    op_log.add_metadata(visited=visited, matches=len(results))
    return results


__all__ = ["range_search"]
