"""Parallel range search over a BK-tree.

Every node visit is an independent task on a thread pool. Children inside
the pruning window are submitted as further tasks, so independent subtrees
are explored concurrently. Three pieces of shared state exist per search:

* the match list, appended under the traversal's condition lock;
* an outstanding-task counter, incremented before a task is submitted and
  decremented when it finishes, so the search is complete exactly when the
  counter returns to zero;
* a stop flag, raised by cancellation, an expired timeout or a failing
  distance call, after which no task schedules further children.

A stopped search still waits for the counter to drain before returning, so
no task touches the result sink once the caller has the result back.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator, List, Optional, Tuple

from bktreex import config as bx_config
from bktreex.core.node import BKNode
from bktreex.diagnostics import log_operation
from bktreex.errors import CancellationIncomplete
from bktreex.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover - typing only
    from bktreex.core.tree import BKTree


LOGGER = get_logger("queries.concurrent")

REASON_CANCELLED = "cancelled"
REASON_TIMEOUT = "timeout"


class CancellationToken:
    """Caller-side switch used to abandon a concurrent search."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback()

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on cancellation, immediately if already cancelled."""

        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


@dataclass(frozen=True)
class RangeSearchResult:
    """Outcome of a concurrent range search.

    ``complete`` is False when the search was abandoned; ``items`` is then
    always empty because partial matches are discarded as a unit. Unpacks as
    ``items, complete``.
    """

    items: Tuple[Any, ...]
    complete: bool
    reason: str | None = None

    @property
    def cancelled(self) -> bool:
        """True only when a cancellation token abandoned the search; timeouts report False."""

        return self.reason == REASON_CANCELLED

    def raise_if_incomplete(self) -> "RangeSearchResult":
        if not self.complete:
            raise CancellationIncomplete(self.reason or REASON_CANCELLED)
        return self

    def __iter__(self) -> Iterator[Any]:
        yield self.items
        yield self.complete


class _Traversal:
    __slots__ = (
        "_executor",
        "_distance",
        "_query",
        "_radius",
        "_return_distances",
        "_cond",
        "_stop",
        "_outstanding",
        "_matches",
        "_visited",
        "_error",
    )

    def __init__(
        self,
        executor: Executor,
        distance: Callable[[Any, Any], int],
        query: Any,
        radius: int,
        *,
        return_distances: bool,
    ) -> None:
        self._executor = executor
        self._distance = distance
        self._query = query
        self._radius = radius
        self._return_distances = return_distances
        self._cond = threading.Condition()
        self._stop = threading.Event()
        self._outstanding = 0
        self._matches: List[Any] = []
        self._visited = 0
        self._error: Optional[BaseException] = None

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def visited(self) -> int:
        return self._visited

    def matches(self) -> Tuple[Any, ...]:
        with self._cond:
            return tuple(self._matches)

    def stop(self) -> None:
        with self._cond:
            self._stop.set()
            self._cond.notify_all()

    def submit(self, node: BKNode[Any]) -> None:
        with self._cond:
            if self._stop.is_set():
                return
            self._outstanding += 1
        try:
            self._executor.submit(self._visit, node)
        except BaseException:
            self._task_done()
            raise

    def _visit(self, node: BKNode[Any]) -> None:
        try:
            if self._stop.is_set():
                return
            dist = int(self._distance(node.item, self._query))
            with self._cond:
                self._visited += 1
                if dist <= self._radius:
                    self._matches.append((node.item, dist) if self._return_distances else node.item)
            for child in node.children_within(dist, self._radius):
                if self._stop.is_set():
                    break
                self.submit(child)
        except BaseException as exc:
            with self._cond:
                if self._error is None:
                    self._error = exc
                self._stop.set()
                self._cond.notify_all()
        finally:
            self._task_done()

    def _task_done(self) -> None:
        with self._cond:
            self._outstanding -= 1
            if self._outstanding == 0:
                self._cond.notify_all()

    def wait(self, deadline: float | None) -> Tuple[bool, bool]:
        """Block until no task is queued or running.

        Returns ``(complete, timed_out)``. ``complete`` is decided when the
        counter drains, so a cancellation arriving afterwards has no effect.
        """

        timed_out = False
        with self._cond:
            while self._outstanding:
                timeout = None
                if deadline is not None and not self._stop.is_set():
                    timeout = deadline - time.monotonic()
                    if timeout <= 0:
                        timed_out = True
                        self._stop.set()
                        continue
                self._cond.wait(timeout)
            return not self._stop.is_set(), timed_out


class ConcurrentRangeSearch:
    """Thread-pool driven range search.

    ``workers`` sizes the pool and defaults to ``BKTREEX_SEARCH_WORKERS`` or
    the platform's CPU count. An existing ``executor`` may be shared instead,
    in which case it is left running on :meth:`close`.
    """

    def __init__(self, workers: int | None = None, *, executor: Executor | None = None) -> None:
        if workers is None:
            workers = bx_config.runtime_config().resolved_search_workers
        workers = int(workers)
        if workers <= 0:
            raise ValueError(f"workers must be positive, got {workers}.")
        self.workers = workers
        self._executor = executor
        self._owns_executor = executor is None
        self._lock = threading.Lock()
        self._closed = False

    def _get_executor(self) -> Executor:
        with self._lock:
            if self._closed:
                raise RuntimeError("ConcurrentRangeSearch has been closed.")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.workers,
                    thread_name_prefix="bktreex-search",
                )
            return self._executor

    def close(self) -> None:
        with self._lock:
            self._closed = True
            executor, self._executor = self._executor, None
        if executor is not None and self._owns_executor:
            executor.shutdown(wait=True)

    def __enter__(self) -> "ConcurrentRangeSearch":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def search(
        self,
        tree: "BKTree[Any]",
        query: Any,
        radius: int,
        cancellation: CancellationToken | None = None,
        *,
        timeout: float | None = None,
        return_distances: bool = False,
    ) -> RangeSearchResult:
        """Return the items within ``radius`` of ``query``, in no particular order.

        ``timeout`` (seconds) and ``cancellation`` both abandon the search; the
        result then has ``complete=False`` and no items.
        """

        with log_operation(LOGGER, "range_search_concurrent") as op_log:
            return self._search_impl(
                op_log,
                tree,
                query,
                int(radius),
                cancellation,
                timeout=timeout,
                return_distances=return_distances,
            )

    def _search_impl(
        self,
        op_log: Any,
        tree: "BKTree[Any]",
        query: Any,
        radius: int,
        cancellation: CancellationToken | None,
        *,
        timeout: float | None,
        return_distances: bool,
    ) -> RangeSearchResult:
        op_log.add_metadata(radius=radius, workers=self.workers)
        if cancellation is not None and cancellation.cancelled:
            op_log.add_metadata(visited=0, matches=0, complete=False)
            return RangeSearchResult(items=(), complete=False, reason=REASON_CANCELLED)
        if radius < 0:
            LOGGER.debug("Negative radius %d; returning no matches.", radius)
            op_log.add_metadata(visited=0, matches=0, complete=True)
            return RangeSearchResult(items=(), complete=True)
        if tree.root is None:
            op_log.add_metadata(visited=0, matches=0, complete=True)
            return RangeSearchResult(items=(), complete=True)

        deadline = None if timeout is None else time.monotonic() + float(timeout)
        traversal = _Traversal(
            self._get_executor(),
            tree.distance,
            query,
            radius,
            return_distances=return_distances,
        )
        if cancellation is not None:
            cancellation.add_callback(traversal.stop)
        try:
            traversal.submit(tree.root)
            complete, timed_out = traversal.wait(deadline)
        except BaseException:
            traversal.stop()
            traversal.wait(None)
            raise
        finally:
            if cancellation is not None:
                cancellation.remove_callback(traversal.stop)

        op_log.add_metadata(visited=traversal.visited)
        if traversal.error is not None:
            raise traversal.error
        if not complete:
            reason = REASON_TIMEOUT if timed_out else REASON_CANCELLED
            LOGGER.debug("Concurrent range search abandoned (%s); discarding partial matches.", reason)
            op_log.add_metadata(matches=0, complete=False)
            return RangeSearchResult(items=(), complete=False, reason=reason)

        items = traversal.matches()
        op_log.add_metadata(matches=len(items), complete=True)
        return RangeSearchResult(items=items, complete=True)


def range_search_concurrent(
    tree: "BKTree[Any]",
    query: Any,
    radius: int,
    cancellation: CancellationToken | None = None,
    *,
    timeout: float | None = None,
    workers: int | None = None,
    executor: Executor | None = None,
    return_distances: bool = False,
) -> RangeSearchResult:
    with ConcurrentRangeSearch(workers, executor=executor) as searcher:
        return searcher.search(
            tree,
            query,
            radius,
            cancellation,
            timeout=timeout,
            return_distances=return_distances,
        )


__all__ = [
    "CancellationToken",
    "ConcurrentRangeSearch",
    "RangeSearchResult",
    "range_search_concurrent",
]
