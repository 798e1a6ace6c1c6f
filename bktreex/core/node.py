from __future__ import annotations

from typing import Dict, Generic, Iterator, TypeVar

T = TypeVar("T")


class BKNode(Generic[T]):
    """One indexed item plus its children keyed by distance to that item."""

    __slots__ = ("item", "children")

    def __init__(self, item: T) -> None:
        self.item = item
        self.children: Dict[int, BKNode[T]] = {}

    def attach(self, key: int, item: T) -> "BKNode[T]":
        child = BKNode(item)
        self.children[key] = child
        return child

    def children_within(self, dist: int, radius: int) -> Iterator["BKNode[T]"]:
        """Yield children whose key lies in ``[dist - radius, dist + radius]``."""

        low, high = dist - radius, dist + radius
        for key, child in self.children.items():
            if low <= key <= high:
                yield child

    def __repr__(self) -> str:
        return f"BKNode(item={self.item!r}, children={sorted(self.children)})"
