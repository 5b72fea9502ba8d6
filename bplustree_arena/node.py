"""Tree nodes and the key search used inside a single node."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


@dataclass(frozen=True)
class SearchResult:
    """Outcome of searching a node's keys.

    When ``found`` is true, ``index`` is the position of the matching key.
    Otherwise ``index`` is the position the key would be inserted at, which
    is also the index of the child to descend into.
    """

    found: bool
    index: int

    @classmethod
    def hit(cls, index: int) -> SearchResult:
        return cls(True, index)

    @classmethod
    def go_down(cls, index: int) -> SearchResult:
        return cls(False, index)


@dataclass
class Node(Generic[K, V]):
    """A B+ tree node.

    Leaf nodes hold ``values`` parallel to ``keys`` and no ``children``;
    internal nodes hold ``children`` (arena ids) and no ``values``.
    ``left`` and ``right`` are arena ids of neighbouring nodes on the same
    level, or ``None``.
    """

    keys: list[Any] = field(default_factory=list)
    values: list[Any] = field(default_factory=list)
    children: list[int] = field(default_factory=list)
    left: int | None = None
    right: int | None = None

    def is_leaf(self) -> bool:
        """A node without children is a leaf."""
        return not self.children

    def search(self, key: Any) -> SearchResult:
        """Binary search for ``key`` in this node's sorted keys."""
        position = bisect_left(self.keys, key)
        if position < len(self.keys) and self.keys[position] == key:
            return SearchResult.hit(position)
        return SearchResult.go_down(position)

    def search_linear(self, key: Any) -> SearchResult:
        """Linear scan for ``key``; same result as :meth:`search`."""
        for position, existing in enumerate(self.keys):
            if existing == key:
                return SearchResult.hit(position)
            if existing > key:
                return SearchResult.go_down(position)
        return SearchResult.go_down(len(self.keys))

    def copy(self) -> Node[K, V]:
        """Shallow copy with independent lists."""
        return Node(
            keys=list(self.keys),
            values=list(self.values),
            children=list(self.children),
            left=self.left,
            right=self.right,
        )