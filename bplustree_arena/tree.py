"""An ordered map stored as a B+ tree whose nodes live in an id-keyed arena."""

from __future__ import annotations

import sys
from collections import deque
from dataclasses import dataclass
from itertools import count
from typing import Any, Generic, Iterator, TextIO, TypeVar

from .node import Node

K = TypeVar("K")
V = TypeVar("V")

_SEPARATOR = "-" * 64
_EMPTY_LINE = "                          empty                          "


@dataclass(frozen=True)
class _PathStep:
    parent_id: int
    child_id: int
    child_index: int


@dataclass
class _Sibling:
    id: int
    node: Node


class BPlusTree(Generic[K, V]):
    """B+ tree map with order ``b``.

    Non-root nodes hold between ``b - 1`` and ``2 * b - 1`` keys. Leaves are
    linked left to right, which makes range scans cheap.
    """

    def __init__(self, b: int) -> None:
        if b < 2:
            raise ValueError("b must be greater than 1")
        self.b = b
        self.balance_siblings_per_side = 2
        self._nodes: dict[int, Node] = {}
        self._ids = count()
        self._root: int | None = None

    # ------------------------------------------------------------------ arena

    def _alloc(self, node: Node) -> int:
        node_id = next(self._ids)
        self._nodes[node_id] = node
        return node_id

    def node_count(self) -> int:
        """Number of nodes currently held by the tree."""
        return len(self._nodes)

    @property
    def _max_keys(self) -> int:
        return 2 * self.b - 1

    # ----------------------------------------------------------------- lookup

    def _search(self, key: Any) -> list[_PathStep]:
        """Path of steps from the root down to the leaf that may hold ``key``."""
        path: list[_PathStep] = []
        node_id = self._root
        node = self._nodes[node_id]
        while node.children:
            child_index = node.search(key).index
            step = _PathStep(node_id, node.children[child_index], child_index)
            path.append(step)
            node_id = step.child_id
            node = self._nodes[node_id]
        return path

    def _leaf_for(self, key: Any) -> tuple[int, list[_PathStep], _PathStep | None]:
        path = self._search(key)
        last = path.pop() if path else None
        leaf_id = last.child_id if last is not None else self._root
        return leaf_id, path, last

    def get(self, key: K) -> V | None:
        """Value stored under ``key``, or ``None``."""
        if self._root is None:
            return None
        leaf_id, _, _ = self._leaf_for(key)
        leaf = self._nodes[leaf_id]
        result = leaf.search(key)
        return leaf.values[result.index] if result.found else None

    def get_in_range(self, start: K, end: K) -> list[V]:
        """Values for keys from ``start`` to ``end`` inclusive.

        The scan starts only if ``start`` itself is present; otherwise the
        result is empty.
        """
        if self._root is None:
            return []
        leaf_id, _, _ = self._leaf_for(start)
        leaf = self._nodes[leaf_id]
        result = leaf.search(start)
        if not result.found:
            return []
        values: list[V] = []
        for key, value in self._scan_from(leaf, result.index):
            if key > end:
                break
            values.append(value)
        return values

    def _scan_from(self, leaf: Node, index: int) -> Iterator[tuple[Any, Any]]:
        yield from zip(leaf.keys[index:], leaf.values[index:])
        next_id = leaf.right
        while next_id is not None:
            leaf = self._nodes[next_id]
            yield from zip(leaf.keys, leaf.values)
            next_id = leaf.right

    # --------------------------------------------------------------- mutation

    def insert(self, key: K, value: V) -> V | None:
        """Store ``value`` under ``key``; return the previous value or ``None``."""
        if self._root is None:
            self._root = self._alloc(Node())
        leaf_id, path, last = self._leaf_for(key)
        leaf = self._nodes[leaf_id]
        result = leaf.search(key)
        if result.found:
            old = leaf.values[result.index]
            leaf.values[result.index] = value
            return old
        leaf.keys.insert(result.index, key)
        leaf.values.insert(result.index, value)
        self._balance(
            last.parent_id if last else None,
            leaf_id,
            last.child_index if last else None,
            path,
        )
        return None

    def remove(self, key: K) -> V | None:
        """Delete ``key``; return its value, or ``None`` if it was absent."""
        if self._root is None:
            return None
        leaf_id, path, last = self._leaf_for(key)
        leaf = self._nodes[leaf_id]
        result = leaf.search(key)
        if not result.found:
            return None
        del leaf.keys[result.index]
        value = leaf.values.pop(result.index)
        self._balance(
            last.parent_id if last else None,
            leaf_id,
            last.child_index if last else None,
            path,
        )
        return value

    # -------------------------------------------------------------- balancing

    def _siblings(self, parent: Node, child_index: int) -> tuple[list[_Sibling], int]:
        last_index = len(parent.children) - 1
        per_side = self.balance_siblings_per_side
        if child_index in (0, last_index):
            per_side *= 2
        first = max(child_index - 1, 0)
        stop = min(child_index + per_side + 1, len(parent.children))
        siblings = [
            _Sibling(child_id, self._nodes[child_id].copy())
            for child_id in parent.children[first:stop]
        ]
        return siblings, first

    def _balance(
        self,
        parent_id: int | None,
        child_id: int,
        child_index: int | None,
        path: list[_PathStep],
    ) -> None:
        while True:
            child = self._nodes[child_id]
            if parent_id is None:
                underflow = not child.keys
            else:
                underflow = len(child.keys) < self.b - 1
            overflow = len(child.keys) > self._max_keys
            if not underflow and not overflow:
                return

            if parent_id is None:
                self._balance_root(child_id, underflow)
                return

            parent = self._nodes[parent_id].copy()
            siblings, divider_start = self._siblings(parent, child_index)
            if child.is_leaf():
                self._redistribute_leaves(parent, siblings, divider_start)
            else:
                self._redistribute_internal(parent, siblings, divider_start)

            for sibling in siblings:
                self._nodes[sibling.id] = sibling.node
            self._nodes[parent_id] = parent

            if path:
                step = path.pop()
                parent_id, child_id, child_index = (
                    step.parent_id,
                    step.child_id,
                    step.child_index,
                )
            else:
                parent_id, child_id, child_index = None, parent_id, None

    def _balance_root(self, root_id: int, underflow: bool) -> None:
        root = self._nodes[root_id].copy()
        if underflow:
            new_root = root.children.pop() if len(root.children) == 1 else None
            del self._nodes[root_id]
            self._root = new_root
            return

        left, right = Node(), Node()
        if root.is_leaf():
            split = len(root.keys) // 2 + len(root.keys) % 2
            left.keys, right.keys = root.keys[:split], root.keys[split:]
            left.values, right.values = root.values[:split], root.values[split:]
            root.values = []
            root.keys = [left.keys[-1]]
        else:
            pivot = len(root.keys) // 2
            left.keys, right.keys = root.keys[: pivot + 1], root.keys[pivot + 1 :]
            root.keys = [left.keys.pop()]
            left.children = root.children[: pivot + 1]
            right.children = root.children[pivot + 1 :]

        left_id = self._alloc(left)
        right_id = self._alloc(right)
        left.right = right_id
        right.left = left_id
        root.children = [left_id, right_id]
        self._nodes[root_id] = root

    def _redistribute_leaves(
        self, parent: Node, siblings: list[_Sibling], divider_start: int
    ) -> None:
        pairs: deque[tuple[Any, Any]] = deque()
        for position, sibling in enumerate(siblings):
            pairs.extend(zip(sibling.node.keys, sibling.node.values))
            sibling.node.keys = []
            sibling.node.values = []
            if position < len(siblings) - 1:
                del parent.keys[divider_start]

        insert_at = divider_start
        for sibling in siblings:
            for _ in range(min(self._max_keys, len(pairs))):
                key, value = pairs.popleft()
                sibling.node.keys.append(key)
                sibling.node.values.append(value)
            if not pairs:
                break
            parent.keys.insert(insert_at, sibling.node.keys[-1])
            insert_at += 1

        if pairs:
            new_node = Node(keys=[k for k, _ in pairs], values=[v for _, v in pairs])
            if len(new_node.keys) > self._max_keys:
                raise AssertionError("new sibling node overflow")
            rightmost = siblings[-1]
            new_node.right = rightmost.node.right
            new_node.left = rightmost.id
            new_id = self._alloc(new_node)
            if rightmost.node.right is not None:
                self._nodes[rightmost.node.right].left = new_id
            rightmost.node.right = new_id
            parent.children.insert(insert_at, new_id)
        else:
            first_empty = next(
                (i for i, s in enumerate(siblings) if not s.node.keys), None
            )
            if first_empty is not None:
                following = siblings[-1].node.right
                last_filled = siblings[first_empty - 1]
                last_filled.node.right = following
                if following is not None:
                    self._nodes[following].left = last_filled.id
                for sibling in siblings[first_empty:]:
                    parent.children.remove(sibling.id)
                    del self._nodes[sibling.id]
                del siblings[first_empty:]

        self._check_leaf_links(siblings)

    def _check_leaf_links(self, siblings: list[_Sibling]) -> None:
        for current, following in zip(siblings, siblings[1:]):
            if current.node.right != following.id or following.node.left != current.id:
                raise AssertionError("Incorrect sibling pointers")
        last = siblings[-1]
        if last.node.right is not None and self._nodes[last.node.right].left != last.id:
            raise AssertionError("Incorrect sibling pointers")

    def _redistribute_internal(
        self, parent: Node, siblings: list[_Sibling], divider_start: int
    ) -> None:
        keys: deque[Any] = deque()
        children: deque[int] = deque()
        for position, sibling in enumerate(siblings):
            keys.extend(sibling.node.keys)
            children.extend(sibling.node.children)
            sibling.node.keys = []
            sibling.node.children = []
            if position < len(siblings) - 1:
                keys.append(parent.keys.pop(divider_start))

        insert_at = divider_start
        current = 0
        remaining = len(keys)
        cap = self._max_keys
        while remaining > 0 and current < len(siblings):
            node = siblings[current].node
            if remaining == 2 and len(node.keys) + 2 > cap:
                node.children.append(children.popleft())
                parent.keys.insert(insert_at, keys.popleft())
                remaining -= 1
                insert_at += 1
                current += 1
                continue
            node.keys.append(keys.popleft())
            remaining -= 1
            node.children.append(children.popleft())
            if len(node.keys) == cap:
                node.children.append(children.popleft())
                current += 1
                if remaining > 0:
                    parent.keys.insert(insert_at, keys.popleft())
                    remaining -= 1
                    insert_at += 1
            elif remaining == 0:
                node.children.append(children.popleft())
                break

        if remaining > 0:
            new_node = Node(keys=list(keys), children=list(children))
            if len(new_node.keys) > cap:
                raise AssertionError("new sibling node overflow")
            parent.children.insert(insert_at, self._alloc(new_node))
        else:
            first_empty = next(
                (i for i, s in enumerate(siblings) if not s.node.keys), None
            )
            if first_empty is not None:
                for sibling in siblings[first_empty:]:
                    parent.children.remove(sibling.id)
                    del self._nodes[sibling.id]
                del siblings[first_empty:]

    # ---------------------------------------------------------------- display

    def levels(self) -> list[list[list[Any]]]:
        """Keys of every node, grouped by level from the root down."""
        if self._root is None:
            return []
        result: list[list[list[Any]]] = []
        frontier = [self._root]
        while frontier:
            level: list[list[Any]] = []
            next_frontier: list[int] = []
            for node_id in frontier:
                node = self._nodes.get(node_id)
                if node is None:
                    raise KeyError(
                        f"node {node_id} is linked as a child but not stored"
                    )
                if node.children and len(node.children) != len(node.keys) + 1:
                    raise AssertionError("tree is not balanced")
                level.append(list(node.keys))
                next_frontier.extend(node.children)
            result.append(level)
            frontier = next_frontier
        return result

    def render(self) -> str:
        """Text picture of the tree, one line per level."""
        lines = [_SEPARATOR]
        if self._root is None:
            lines.append(_EMPTY_LINE)
            return "\n".join(lines)
        for depth, level in enumerate(self.levels(), start=1):
            text = "".join(f"  {keys!r}" for keys in level)
            lines.append(f"L{depth}:  {text}")
        lines.append(_SEPARATOR)
        return "\n".join(lines)

    def print(self, file: TextIO | None = None) -> None:
        """Write :meth:`render` output to ``file`` (standard output by default)."""
        print(self.render(), file=file if file is not None else sys.stdout)