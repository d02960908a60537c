from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from mapscope.metrics.records import BSTMetrics

from .base import KeyLike, OrderedAssocMap, check_value, coerce_key


@dataclass(slots=True)
class _Node:
    key: bytes
    value: int
    left: Optional["_Node"] = None
    right: Optional["_Node"] = None


class UnbalancedBST(OrderedAssocMap):
    """Classical binary search tree without any rebalancing.

    All walks are iterative, so sorted input (which degrades the tree into a
    linked list) cannot exhaust the interpreter's recursion limit.
    """

    name = "bst"

    def __init__(self) -> None:
        self._root: Optional[_Node] = None
        self._size = 0
        self._total_insertions = 0
        self._total_comparisons = 0
        self._max_depth = 0
        self._average_depth = 0.0

    def __len__(self) -> int:
        return self._size

    def insert(self, key: KeyLike, value: int) -> None:
        key = coerce_key(key)
        value = check_value(value)
        if self._root is None:
            self._root = _Node(key, value)
            self._installed(0)
            return
        node = self._root
        depth = 0
        while True:
            self._total_comparisons += 1
            if key < node.key:
                if node.left is None:
                    node.left = _Node(key, value)
                    break
                node = node.left
            elif key > node.key:
                if node.right is None:
                    node.right = _Node(key, value)
                    break
                node = node.right
            else:
                node.value = value
                return
            depth += 1
        self._installed(depth + 1)

    def _installed(self, depth: int) -> None:
        self._size += 1
        self._total_insertions += 1
        self._max_depth = max(self._max_depth, depth)
        self._average_depth = self._total_comparisons / self._size

    def _locate(self, key: bytes) -> Tuple[Optional[_Node], Optional[_Node]]:
        parent: Optional[_Node] = None
        node = self._root
        while node is not None:
            self._total_comparisons += 1
            if key < node.key:
                parent, node = node, node.left
            elif key > node.key:
                parent, node = node, node.right
            else:
                return node, parent
        return None, parent

    def get(self, key: KeyLike) -> Optional[int]:
        node, _ = self._locate(coerce_key(key))
        return node.value if node is not None else None

    def delete(self, key: KeyLike) -> bool:
        node, parent = self._locate(coerce_key(key))
        if node is None:
            return False
        if node.left is not None and node.right is not None:
            succ_parent = node
            succ = node.right
            while succ.left is not None:
                succ_parent, succ = succ, succ.left
            node.key, node.value = succ.key, succ.value
            if succ_parent is node:
                succ_parent.right = succ.right
            else:
                succ_parent.left = succ.right
        else:
            child = node.left if node.left is not None else node.right
            if parent is None:
                self._root = child
            elif parent.left is node:
                parent.left = child
            else:
                parent.right = child
        self._size -= 1
        return True

    def keys_in_order(self) -> Iterator[bytes]:
        stack: List[_Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.key
            node = node.right

    def height(self) -> int:
        """Number of levels in the tree (0 when empty)."""

        if self._root is None:
            return 0
        best = 0
        stack: List[Tuple[_Node, int]] = [(self._root, 1)]
        while stack:
            node, level = stack.pop()
            best = max(best, level)
            if node.left is not None:
                stack.append((node.left, level + 1))
            if node.right is not None:
                stack.append((node.right, level + 1))
        return best

    def metrics(self) -> BSTMetrics:
        return BSTMetrics(
            total_insertions=self._total_insertions,
            total_comparisons=self._total_comparisons,
            max_depth=self._max_depth,
            average_depth=self._average_depth,
        )


__all__ = ["UnbalancedBST"]
