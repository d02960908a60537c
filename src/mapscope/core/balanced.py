"""Height-triggered self-balancing search tree with red/black decoration.

This is not a textbook red-black tree. Rotations are chosen by comparing
subtree heights on the return path of every insert (as an AVL tree would),
while node colours are maintained for display and counted as colour fixes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from mapscope.metrics.records import BalancedTreeMetrics

from .base import KeyLike, OrderedAssocMap, check_value, coerce_key


class Color(Enum):
    RED = "red"
    BLACK = "black"


@dataclass(slots=True)
class _Node:
    key: bytes
    value: int
    color: Color = Color.RED
    left: Optional["_Node"] = None
    right: Optional["_Node"] = None
    height: int = 1


@dataclass(slots=True)
class _Fixups:
    """Structural work performed during a single insert."""

    rotations: int = 0
    recolors: int = 0
    created: bool = False


def _h(node: Optional[_Node]) -> int:
    return node.height if node is not None else 0


def _is_red(node: Optional[_Node]) -> bool:
    return node is not None and node.color is Color.RED


def _refresh(node: _Node) -> None:
    node.height = 1 + max(_h(node.left), _h(node.right))


def _rotate_right(node: _Node) -> _Node:
    pivot = node.left
    assert pivot is not None
    node.left = pivot.right
    pivot.right = node
    _refresh(node)
    _refresh(pivot)
    return pivot


def _rotate_left(node: _Node) -> _Node:
    pivot = node.right
    assert pivot is not None
    node.right = pivot.left
    pivot.left = node
    _refresh(node)
    _refresh(pivot)
    return pivot


class BalancedSearchTree(OrderedAssocMap):
    """Search tree rebalanced by height difference, coloured red/black.

    A subtree whose children differ in height by more than one is rotated.
    The rotation is double when the heavy child's inner grandchild is taller
    than its outer one and single otherwise, so a heavy child with both
    grandchildren present can still take a double rotation. Colours follow
    the rotations for display and never drive them.
    """

    name = "balanced"

    def __init__(self) -> None:
        self._root: Optional[_Node] = None
        self._size = 0
        self._total_insertions = 0
        self._rebalance_count = 0
        self._rotation_count = 0
        self._color_fix_count = 0
        # Mean depth is recomputed lazily; rotations move whole subtrees.
        self._average_depth: Optional[float] = 0.0

    def __len__(self) -> int:
        return self._size

    @property
    def root_color(self) -> Optional[Color]:
        return self._root.color if self._root is not None else None

    def insert(self, key: KeyLike, value: int) -> None:
        key = coerce_key(key)
        value = check_value(value)
        work = _Fixups()
        self._root = self._insert(self._root, key, value, work)
        self._root.color = Color.BLACK
        self._total_insertions += 1
        if work.created:
            self._size += 1
        if work.rotations or work.recolors:
            self._rebalance_count += 1
        self._rotation_count += work.rotations
        self._color_fix_count += work.recolors
        self._average_depth = None

    def _insert(self, node: Optional[_Node], key: bytes, value: int, work: _Fixups) -> _Node:
        if node is None:
            work.created = True
            return _Node(key, value)
        if key < node.key:
            node.left = self._insert(node.left, key, value, work)
        elif key > node.key:
            node.right = self._insert(node.right, key, value, work)
        else:
            node.value = value
            return node
        _refresh(node)
        return self._rebalance(node, work)

    def _rebalance(self, node: _Node, work: _Fixups) -> _Node:
        left_h, right_h = _h(node.left), _h(node.right)
        if abs(left_h - right_h) > 1:
            if left_h > right_h:
                child = node.left
                assert child is not None
                if _h(child.left) < _h(child.right):
                    node.left = _rotate_left(child)
                    work.rotations += 1
                top = _rotate_right(node)
                work.rotations += 1
                top.color = Color.BLACK
                assert top.right is not None
                top.right.color = Color.RED
            else:
                child = node.right
                assert child is not None
                if _h(child.right) < _h(child.left):
                    node.right = _rotate_right(child)
                    work.rotations += 1
                top = _rotate_left(node)
                work.rotations += 1
                top.color = Color.BLACK
                assert top.left is not None
                top.left.color = Color.RED
            return top
        if _is_red(node.left) and _is_red(node.right):
            node.color = Color.RED
            assert node.left is not None and node.right is not None
            node.left.color = Color.BLACK
            node.right.color = Color.BLACK
            work.recolors += 1
        return node

    def get(self, key: KeyLike) -> Optional[int]:
        key = coerce_key(key)
        node = self._root
        while node is not None:
            if key < node.key:
                node = node.left
            elif key > node.key:
                node = node.right
            else:
                return node.value
        return None

    def delete(self, key: KeyLike) -> Optional[int]:
        key = coerce_key(key)
        self._root, removed = self._delete(self._root, key)
        if removed is None:
            return None
        if self._root is not None:
            self._root.color = Color.BLACK
        self._size -= 1
        self._average_depth = None
        return removed

    def _delete(self, node: Optional[_Node], key: bytes) -> Tuple[Optional[_Node], Optional[int]]:
        if node is None:
            return None, None
        if key < node.key:
            node.left, removed = self._delete(node.left, key)
        elif key > node.key:
            node.right, removed = self._delete(node.right, key)
        else:
            removed = node.value
            if node.left is None:
                return node.right, removed
            if node.right is None:
                return node.left, removed
            succ = node.right
            while succ.left is not None:
                succ = succ.left
            node.key, node.value = succ.key, succ.value
            node.right, _ = self._delete(node.right, succ.key)
        if removed is not None:
            _refresh(node)
        return node, removed

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
        return _h(self._root)

    def _mean_depth(self) -> float:
        if self._root is None:
            return 0.0
        total = 0
        stack: List[Tuple[_Node, int]] = [(self._root, 1)]
        while stack:
            node, depth = stack.pop()
            total += depth
            if node.left is not None:
                stack.append((node.left, depth + 1))
            if node.right is not None:
                stack.append((node.right, depth + 1))
        return total / self._size

    def balance_ratio(self) -> float:
        """Optimal height for the current size divided by the actual height."""

        height = self.height()
        if self._size == 0 or height == 0:
            return 0.0
        return math.ceil(math.log2(self._size + 1)) / height

    def metrics(self) -> BalancedTreeMetrics:
        if self._average_depth is None:
            self._average_depth = self._mean_depth()
        return BalancedTreeMetrics(
            total_insertions=self._total_insertions,
            tree_height=self.height(),
            rebalance_count=self._rebalance_count,
            rotation_count=self._rotation_count,
            color_fix_count=self._color_fix_count,
            average_depth=self._average_depth,
            balance_ratio=self.balance_ratio(),
        )


__all__ = ["BalancedSearchTree", "Color"]
