from __future__ import annotations

import math
import random

import pytest

from mapscope.core import BalancedSearchTree, Color


def test_ascending_keys_stay_shallow() -> None:
    tree = BalancedSearchTree()
    for i in range(50):
        tree.insert(f"key{i:04d}", i)
    metrics = tree.metrics()
    assert metrics.tree_height < 15
    assert metrics.total_insertions == 50
    assert metrics.rotation_count > 0
    assert all(tree.get(f"key{i:04d}") == i for i in range(50))


def test_mixed_order_height_bound() -> None:
    rng = random.Random(1234)
    keys = [f"k{i}" for i in range(100)]
    rng.shuffle(keys)
    tree = BalancedSearchTree()
    for i, key in enumerate(keys):
        tree.insert(key, i)
    height = tree.metrics().tree_height
    assert height <= 15
    assert height <= 2 * math.ceil(math.log2(101)) + 1
    assert len(tree) == 100


def test_first_rotation_and_recolor_counts() -> None:
    tree = BalancedSearchTree()
    tree.insert(b"a", 1)
    tree.insert(b"b", 2)
    assert tree.metrics().rebalance_count == 0
    tree.insert(b"c", 3)
    metrics = tree.metrics()
    assert metrics.rotation_count == 1
    assert metrics.rebalance_count == 1
    assert metrics.tree_height == 2
    tree.insert(b"d", 4)
    metrics = tree.metrics()
    assert metrics.color_fix_count == 1
    assert metrics.rotation_count == 1
    assert metrics.rebalance_count == 2
    assert metrics.tree_height == 3
    assert tree.root_color is Color.BLACK


def test_double_rotation_counts_two() -> None:
    tree = BalancedSearchTree()
    for key in (b"c", b"a", b"b"):
        tree.insert(key, 0)
    metrics = tree.metrics()
    assert metrics.rotation_count == 2
    assert metrics.tree_height == 2
    assert list(tree.keys_in_order()) == [b"a", b"b", b"c"]


def test_root_black_after_every_operation() -> None:
    rng = random.Random(99)
    tree = BalancedSearchTree()
    keys = [f"n{i}".encode() for i in range(200)]
    for key in keys:
        tree.insert(key, 1)
        assert tree.root_color is Color.BLACK
    rng.shuffle(keys)
    for key in keys[:150]:
        assert tree.delete(key) == 1
        assert tree.root_color is Color.BLACK
    assert len(tree) == 50
    assert list(tree.keys_in_order()) == sorted(keys[150:])


def test_updates_count_insert_calls_but_not_size() -> None:
    tree = BalancedSearchTree()
    tree.insert(b"x", 1)
    tree.insert(b"x", 2)
    assert tree.metrics().total_insertions == 2
    assert len(tree) == 1
    assert tree.get(b"x") == 2


def test_delete_returns_value_and_refreshes_height() -> None:
    tree = BalancedSearchTree()
    for i in range(7):
        tree.insert(bytes([0x61 + i]), i)
    assert tree.metrics().tree_height == 3
    for key in (b"a", b"c", b"e", b"g"):
        assert tree.delete(key) == key[0] - 0x61
    assert tree.delete(b"a") is None
    assert tree.metrics().tree_height == 2
    assert list(tree.keys_in_order()) == [b"b", b"d", b"f"]


def test_balance_ratio_and_average_depth() -> None:
    tree = BalancedSearchTree()
    empty = tree.metrics()
    assert empty.balance_ratio == 0.0
    assert empty.average_depth == 0.0
    assert empty.tree_height == 0
    for i in range(7):
        tree.insert(bytes([0x61 + i]), i)
    metrics = tree.metrics()
    assert metrics.balance_ratio == pytest.approx(1.0)
    assert metrics.average_depth == pytest.approx((1 + 2 * 2 + 4 * 3) / 7)


def test_taller_inner_grandchild_triggers_double_rotation() -> None:
    tree = BalancedSearchTree()
    for key in (50, 30, 60, 20, 40):
        tree.insert(f"{key}", key)
    before = tree.metrics()
    assert before.rotation_count == 0
    tree.insert("45", 45)
    metrics = tree.metrics()
    assert metrics.rotation_count == 2
    assert metrics.rebalance_count == before.rebalance_count + 1
    assert metrics.tree_height == 3
    assert list(tree.keys_in_order()) == [b"20", b"30", b"40", b"45", b"50", b"60"]
    assert tree.root_color is Color.BLACK
