"""Probabilistic skip list stored in an index-addressed node arena.

Forward pointers are integer indices into parallel arrays; slot 0 is the
head sentinel and ``NIL`` marks the end of a level. Freed slots are reused
by later inserts.
"""

from __future__ import annotations

import logging
import random
from typing import Iterator, List, Optional

from mapscope.metrics.constants import SKIPLIST_MAX_LEVEL, SKIPLIST_PROMOTION_P
from mapscope.metrics.records import SkipListMetrics

from .base import KeyLike, OrderedAssocMap, check_value, coerce_key

logger = logging.getLogger(__name__)

MAX_LEVEL = SKIPLIST_MAX_LEVEL
PROMOTION_P = SKIPLIST_PROMOTION_P

NIL = -1
_HEAD = 0


class SkipList(OrderedAssocMap):
    """Ordered map with geometric level distribution (p = 0.5, 16 levels)."""

    name = "skiplist"

    def __init__(self, *, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._keys: List[bytes] = [b""]
        self._values: List[int] = [0]
        self._levels: List[int] = [MAX_LEVEL]
        self._forward: List[List[int]] = [[NIL] * (MAX_LEVEL + 1)]
        self._free: List[int] = []
        self._level = 0
        self._size = 0
        self._level_sum = 0
        self._total_insertions = 0
        self._total_searches = 0
        self._search_comparisons = 0
        self._insertion_cost = 0

    def __len__(self) -> int:
        return self._size

    @property
    def level(self) -> int:
        return self._level

    def random_level(self) -> int:
        level = 0
        while level < MAX_LEVEL and self._rng.random() < PROMOTION_P:
            level += 1
        return level

    def _alloc(self, key: bytes, value: int, level: int) -> int:
        if self._free:
            idx = self._free.pop()
            self._keys[idx] = key
            self._values[idx] = value
            self._levels[idx] = level
            self._forward[idx] = [NIL] * (level + 1)
            return idx
        self._keys.append(key)
        self._values.append(value)
        self._levels.append(level)
        self._forward.append([NIL] * (level + 1))
        return len(self._keys) - 1

    def _release(self, idx: int) -> None:
        self._keys[idx] = b""
        self._forward[idx] = []
        self._free.append(idx)

    def _predecessors(self, key: bytes) -> List[int]:
        update = [_HEAD] * (MAX_LEVEL + 1)
        keys, forward = self._keys, self._forward
        cur = _HEAD
        for lv in range(self._level, -1, -1):
            nxt = forward[cur][lv]
            while nxt != NIL and keys[nxt] < key:
                cur = nxt
                nxt = forward[cur][lv]
            update[lv] = cur
        return update

    def search(self, key: KeyLike) -> Optional[int]:
        key = coerce_key(key)
        keys, forward = self._keys, self._forward
        comparisons = 0
        cur = _HEAD
        for lv in range(self._level, -1, -1):
            nxt = forward[cur][lv]
            while nxt != NIL:
                comparisons += 1
                if keys[nxt] < key:
                    cur = nxt
                    nxt = forward[cur][lv]
                else:
                    break
        self._total_searches += 1
        self._search_comparisons += comparisons
        nxt = forward[cur][0]
        if nxt != NIL and keys[nxt] == key:
            return self._values[nxt]
        return None

    get = search

    def insert(self, key: KeyLike, value: int) -> None:
        key = coerce_key(key)
        value = check_value(value)
        update = self._predecessors(key)
        self._total_insertions += 1
        nxt = self._forward[update[0]][0]
        if nxt != NIL and self._keys[nxt] == key:
            self._values[nxt] = value
            return

        new_level = self.random_level()
        if new_level > self._level:
            logger.debug("Skip list level raised %d -> %d", self._level, new_level)
            self._level = new_level
        node = self._alloc(key, value, new_level)
        node_forward = self._forward[node]
        for lv in range(new_level + 1):
            pred_forward = self._forward[update[lv]]
            node_forward[lv] = pred_forward[lv]
            pred_forward[lv] = node
        self._size += 1
        self._level_sum += new_level
        self._insertion_cost = new_level

    def delete(self, key: KeyLike) -> Optional[int]:
        key = coerce_key(key)
        update = self._predecessors(key)
        victim = self._forward[update[0]][0]
        if victim == NIL or self._keys[victim] != key:
            return None
        victim_forward = self._forward[victim]
        for lv in range(self._levels[victim] + 1):
            pred_forward = self._forward[update[lv]]
            if pred_forward[lv] == victim:
                pred_forward[lv] = victim_forward[lv]
        value = self._values[victim]
        self._level_sum -= self._levels[victim]
        self._size -= 1
        self._release(victim)
        head_forward = self._forward[_HEAD]
        while self._level > 0 and head_forward[self._level] == NIL:
            self._level -= 1
        return value

    def keys_at_level(self, level: int) -> List[bytes]:
        """Keys linked on ``level`` in list order."""

        if not 0 <= level <= MAX_LEVEL:
            return []
        out: List[bytes] = []
        cur = self._forward[_HEAD][level]
        while cur != NIL:
            out.append(self._keys[cur])
            cur = self._forward[cur][level]
        return out

    def keys_in_order(self) -> Iterator[bytes]:
        cur = self._forward[_HEAD][0]
        while cur != NIL:
            yield self._keys[cur]
            cur = self._forward[cur][0]

    def metrics(self) -> SkipListMetrics:
        return SkipListMetrics(
            total_insertions=self._total_insertions,
            total_searches=self._total_searches,
            search_comparisons=self._search_comparisons,
            average_level=self._level_sum / self._size if self._size else 0.0,
            max_level=self._level,
            insertion_cost=self._insertion_cost,
        )


__all__ = ["MAX_LEVEL", "NIL", "PROMOTION_P", "SkipList"]
