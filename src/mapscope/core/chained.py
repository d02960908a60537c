from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from mapscope.metrics.constants import CHAINED_BUCKET_COUNT
from mapscope.metrics.records import ChainedMetrics

from .base import AssocMap, KeyLike, check_value, coerce_key, hash64


@dataclass
class _Entry:
    key: bytes
    value: int


class ChainedHashMap(AssocMap):
    """Separate-chaining hash map over a fixed table of 256 buckets.

    Entries in a bucket keep the order in which their keys were first seen.
    Metrics describe insertion history: deletes leave them untouched.
    """

    name = "chained"

    __slots__ = (
        "_buckets",
        "_size",
        "_total_insertions",
        "_total_collisions",
        "_max_chain_length",
    )

    def __init__(self) -> None:
        self._buckets: List[List[_Entry]] = [[] for _ in range(CHAINED_BUCKET_COUNT)]
        self._size = 0
        self._total_insertions = 0
        self._total_collisions = 0
        self._max_chain_length = 0

    def __len__(self) -> int:
        return self._size

    @staticmethod
    def bucket_index(key: bytes) -> int:
        return hash64(key) % CHAINED_BUCKET_COUNT

    def load_factor(self) -> float:
        return self._size / CHAINED_BUCKET_COUNT

    def insert(self, key: KeyLike, value: int) -> None:
        key = coerce_key(key)
        value = check_value(value)
        bucket = self._buckets[self.bucket_index(key)]
        for entry in bucket:
            if entry.key == key:
                entry.value = value
                return
        collided = bool(bucket)
        bucket.append(_Entry(key, value))
        self._size += 1
        self._total_insertions += 1
        if collided:
            self._total_collisions += 1
        self._max_chain_length = max(len(b) for b in self._buckets)

    def get(self, key: KeyLike) -> Optional[int]:
        key = coerce_key(key)
        for entry in self._buckets[self.bucket_index(key)]:
            if entry.key == key:
                return entry.value
        return None

    def delete(self, key: KeyLike) -> bool:
        key = coerce_key(key)
        bucket = self._buckets[self.bucket_index(key)]
        for idx, entry in enumerate(bucket):
            if entry.key == key:
                del bucket[idx]
                self._size -= 1
                return True
        return False

    def items(self) -> Iterator[Tuple[bytes, int]]:
        for bucket in self._buckets:
            for entry in bucket:
                yield entry.key, entry.value

    def bucket_lengths(self) -> List[int]:
        return [len(bucket) for bucket in self._buckets]

    def bucket_keys(self, index: int) -> List[bytes]:
        return [entry.key for entry in self._buckets[index]]

    def metrics(self) -> ChainedMetrics:
        return ChainedMetrics(
            total_insertions=self._total_insertions,
            total_collisions=self._total_collisions,
            max_chain_length=self._max_chain_length,
            average_load_factor=self.load_factor(),
        )


__all__ = ["ChainedHashMap"]
