from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union, cast

from mapscope.contracts.error import BadInputError, CapacityExhaustedError
from mapscope.metrics.records import OpenAddressingMetrics

from .base import AssocMap, KeyLike, check_value, coerce_key, hash64

logger = logging.getLogger(__name__)


class _Tombstone:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<tombstone>"


_TOMBSTONE = _Tombstone()


@dataclass
class _OAEntry:
    key: bytes
    value: int


_Slot = Union[None, _Tombstone, _OAEntry]


class OpenAddressingTable(AssocMap):
    """Fixed-capacity open-addressing table with linear probing.

    Deleted entries become tombstones which searches walk through. Insert
    remembers the first tombstone on its probe path and installs a new key
    there once it has confirmed no live copy exists further along.
    """

    name = "open_addressing"

    __slots__ = (
        "_table",
        "_cap",
        "_size",
        "_total_insertions",
        "_total_probes",
        "_max_probe_length",
        "_tombstone_count",
        "_longest_run",
    )

    def __init__(self, capacity: int) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise BadInputError(f"capacity must be a positive int, got {capacity!r}")
        self._cap = capacity
        self._table: List[_Slot] = [None] * capacity
        self._size = 0
        self._total_insertions = 0
        self._total_probes = 0
        self._max_probe_length = 0
        self._tombstone_count = 0
        self._longest_run = 0

    def __len__(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._cap

    def home_slot(self, key: bytes) -> int:
        return hash64(key) % self._cap

    def load_factor(self) -> float:
        return self._size / self._cap

    def clustering_factor(self) -> float:
        return self._longest_run / self._cap

    def _occupy(self, idx: int) -> None:
        # Slots never return to Empty, so runs only merge and the longest run is monotonic.
        left = idx - 1
        while left >= 0 and self._table[left] is not None:
            left -= 1
        right = idx + 1
        while right < self._cap and self._table[right] is not None:
            right += 1
        self._longest_run = max(self._longest_run, right - left - 1)

    def insert(self, key: KeyLike, value: int) -> None:
        key = coerce_key(key)
        value = check_value(value)
        idx = self.home_slot(key)
        first_tombstone: Optional[int] = None
        target: Optional[int] = None
        probes = 0
        for probes in range(self._cap):
            slot = self._table[idx]
            if slot is None:
                target = idx
                break
            if slot is _TOMBSTONE:
                if first_tombstone is None:
                    first_tombstone = idx
            elif isinstance(slot, _OAEntry) and slot.key == key:
                slot.value = value
                self._record_insert_probes(probes)
                return
            idx = (idx + 1) % self._cap

        if first_tombstone is not None:
            logger.debug("Reusing tombstone at slot %d for %r", first_tombstone, key)
            self._table[first_tombstone] = _OAEntry(key, value)
        elif target is not None:
            self._table[target] = _OAEntry(key, value)
            self._occupy(target)
        else:
            logger.error("Open-addressing table full (capacity=%d)", self._cap)
            raise CapacityExhaustedError(
                f"no free slot for {key!r}: all {self._cap} slots hold live entries",
                hint="construct the table with a larger capacity",
            )
        self._record_insert_probes(probes)
        self._size += 1

    def _record_insert_probes(self, probes: int) -> None:
        self._total_insertions += 1
        self._total_probes += probes
        if probes > self._max_probe_length:
            self._max_probe_length = probes

    def _find(self, key: bytes) -> Tuple[Optional[int], int]:
        idx = self.home_slot(key)
        for probes in range(self._cap):
            slot = self._table[idx]
            if slot is None:
                return None, probes
            if isinstance(slot, _OAEntry) and slot.key == key:
                return idx, probes
            idx = (idx + 1) % self._cap
        return None, self._cap - 1

    def get(self, key: KeyLike) -> Optional[int]:
        key = coerce_key(key)
        idx, probes = self._find(key)
        self._total_probes += probes
        if idx is None:
            return None
        slot = cast(_OAEntry, self._table[idx])
        return slot.value

    def delete(self, key: KeyLike) -> Optional[int]:
        key = coerce_key(key)
        idx, _ = self._find(key)
        if idx is None:
            return None
        slot = cast(_OAEntry, self._table[idx])
        self._table[idx] = _TOMBSTONE
        self._size -= 1
        self._tombstone_count += 1
        return slot.value

    def slot_states(self) -> List[str]:
        """Return ``empty``/``tombstone``/``occupied`` for every slot."""

        states: List[str] = []
        for slot in self._table:
            if slot is None:
                states.append("empty")
            elif slot is _TOMBSTONE:
                states.append("tombstone")
            else:
                states.append("occupied")
        return states

    def items(self) -> Iterator[Tuple[bytes, int]]:
        for slot in self._table:
            if isinstance(slot, _OAEntry):
                yield slot.key, slot.value

    def metrics(self) -> OpenAddressingMetrics:
        return OpenAddressingMetrics(
            total_insertions=self._total_insertions,
            total_probes=self._total_probes,
            max_probe_length=self._max_probe_length,
            load_factor=self.load_factor(),
            clustering_factor=self.clustering_factor(),
            tombstone_count=self._tombstone_count,
        )


__all__ = ["OpenAddressingTable"]
