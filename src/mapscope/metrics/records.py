"""Per-container metric records.

Containers keep live counters on themselves and hand out a
frozen record from ``metrics()`` so callers never alias live counters.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


class _Record:
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]


@dataclass(frozen=True)
class ChainedMetrics(_Record):
    total_insertions: int = 0
    total_collisions: int = 0
    max_chain_length: int = 0
    average_load_factor: float = 0.0


@dataclass(frozen=True)
class OpenAddressingMetrics(_Record):
    total_insertions: int = 0
    total_probes: int = 0
    max_probe_length: int = 0
    load_factor: float = 0.0
    clustering_factor: float = 0.0
    tombstone_count: int = 0


@dataclass(frozen=True)
class BSTMetrics(_Record):
    total_insertions: int = 0
    total_comparisons: int = 0
    max_depth: int = 0
    average_depth: float = 0.0


@dataclass(frozen=True)
class BalancedTreeMetrics(_Record):
    total_insertions: int = 0
    tree_height: int = 0
    rebalance_count: int = 0
    rotation_count: int = 0
    color_fix_count: int = 0
    average_depth: float = 0.0
    balance_ratio: float = 0.0


@dataclass(frozen=True)
class SkipListMetrics(_Record):
    total_insertions: int = 0
    total_searches: int = 0
    search_comparisons: int = 0
    average_level: float = 0.0
    max_level: int = 0
    insertion_cost: int = 0


__all__ = [
    "BSTMetrics",
    "BalancedTreeMetrics",
    "ChainedMetrics",
    "OpenAddressingMetrics",
    "SkipListMetrics",
]
