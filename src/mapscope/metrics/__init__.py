"""Metric records and schema identifiers."""

from .constants import (
    CHAINED_BUCKET_COUNT,
    PROBE_TRACE_SCHEMA,
    REPORT_SCHEMA,
    SCHEMA_VERSION,
    SKIPLIST_MAX_LEVEL,
    SKIPLIST_PROMOTION_P,
)
from .records import (
    BSTMetrics,
    BalancedTreeMetrics,
    ChainedMetrics,
    OpenAddressingMetrics,
    SkipListMetrics,
)

__all__ = [
    "BSTMetrics",
    "BalancedTreeMetrics",
    "ChainedMetrics",
    "OpenAddressingMetrics",
    "SkipListMetrics",
    "SCHEMA_VERSION",
    "REPORT_SCHEMA",
    "PROBE_TRACE_SCHEMA",
    "CHAINED_BUCKET_COUNT",
    "SKIPLIST_MAX_LEVEL",
    "SKIPLIST_PROMOTION_P",
]
