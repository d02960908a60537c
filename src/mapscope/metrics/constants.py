from __future__ import annotations

"""Shared constants for the mapscope metrics subsystem."""

SCHEMA_VERSION = "v1"

REPORT_SCHEMA = f"mapscope.report.{SCHEMA_VERSION}"
PROBE_TRACE_SCHEMA = f"mapscope.probe_trace.{SCHEMA_VERSION}"

CHAINED_BUCKET_COUNT = 256
SKIPLIST_MAX_LEVEL = 16
SKIPLIST_PROMOTION_P = 0.5

__all__ = [
    "SCHEMA_VERSION",
    "REPORT_SCHEMA",
    "PROBE_TRACE_SCHEMA",
    "CHAINED_BUCKET_COUNT",
    "SKIPLIST_MAX_LEVEL",
    "SKIPLIST_PROMOTION_P",
]
