"""Analysis helpers for mapscope containers."""

from .probe import format_trace_lines, trace_get, trace_insert

__all__ = ["format_trace_lines", "trace_get", "trace_insert"]
