"""Probe-path tracing utilities for the hash containers.

Traces are read-only: they replay the container's lookup or insert walk
against its current table and report every slot visited.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from mapscope.contracts.error import BadInputError
from mapscope.core.base import KeyLike, check_value, coerce_key
from mapscope.core.chained import ChainedHashMap
from mapscope.core.open_addressing import _OAEntry, _TOMBSTONE, OpenAddressingTable
from mapscope.metrics.constants import PROBE_TRACE_SCHEMA

ProbeTrace = Dict[str, Any]


def _trace_header(backend: str, operation: str, key: bytes) -> ProbeTrace:
    return {
        "schema": PROBE_TRACE_SCHEMA,
        "backend": backend,
        "operation": operation,
        "key_repr": repr(key),
    }


def trace_open_addressing_get(table: OpenAddressingTable, key: KeyLike) -> ProbeTrace:
    key = coerce_key(key)
    cap = table.capacity
    start_idx = table.home_slot(key)
    idx = start_idx
    path: List[Dict[str, Any]] = []
    found = False
    terminal = "overflow"
    for step_no in range(cap):
        slot = table._table[idx]  # pylint: disable=protected-access
        step: Dict[str, Any] = {"step": step_no, "slot": idx}
        if slot is None:
            step["state"] = "empty"
            path.append(step)
            terminal = "empty"
            break
        if slot is _TOMBSTONE:
            step["state"] = "tombstone"
        elif isinstance(slot, _OAEntry):
            matches = slot.key == key
            step.update(
                {
                    "state": "occupied",
                    "key_repr": repr(slot.key),
                    "home_slot": table.home_slot(slot.key),
                    "matches": matches,
                }
            )
            if matches:
                step["value"] = slot.value
                path.append(step)
                terminal = "match"
                found = True
                break
        path.append(step)
        idx = (idx + 1) % cap
    trace = _trace_header("open_addressing", "get", key)
    trace.update(
        {
            "found": found,
            "terminal": terminal,
            "start_slot": start_idx,
            "capacity": cap,
            "path": path,
        }
    )
    return trace


def trace_open_addressing_insert(
    table: OpenAddressingTable, key: KeyLike, value: int
) -> ProbeTrace:
    key = coerce_key(key)
    value = check_value(value)
    cap = table.capacity
    start_idx = table.home_slot(key)
    idx = start_idx
    path: List[Dict[str, Any]] = []
    first_tombstone: Optional[int] = None
    terminal = "full"
    target: Optional[int] = None
    for step_no in range(cap):
        slot = table._table[idx]  # pylint: disable=protected-access
        step: Dict[str, Any] = {"step": step_no, "slot": idx}
        if slot is None:
            step.update({"state": "empty", "action": "stop"})
            path.append(step)
            target = idx
            terminal = "insert"
            break
        if slot is _TOMBSTONE:
            remembered = first_tombstone is None
            if remembered:
                first_tombstone = idx
            step.update({"state": "tombstone", "action": "remember" if remembered else "advance"})
            path.append(step)
        elif isinstance(slot, _OAEntry):
            matches = slot.key == key
            step.update(
                {
                    "state": "occupied",
                    "key_repr": repr(slot.key),
                    "matches": matches,
                    "action": "update" if matches else "advance",
                }
            )
            path.append(step)
            if matches:
                target = idx
                terminal = "update"
                break
        idx = (idx + 1) % cap
    if terminal != "update" and first_tombstone is not None:
        target = first_tombstone
        terminal = "reuse-tombstone"
    trace = _trace_header("open_addressing", "insert", key)
    trace.update(
        {
            "value": value,
            "terminal": terminal,
            "target_slot": target,
            "probe_length": max(len(path) - 1, 0),
            "start_slot": start_idx,
            "capacity": cap,
            "path": path,
        }
    )
    return trace


def trace_chained_get(table: ChainedHashMap, key: KeyLike) -> ProbeTrace:
    key = coerce_key(key)
    bucket = table.bucket_index(key)
    chain = table.bucket_keys(bucket)
    path: List[Dict[str, Any]] = []
    found = False
    for position, candidate in enumerate(chain):
        matches = candidate == key
        path.append({"step": position, "key_repr": repr(candidate), "matches": matches})
        if matches:
            found = True
            break
    trace = _trace_header("chained", "get", key)
    trace.update(
        {
            "found": found,
            "terminal": "match" if found else "empty",
            "bucket": bucket,
            "chain_length": len(chain),
            "path": path,
        }
    )
    return trace


def trace_chained_insert(table: ChainedHashMap, key: KeyLike, value: int) -> ProbeTrace:
    trace = trace_chained_get(table, key)
    trace["operation"] = "insert"
    trace["value"] = check_value(value)
    trace["terminal"] = "update" if trace["found"] else "insert"
    trace["collision"] = not trace["found"] and trace["chain_length"] > 0
    return trace


def trace_get(container: Any, key: KeyLike) -> ProbeTrace:
    if isinstance(container, OpenAddressingTable):
        return trace_open_addressing_get(container, key)
    if isinstance(container, ChainedHashMap):
        return trace_chained_get(container, key)
    raise BadInputError(
        f"probe tracing is only defined for hash containers, got {type(container).__name__}"
    )


def trace_insert(container: Any, key: KeyLike, value: int) -> ProbeTrace:
    if isinstance(container, OpenAddressingTable):
        return trace_open_addressing_insert(container, key, value)
    if isinstance(container, ChainedHashMap):
        return trace_chained_insert(container, key, value)
    raise BadInputError(
        f"probe tracing is only defined for hash containers, got {type(container).__name__}"
    )


def format_trace_lines(trace: ProbeTrace, *, seeds: Optional[Sequence[str]] = None) -> List[str]:
    """Render a probe trace as human-readable lines."""

    lines = [
        f"Probe trace ({trace.get('backend')}, {trace.get('operation')})",
        f"Key: {trace.get('key_repr')}",
    ]
    if "capacity" in trace:
        lines.append(f"Capacity: {trace['capacity']}  start slot: {trace.get('start_slot')}")
    if "bucket" in trace:
        lines.append(f"Bucket: {trace['bucket']}  chain length: {trace.get('chain_length')}")
    if seeds:
        lines.append("Seed entries: " + ", ".join(seeds))
    lines.append(f"Terminal: {trace.get('terminal')}")
    for step in trace.get("path", []):
        parts = [f"#{step.get('step')}"]
        if "slot" in step:
            parts.append(f"slot={step['slot']}")
        if "state" in step:
            parts.append(step["state"])
        if "key_repr" in step:
            parts.append(f"key={step['key_repr']}")
        if step.get("matches"):
            parts.append("MATCH")
        if "action" in step:
            parts.append(f"-> {step['action']}")
        lines.append("  " + " ".join(parts))
    return lines


__all__ = [
    "ProbeTrace",
    "format_trace_lines",
    "trace_chained_get",
    "trace_chained_insert",
    "trace_get",
    "trace_insert",
    "trace_open_addressing_get",
    "trace_open_addressing_insert",
]
