"""Run one workload against every container and collect comparable metrics."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from mapscope.config import AppConfig, load_app_config
from mapscope.contracts.error import BadInputError, EnvelopeError, ErrorEnvelope, envelope_for
from mapscope.contracts.schema import validate_report
from mapscope.core import (
    AssocMap,
    BalancedSearchTree,
    ChainedHashMap,
    OpenAddressingTable,
    SkipList,
    UnbalancedBST,
)
from mapscope.log import configure_logging_from
from mapscope.metrics.constants import REPORT_SCHEMA

logger = logging.getLogger(__name__)

Factory = Callable[[], AssocMap]

STRUCTURE_ORDER: tuple[str, ...] = ("chained", "open_addressing", "bst", "balanced", "skiplist")


def default_factories(config: AppConfig) -> dict[str, Factory]:
    capacity = config.open_addressing.capacity
    seed = config.workload.seed
    return {
        "chained": ChainedHashMap,
        "open_addressing": lambda: OpenAddressingTable(capacity),
        "bst": UnbalancedBST,
        "balanced": BalancedSearchTree,
        "skiplist": lambda: SkipList(rng=random.Random(seed) if seed is not None else None),
    }


@dataclass(frozen=True)
class Workload:
    """Identical operation plan replayed against every structure."""

    size: int
    inserts: tuple[bytes, ...]
    misses: tuple[bytes, ...]
    deletes: tuple[bytes, ...]


def build_workload(size: int, config: AppConfig, rng: random.Random) -> Workload:
    policy = config.workload
    width = len(str(size - 1))
    keys = [f"{policy.key_prefix}{i:0{width}d}".encode("utf-8") for i in range(size)]
    if policy.shuffle:
        rng.shuffle(keys)
    misses = tuple(f"~{policy.key_prefix}-miss-{i}".encode("utf-8") for i in range(policy.lookup_misses))
    delete_count = int(size * policy.delete_fraction)
    deletes = tuple(rng.sample(keys, delete_count)) if delete_count else ()
    return Workload(size=size, inserts=tuple(keys), misses=misses, deletes=deletes)


@dataclass
class ComparisonRow:
    structure: str
    size: int
    length: int = 0
    timings_ms: dict[str, float] = field(
        default_factory=lambda: {"insert": 0.0, "lookup": 0.0, "delete": 0.0}
    )
    hits: int = 0
    misses: int = 0
    deleted: int = 0
    metrics: dict[str, float] = field(default_factory=dict)
    error: ErrorEnvelope | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "structure": self.structure,
            "size": self.size,
            "ok": self.ok,
            "len": self.length,
            "timings_ms": dict(self.timings_ms),
            "hits": self.hits,
            "misses": self.misses,
            "deleted": self.deleted,
            "metrics": dict(self.metrics),
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass
class ComparisonReport:
    config: AppConfig
    rows: list[ComparisonRow] = field(default_factory=list)

    def rows_for(self, structure: str) -> list[ComparisonRow]:
        return [row for row in self.rows if row.structure == structure]

    def to_dict(self) -> dict[str, Any]:
        policy = self.config.workload
        return {
            "schema": REPORT_SCHEMA,
            "config": {
                "sizes": list(policy.sizes),
                "shuffle": policy.shuffle,
                "seed": policy.seed,
                "delete_fraction": policy.delete_fraction,
                "lookup_misses": policy.lookup_misses,
                "open_addressing_capacity": self.config.open_addressing.capacity,
            },
            "rows": [row.to_dict() for row in self.rows],
        }

    def render_markdown(self) -> str:
        lines = [
            "| Structure | Size | Insert (ms) | Lookup (ms) | Delete (ms) | Key metric |",
            "|---|---:|---:|---:|---:|---|",
        ]
        for row in self.rows:
            if row.error is not None:
                lines.append(
                    f"| {row.structure} | {row.size} | - | - | - | {row.error.error}: {row.error.detail} |"
                )
                continue
            t = row.timings_ms
            lines.append(
                f"| {row.structure} | {row.size} | {t['insert']:.2f} | {t['lookup']:.2f} "
                f"| {t['delete']:.2f} | {_headline(row)} |"
            )
        return "\n".join(lines)


def _headline(row: ComparisonRow) -> str:
    m = row.metrics
    if row.structure == "chained":
        return f"max chain {int(m.get('max_chain_length', 0))}"
    if row.structure == "open_addressing":
        return f"max probe {int(m.get('max_probe_length', 0))}, clustering {m.get('clustering_factor', 0.0):.3f}"
    if row.structure == "bst":
        return f"max depth {int(m.get('max_depth', 0))}"
    if row.structure == "balanced":
        return f"height {int(m.get('tree_height', 0))}, rotations {int(m.get('rotation_count', 0))}"
    return f"avg level {m.get('average_level', 0.0):.2f}"


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def _snapshot(container: AssocMap) -> dict[str, float]:
    return {name: float(value) for name, value in container.metrics().to_dict().items()}


def run_structure(structure: str, factory: Factory, workload: Workload) -> ComparisonRow:
    row = ComparisonRow(structure=structure, size=workload.size)
    container = factory()
    try:
        start = time.perf_counter()
        for value, key in enumerate(workload.inserts):
            container.insert(key, value)
        row.timings_ms["insert"] = _elapsed_ms(start)

        start = time.perf_counter()
        for key in workload.inserts:
            if container.get(key) is not None:
                row.hits += 1
        for key in workload.misses:
            if container.get(key) is None:
                row.misses += 1
        row.timings_ms["lookup"] = _elapsed_ms(start)

        start = time.perf_counter()
        for key in workload.deletes:
            removed = container.delete(key)
            if removed is not None and removed is not False:
                row.deleted += 1
        row.timings_ms["delete"] = _elapsed_ms(start)
    except EnvelopeError as exc:
        logger.warning("%s aborted at size=%d: %s", structure, workload.size, exc)
        row.error = envelope_for(exc)
    row.length = len(container)
    row.metrics = _snapshot(container)
    return row


def run_comparison(
    config: AppConfig | None = None,
    *,
    factories: dict[str, Factory] | None = None,
    structures: Iterable[str] | None = None,
    validate: bool = True,
) -> ComparisonReport:
    """Replay the configured workload on every structure for every size."""

    config = config or AppConfig()
    config.validate()
    rng = random.Random(config.workload.seed)
    factories = factories or default_factories(config)
    selected: Sequence[str] = tuple(structures) if structures is not None else STRUCTURE_ORDER
    missing = [name for name in selected if name not in factories]
    if missing:
        raise BadInputError(f"No factory registered for structures: {missing}")
    report = ComparisonReport(config=config)
    for size in config.workload.sizes:
        workload = build_workload(size, config, rng)
        logger.info("Comparing %d structures at size=%d", len(selected), size)
        for structure in selected:
            row = run_structure(structure, factories[structure], workload)
            logger.info(
                "%s size=%d insert=%.2fms lookup=%.2fms ok=%s",
                structure,
                size,
                row.timings_ms["insert"],
                row.timings_ms["lookup"],
                row.ok,
            )
            report.rows.append(row)
    if validate:
        validate_report(report.to_dict())
    return report


def run_from_config(
    path: str | None = None, *, structures: Iterable[str] | None = None
) -> ComparisonReport:
    """Load config (TOML plus env overrides), set up logging, run the comparison."""

    config = load_app_config(path)
    configure_logging_from(config.logging)
    return run_comparison(config, structures=structures)


__all__ = [
    "ComparisonReport",
    "ComparisonRow",
    "STRUCTURE_ORDER",
    "Workload",
    "build_workload",
    "default_factories",
    "run_comparison",
    "run_from_config",
    "run_structure",
]
