"""Workload drivers for comparing mapscope containers."""

from .compare import (
    ComparisonReport,
    ComparisonRow,
    build_workload,
    default_factories,
    run_comparison,
    run_from_config,
    run_structure,
)

__all__ = [
    "ComparisonReport",
    "ComparisonRow",
    "build_workload",
    "default_factories",
    "run_comparison",
    "run_from_config",
    "run_structure",
]
