"""Instrumented associative containers for side-by-side comparison."""

from . import analysis, contracts, core, metrics, workloads
from .contracts.error import BadInputError, CapacityExhaustedError
from .core import (
    BalancedSearchTree,
    ChainedHashMap,
    OpenAddressingTable,
    SkipList,
    UnbalancedBST,
)

__version__ = "0.1.0"

__all__ = [
    "BadInputError",
    "BalancedSearchTree",
    "CapacityExhaustedError",
    "ChainedHashMap",
    "OpenAddressingTable",
    "SkipList",
    "UnbalancedBST",
    "analysis",
    "contracts",
    "core",
    "metrics",
    "workloads",
]
