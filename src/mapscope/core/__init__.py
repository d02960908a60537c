from .balanced import BalancedSearchTree, Color
from .base import AssocMap, OrderedAssocMap, coerce_key, hash64
from .bst import UnbalancedBST
from .chained import ChainedHashMap
from .open_addressing import OpenAddressingTable
from .skiplist import SkipList

__all__ = [
    "AssocMap",
    "BalancedSearchTree",
    "ChainedHashMap",
    "Color",
    "OpenAddressingTable",
    "OrderedAssocMap",
    "SkipList",
    "UnbalancedBST",
    "coerce_key",
    "hash64",
]
