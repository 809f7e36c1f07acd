"""Algorithms over the chart-of-accounts tree."""

from coa_engine.tree.filtering import filter_tree
from coa_engine.tree.flattening import count_nodes, flatten_tree, iter_tree, max_depth
from coa_engine.tree.invariants import TreeViolation, check_tree, validate_tree
from coa_engine.tree.lookup import (
    ancestors_of,
    descendant_ids,
    find_by_code,
    find_node,
    header_accounts,
    parent_candidates,
)

__all__ = [
    "TreeViolation",
    "ancestors_of",
    "check_tree",
    "count_nodes",
    "descendant_ids",
    "filter_tree",
    "find_by_code",
    "find_node",
    "flatten_tree",
    "header_accounts",
    "iter_tree",
    "max_depth",
    "parent_candidates",
    "validate_tree",
]
