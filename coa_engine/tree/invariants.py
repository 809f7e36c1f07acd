"""Structural checks for header/leaf account trees."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from coa_engine.exceptions import InvalidTreeError
from coa_engine.models import AccountNode


@dataclass(frozen=True)
class TreeViolation:
    """One broken invariant, tied to the offending account."""

    kind: str
    account_id: str
    code: str
    detail: str

    def __str__(self) -> str:
        return f"{self.kind} at {self.code} ({self.account_id}): {self.detail}"


LEAF_WITH_CHILDREN = "leaf_with_children"
PARENT_NOT_HEADER = "parent_not_header"
PARENT_MISMATCH = "parent_mismatch"
ROOT_HAS_PARENT = "root_has_parent"
DUPLICATE_CODE = "duplicate_code"


def validate_tree(nodes: Sequence[AccountNode]) -> list[TreeViolation]:
    """Collect every invariant violation in the tree.

    The nested structure is authoritative: a child's ``parent_id`` is
    compared against the node it is nested under, and codes are only
    checked for uniqueness, never parsed.
    """
    violations: list[TreeViolation] = []
    seen_codes: dict[str, str] = {}

    stack: list[tuple[AccountNode, AccountNode | None]] = [(n, None) for n in reversed(nodes)]
    while stack:
        node, parent = stack.pop()

        if node.code in seen_codes:
            violations.append(
                TreeViolation(
                    DUPLICATE_CODE, node.id, node.code, f"code already used by {seen_codes[node.code]}"
                )
            )
        else:
            seen_codes[node.code] = node.id

        if not node.is_header and node.children:
            violations.append(
                TreeViolation(
                    LEAF_WITH_CHILDREN, node.id, node.code, f"{len(node.children)} children under a leaf"
                )
            )

        if parent is None:
            if node.parent_id is not None:
                violations.append(
                    TreeViolation(ROOT_HAS_PARENT, node.id, node.code, f"parent_id={node.parent_id}")
                )
        else:
            if not parent.is_header:
                violations.append(
                    TreeViolation(PARENT_NOT_HEADER, node.id, node.code, f"parent {parent.code} is a leaf")
                )
            if node.parent_id != parent.id:
                violations.append(
                    TreeViolation(
                        PARENT_MISMATCH,
                        node.id,
                        node.code,
                        f"parent_id={node.parent_id} but nested under {parent.id}",
                    )
                )

        stack.extend((child, node) for child in reversed(node.children))

    return violations


def check_tree(nodes: Sequence[AccountNode]) -> None:
    """Raise ``InvalidTreeError`` if the tree breaks any invariant."""
    violations = validate_tree(nodes)
    if violations:
        raise InvalidTreeError(violations)
