"""Rule extraction: one human-readable rule per leaf of a built tree."""

from __future__ import annotations

from lesiontree.exceptions import NullModelError
from lesiontree.records import FEATURE_NAMES
from lesiontree.tree.models import ClassificationRule, InternalNode, Predicate, TreeNode


def extract_rules(root: TreeNode | None) -> list[ClassificationRule]:
    """Extract human-readable rules from a built tree.

    Walks the tree depth-first, left before right, building one
    `ClassificationRule` per leaf. Predicates carry the exact split
    thresholds, so `rule.matches(features)` holds for exactly the leaf that
    `predict` reaches. A single-leaf tree yields one rule with no
    predicates.

    Args:
        root (TreeNode | None): Root of a built tree.

    Returns:
        list[ClassificationRule]: One rule per leaf, in left-to-right leaf order.

    Raises:
        NullModelError: If `root` is `None`.
    """
    if root is None:
        raise NullModelError("Cannot extract rules without a built decision tree")
    rules: list[ClassificationRule] = []
    _walk_tree(root, path_predicates=[], rules=rules)
    return rules


def _walk_tree(
    node: TreeNode,
    *,
    path_predicates: list[Predicate],
    rules: list[ClassificationRule],
) -> None:
    """Recursively walk a tree node and accumulate leaf rules.

    Args:
        node (TreeNode): The current node.
        path_predicates (list[Predicate]): Accumulated predicates from the
            root to `node`.
        rules (list[ClassificationRule]): Accumulator list; leaf rules are
            appended in-place.
    """
    if not isinstance(node, InternalNode):
        rules.append(
            ClassificationRule(
                predicates=path_predicates,
                prediction=node.label,
                samples=node.samples,
                confidence=node.confidence,
            )
        )
        return

    left_predicate, right_predicate = _build_split_predicates(node)
    _walk_tree(node.left, path_predicates=[*path_predicates, left_predicate], rules=rules)
    _walk_tree(node.right, path_predicates=[*path_predicates, right_predicate], rules=rules)


def _build_split_predicates(node: InternalNode) -> tuple[Predicate, Predicate]:
    """Build the `(left, right)` branch predicates of an internal node."""
    feature_name = FEATURE_NAMES[node.feature]
    left_predicate = Predicate(variable=feature_name, operator="<", value=node.threshold)
    right_predicate = Predicate(variable=feature_name, operator=">=", value=node.threshold)
    return left_predicate, right_predicate
