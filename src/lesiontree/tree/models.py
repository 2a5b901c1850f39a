"""Pydantic tree node models, rule models, and predicate logic for the decision tree."""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from lesiontree.records import FEATURE_NAMES, N_FEATURES, Label

# ---------------------------------------------------------------------------
# Public type aliases
# ---------------------------------------------------------------------------

type PredicateOp = Literal["<", ">="]

THRESHOLD_DECIMAL_PLACES: int = 4  # Decimal places shown when rendering predicate thresholds.

# ---------------------------------------------------------------------------
# Public models -- Tree nodes
# ---------------------------------------------------------------------------


class Leaf(BaseModel):
    """A terminal tree node holding a fixed predicted label.

    Attributes:
        kind (Literal["leaf"]): Discriminator field; always `"leaf"`.
        label (Label): Predicted label for every record reaching this leaf.
        samples (int): Number of training records that reached this leaf.
        confidence (float): Fraction of those records carrying `label`.

    Examples:
        >>> Leaf(label=1, samples=4, confidence=0.75).label
        1
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf"] = Field(default="leaf", description='Discriminator field. Always "leaf".')
    label: Label = Field(description="Predicted label: 0 = benign, 1 = malignant.")
    samples: int = Field(ge=1, description="Number of training records that reached this leaf.")
    confidence: float = Field(
        ge=0.0,
        le=1.0,
        description="Fraction of the training records at this leaf that carry the predicted label.",
    )


class InternalNode(BaseModel):
    """A tree node holding a splitting rule and exactly two children.

    Records with `features[feature] < threshold` descend to `left`; all
    others descend to `right`.

    Attributes:
        kind (Literal["internal"]): Discriminator field; always `"internal"`.
        feature (int): Index into the encoded feature vector, 0 to 4.
        threshold (float): Split threshold.
        samples (int): Number of training records that reached this node.
        left (TreeNode): Subtree for records below the threshold.
        right (TreeNode): Subtree for records at or above the threshold.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["internal"] = Field(default="internal", description='Discriminator field. Always "internal".')
    feature: int = Field(ge=0, lt=N_FEATURES, description="Index of the feature the node splits on.")
    threshold: float = Field(description="Records with a feature value below this go left.")
    samples: int = Field(ge=2, description="Number of training records that reached this node.")
    left: Leaf | InternalNode = Field(
        discriminator="kind",
        description="Subtree for records with feature value < threshold.",
    )
    right: Leaf | InternalNode = Field(
        discriminator="kind",
        description="Subtree for records with feature value >= threshold.",
    )

    @property
    def feature_name(self) -> str:
        """Name of the feature this node splits on."""
        return FEATURE_NAMES[self.feature]


InternalNode.model_rebuild()

type TreeNode = Leaf | InternalNode

# ---------------------------------------------------------------------------
# Public models -- Rules
# ---------------------------------------------------------------------------


class Predicate(BaseModel):
    """A single threshold condition on one encoded feature.

    Represents a comparison such as `age < 0.55`. Each rule holds the ordered
    predicates describing the path from the tree root to a leaf.

    Attributes:
        variable (str): Feature name the condition applies to, e.g. `"age"`.
        operator (PredicateOp): `"<"` for a left branch, `">="` for a right branch.
        value (float): Threshold, kept at full precision so `eval` agrees
            with tree traversal. Only `str()` rounds it.

    Examples:
        >>> p = Predicate(variable="age", operator="<", value=0.55)
        >>> str(p)
        'age < 0.55'
        >>> p.eval(0.5)
        True
    """

    variable: str = Field(description="Feature name the condition applies to, e.g. 'age'.")
    operator: PredicateOp = Field(description="Comparison operator: '<' or '>='.")
    value: float = Field(description="Threshold the feature value is compared against.")

    def __str__(self) -> str:
        """Return the predicate as `"<variable> <operator> <value>"` with the value rounded for display."""
        return f"{self.variable} {self.operator} {round(self.value, THRESHOLD_DECIMAL_PLACES)}"

    def eval(self, x: float) -> bool:
        """Evaluate this predicate against a feature value.

        Args:
            x (float): The feature value to test.

        Returns:
            bool: `True` if the predicate holds for `x`, `False` otherwise.
        """
        return _SCALAR_OPS[self.operator](x, self.value)


class ClassificationRule(BaseModel):
    """A decision rule extracted from one leaf of a built tree.

    Attributes:
        predicates (list[Predicate]): Predicates along the path from root to
            this leaf. An empty list means the tree is a single leaf.
        prediction (Label): Predicted label at this leaf.
        samples (int): Number of training records that reached this leaf.
        confidence (float): Fraction of those records carrying the prediction.

    Examples:
        >>> rule = ClassificationRule(
        ...     predicates=[Predicate(variable="diagnosis", operator=">=", value=0.095)],
        ...     prediction=1,
        ...     samples=12,
        ...     confidence=1.0,
        ... )
        >>> rule.matches((0.0, 0.4, 0.16, 0.1, 1.0))
        True
    """

    predicates: list[Predicate] = Field(
        description=(
            "Predicates along the path from root to this leaf. "
            "Empty list indicates a single-leaf tree with no splits."
        ),
    )
    prediction: Label = Field(description="Predicted label for records reaching this leaf.")
    samples: int = Field(ge=1, description="Number of training records that reached this leaf.")
    confidence: float = Field(
        ge=0.0,
        le=1.0,
        description="Fraction of the training records at this leaf that carry the predicted label.",
    )

    def __str__(self) -> str:
        """Return the rule as `"IF <p1> AND <p2> THEN <prediction>"`."""
        condition = " AND ".join(str(p) for p in self.predicates) or "always"
        return f"IF {condition} THEN {self.prediction} (samples={self.samples}, confidence={self.confidence})"

    def matches(self, features: tuple[float, ...]) -> bool:
        """Return `True` if a feature vector satisfies every predicate of this rule."""
        return all(p.eval(features[FEATURE_NAMES.index(p.variable)]) for p in self.predicates)


# ---------------------------------------------------------------------------
# Private helpers -- Predicate operator evaluation
# ---------------------------------------------------------------------------

_SCALAR_OPS: dict[str, Callable[[float, float], bool]] = {
    "<": operator.lt,
    ">=": operator.ge,
}


# ---------------------------------------------------------------------------
# Public interface -- Tree inspection
# ---------------------------------------------------------------------------


def tree_depth(root: TreeNode) -> int:
    """Return the number of edges on the longest root-to-leaf path.

    Examples:
        >>> tree_depth(Leaf(label=0, samples=3, confidence=1.0))
        0
    """
    deepest = 0
    stack: list[tuple[TreeNode, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, InternalNode):
            stack.extend(((node.left, depth + 1), (node.right, depth + 1)))
        else:
            deepest = max(deepest, depth)
    return deepest


def leaf_count(root: TreeNode) -> int:
    """Return the number of leaves in a tree."""
    count = 0
    stack: list[TreeNode] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, InternalNode):
            stack.extend((node.left, node.right))
        else:
            count += 1
    return count
