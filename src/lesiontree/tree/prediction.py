"""Tree traversal for classifying encoded records."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from lesiontree.exceptions import NullModelError
from lesiontree.records import EncodedRecord, Label
from lesiontree.tree.models import InternalNode, TreeNode


def predict(root: TreeNode | None, record: EncodedRecord | Sequence[float]) -> Label:
    """Classify one record by walking the tree from the root to a leaf.

    At each internal node the walk goes left when
    `features[node.feature] < node.threshold` and right otherwise.

    Args:
        root (TreeNode | None): Root of a built tree.
        record (EncodedRecord | Sequence[float]): An encoded record or a bare
            feature vector in `FEATURE_NAMES` order.

    Returns:
        Label: The label of the leaf reached.

    Raises:
        NullModelError: If `root` is `None`.

    Examples:
        >>> from lesiontree.tree.models import Leaf
        >>> predict(Leaf(label=1, samples=1, confidence=1.0), (0.0, 0.3, 0.16, 0.1, 1.0))
        1
    """
    if root is None:
        raise NullModelError("Cannot predict without a built decision tree")
    features = record.features if isinstance(record, EncodedRecord) else record
    node = root
    while isinstance(node, InternalNode):
        node = node.left if features[node.feature] < node.threshold else node.right
    return node.label


def predict_many(root: TreeNode | None, records: Iterable[EncodedRecord | Sequence[float]]) -> list[Label]:
    """Classify several records, preserving their order.

    Raises:
        NullModelError: If `root` is `None`, even when `records` is empty.
    """
    if root is None:
        raise NullModelError("Cannot predict without a built decision tree")
    return [predict(root, record) for record in records]
