"""Decision tree induction by recursive impurity-reducing binary splits."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, NamedTuple

import numpy as np
from loguru import logger

from lesiontree.exceptions import EmptyDatasetError
from lesiontree.logging import STAGE_LEVEL
from lesiontree.records import EncodedRecord, N_FEATURES
from lesiontree.tree.models import InternalNode, Leaf, TreeNode, leaf_count, tree_depth

if TYPE_CHECKING:
    from lesiontree.config import SplitCriterion, TrainingConfig

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

_GAIN_TOLERANCE: Final[float] = 1e-12  # Gains closer than this are treated as ties.

_CRITERION_DESCRIPTIONS: Final[dict[str, str]] = {
    "entropy": "information gain",
    "gini": "Gini reduction",
}


class SplitCandidate(NamedTuple):
    """The best `(feature, threshold)` pair found for a subset.

    Attributes:
        feature (int): Feature index, 0 to 4.
        threshold (float): Records with a feature value below this go left.
        gain (float): Impurity reduction achieved by the split.
    """

    feature: int
    threshold: float
    gain: float


# ---------------------------------------------------------------------------
# Public interface -- Impurity measures
# ---------------------------------------------------------------------------


def binary_entropy(positives: np.ndarray | float, totals: np.ndarray | float) -> np.ndarray:
    """Return the binary entropy (in bits) of label counts.

    Args:
        positives (np.ndarray | float): Count of label-1 records per subset.
        totals (np.ndarray | float): Total records per subset; must be positive.

    Returns:
        np.ndarray: Entropy per subset, in [0, 1].

    Examples:
        >>> float(binary_entropy(2, 4))
        1.0
        >>> float(binary_entropy(0, 4))
        0.0
    """
    share = np.asarray(positives, dtype=np.float64) / np.asarray(totals, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        positive_term = np.where(share > 0.0, -share * np.log2(share), 0.0)
        negative_term = np.where(share < 1.0, -(1.0 - share) * np.log2(1.0 - share), 0.0)
    return positive_term + negative_term


def gini_impurity(positives: np.ndarray | float, totals: np.ndarray | float) -> np.ndarray:
    """Return the Gini impurity of label counts.

    Args:
        positives (np.ndarray | float): Count of label-1 records per subset.
        totals (np.ndarray | float): Total records per subset; must be positive.

    Returns:
        np.ndarray: Gini impurity per subset, in [0, 0.5].

    Examples:
        >>> float(gini_impurity(2, 4))
        0.5
    """
    share = np.asarray(positives, dtype=np.float64) / np.asarray(totals, dtype=np.float64)
    return 2.0 * share * (1.0 - share)


_IMPURITY_FUNCTIONS: Final[dict[str, Callable[[np.ndarray | float, np.ndarray | float], np.ndarray]]] = {
    "entropy": binary_entropy,
    "gini": gini_impurity,
}


# ---------------------------------------------------------------------------
# Public interface -- Split search
# ---------------------------------------------------------------------------


def find_best_split(
    feature_matrix: np.ndarray,
    labels: np.ndarray,
    *,
    criterion: SplitCriterion = "entropy",
) -> SplitCandidate | None:
    """Find the `(feature, threshold)` pair with the largest impurity reduction.

    Candidate thresholds are the midpoints between consecutive distinct values
    of each feature, so both partitions of every candidate are non-empty.
    Ties go to the lowest feature index, then the lowest threshold.

    Args:
        feature_matrix (np.ndarray): Matrix with shape `(n_records, n_features)`.
        labels (np.ndarray): Binary labels with shape `(n_records,)`.
        criterion (SplitCriterion): `"entropy"` or `"gini"`.

    Returns:
        SplitCandidate | None: The best split, or `None` when every feature
            is constant over the subset.

    Raises:
        ValueError: If `criterion` is not a known impurity measure.
    """
    return _search_split(feature_matrix, labels, _resolve_impurity(criterion))


# ---------------------------------------------------------------------------
# Public interface -- Tree induction
# ---------------------------------------------------------------------------


def build_tree(
    records: Sequence[EncodedRecord],
    *,
    min_leaf_size: int = 1,
    max_depth: int | None = None,
    criterion: SplitCriterion = "entropy",
    min_gain: float = 0.0,
) -> TreeNode:
    """Induce a binary decision tree from labeled training records.

    A subset becomes a leaf labeled with its majority label (ties go to 1)
    when it is pure, smaller than `min_leaf_size`, at `max_depth`, has no
    candidate threshold, or its best split gains less than `min_gain`.
    Otherwise it is split by `feature < threshold` and both partitions are
    grown recursively. Every recursive call receives a strictly smaller
    subset, so construction always terminates.

    Args:
        records (Sequence[EncodedRecord]): Training records.
        min_leaf_size (int): Subsets with fewer records become leaves.
        max_depth (int | None): Depth at which recursion stops; `None` for no cap.
        criterion (SplitCriterion): `"entropy"` or `"gini"`.
        min_gain (float): Minimum impurity reduction required to split.

    Returns:
        TreeNode: The root of the built tree.

    Raises:
        EmptyDatasetError: If `records` is empty.
        ValueError: If a stopping parameter or the criterion is invalid.
    """
    if not records:
        raise EmptyDatasetError(stage="training")
    _validate_stopping_rule(min_leaf_size=min_leaf_size, max_depth=max_depth, min_gain=min_gain)
    impurity = _resolve_impurity(criterion)

    logger.log(
        STAGE_LEVEL,
        f"Training decision tree using {_CRITERION_DESCRIPTIONS[criterion]}",
        train_size=len(records),
    )
    feature_matrix = np.array([record.features for record in records], dtype=np.float64).reshape(-1, N_FEATURES)
    labels = np.array([record.label for record in records], dtype=np.int64)

    stopping_rule = _StoppingRule(min_leaf_size=min_leaf_size, max_depth=max_depth, min_gain=min_gain)
    root = _grow(feature_matrix, labels, depth=0, stopping_rule=stopping_rule, impurity=impurity)
    logger.log(STAGE_LEVEL, "Decision tree trained", depth=tree_depth(root), leaves=leaf_count(root))
    return root


def build_tree_from_config(records: Sequence[EncodedRecord], config: TrainingConfig) -> TreeNode:
    """Build a tree using the stopping rule and criterion of a `TrainingConfig`."""
    return build_tree(
        records,
        min_leaf_size=config.min_leaf_size,
        max_depth=config.max_depth,
        criterion=config.criterion,
        min_gain=config.min_gain,
    )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _StoppingRule:
    """Parameters that turn a subset into a leaf."""

    min_leaf_size: int
    max_depth: int | None
    min_gain: float

    def should_stop(self, n_records: int, positives: int, depth: int) -> bool:
        """Return `True` if a subset must become a leaf before any split search."""
        is_pure = positives in {0, n_records}
        too_small = n_records < self.min_leaf_size
        too_deep = self.max_depth is not None and depth >= self.max_depth
        return is_pure or too_small or too_deep


def _grow(
    feature_matrix: np.ndarray,
    labels: np.ndarray,
    *,
    depth: int,
    stopping_rule: _StoppingRule,
    impurity: Callable[[np.ndarray | float, np.ndarray | float], np.ndarray],
) -> TreeNode:
    """Recursively grow the subtree for one subset.

    Args:
        feature_matrix (np.ndarray): Features of the subset.
        labels (np.ndarray): Labels of the subset; never empty.
        depth (int): Depth of the node being grown (root is 0).
        stopping_rule (_StoppingRule): Leaf conditions.
        impurity (Callable): Impurity measure used to rank splits.

    Returns:
        TreeNode: The grown subtree.
    """
    n_records = labels.size
    positives = int(labels.sum())
    if stopping_rule.should_stop(n_records, positives, depth):
        return _make_leaf(positives, n_records)

    split = _search_split(feature_matrix, labels, impurity)
    if split is None or split.gain < stopping_rule.min_gain - _GAIN_TOLERANCE:
        return _make_leaf(positives, n_records)

    goes_left = feature_matrix[:, split.feature] < split.threshold
    left_size = int(goes_left.sum())
    if left_size in {0, n_records}:
        return _make_leaf(positives, n_records)

    logger.debug(
        "Split selected",
        depth=depth,
        feature=split.feature,
        threshold=split.threshold,
        gain=split.gain,
        left_size=left_size,
        right_size=n_records - left_size,
    )
    shared_kwargs = {"depth": depth + 1, "stopping_rule": stopping_rule, "impurity": impurity}
    left = _grow(feature_matrix[goes_left], labels[goes_left], **shared_kwargs)
    right = _grow(feature_matrix[~goes_left], labels[~goes_left], **shared_kwargs)
    return InternalNode(
        feature=split.feature,
        threshold=split.threshold,
        samples=n_records,
        left=left,
        right=right,
    )


def _search_split(
    feature_matrix: np.ndarray,
    labels: np.ndarray,
    impurity: Callable[[np.ndarray | float, np.ndarray | float], np.ndarray],
) -> SplitCandidate | None:
    """Scan every feature for the best split, keeping the earliest of tied candidates."""
    n_records = labels.size
    parent_impurity = float(impurity(int(labels.sum()), n_records))
    best: SplitCandidate | None = None
    for feature_index in range(feature_matrix.shape[1]):
        candidate = _best_split_for_feature(
            feature_matrix[:, feature_index],
            labels,
            feature_index=feature_index,
            parent_impurity=parent_impurity,
            impurity=impurity,
        )
        if candidate is not None and (best is None or candidate.gain > best.gain + _GAIN_TOLERANCE):
            best = candidate
    return best


def _best_split_for_feature(
    column: np.ndarray,
    labels: np.ndarray,
    *,
    feature_index: int,
    parent_impurity: float,
    impurity: Callable[[np.ndarray | float, np.ndarray | float], np.ndarray],
) -> SplitCandidate | None:
    """Evaluate every midpoint threshold of one feature at once.

    Sorting the column and accumulating positive labels gives the left and
    right label counts of every candidate threshold in one pass.

    Args:
        column (np.ndarray): One feature's values over the subset.
        labels (np.ndarray): Labels of the subset.
        feature_index (int): Index of `column` in the feature vector.
        parent_impurity (float): Impurity of the unsplit subset.
        impurity (Callable): Impurity measure.

    Returns:
        SplitCandidate | None: The best threshold of this feature, or `None`
            when the feature is constant over the subset.
    """
    order = np.argsort(column, kind="stable")
    sorted_values = column[order]
    sorted_labels = labels[order]

    # Index i marks a boundary between sorted positions i and i + 1.
    boundaries = np.nonzero(np.diff(sorted_values) > 0.0)[0]
    if boundaries.size == 0:
        return None

    n_records = labels.size
    cumulative_positives = np.cumsum(sorted_labels)
    left_totals = boundaries + 1
    left_positives = cumulative_positives[boundaries]
    right_totals = n_records - left_totals
    right_positives = cumulative_positives[-1] - left_positives

    child_impurity = (
        left_totals * impurity(left_positives, left_totals) + right_totals * impurity(right_positives, right_totals)
    ) / n_records
    gains = parent_impurity - child_impurity

    # Thresholds ascend with the boundaries, so the first near-maximal gain has the lowest threshold.
    best_position = int(np.argmax(gains >= gains.max() - _GAIN_TOLERANCE))
    boundary = boundaries[best_position]
    threshold = float((sorted_values[boundary] + sorted_values[boundary + 1]) / 2.0)
    return SplitCandidate(feature=feature_index, threshold=threshold, gain=float(gains[best_position]))


def _make_leaf(positives: int, n_records: int) -> Leaf:
    """Build a leaf labeled with the majority label; ties go to label 1."""
    label = 1 if 2 * positives >= n_records else 0
    majority_count = positives if label == 1 else n_records - positives
    return Leaf(label=label, samples=n_records, confidence=round(majority_count / n_records, 4))


def _resolve_impurity(
    criterion: str,
) -> Callable[[np.ndarray | float, np.ndarray | float], np.ndarray]:
    """Return the impurity function for a criterion name.

    Raises:
        ValueError: If `criterion` is not `"entropy"` or `"gini"`.
    """
    try:
        return _IMPURITY_FUNCTIONS[criterion]
    except KeyError:
        raise ValueError(f"criterion must be one of {sorted(_IMPURITY_FUNCTIONS)}, got {criterion!r}") from None


def _validate_stopping_rule(*, min_leaf_size: int, max_depth: int | None, min_gain: float) -> None:
    """Raise `ValueError` if a stopping parameter is out of range."""
    if min_leaf_size < 1:
        raise ValueError(f"min_leaf_size must be at least 1, got {min_leaf_size}")
    if max_depth is not None and max_depth < 0:
        raise ValueError(f"max_depth must be non-negative or None, got {max_depth}")
    if min_gain < 0.0:
        raise ValueError(f"min_gain must be non-negative, got {min_gain}")
