"""Held-out evaluation of a built tree."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger
from pydantic import BaseModel, Field, model_validator
from sklearn.metrics import accuracy_score, confusion_matrix

from lesiontree.exceptions import EmptyDatasetError, NullModelError
from lesiontree.logging import STAGE_LEVEL
from lesiontree.records import EncodedRecord
from lesiontree.tree.models import TreeNode
from lesiontree.tree.prediction import predict_many


class EvaluationResult(BaseModel):
    """Accuracy and confusion counts of a tree over a test subset.

    Attributes:
        accuracy (float): Fraction of correctly classified records, in [0, 1].
        correct (int): Number of correctly classified records.
        total (int): Number of evaluated records.
        true_positive (int): Malignant records predicted malignant.
        true_negative (int): Benign records predicted benign.
        false_positive (int): Benign records predicted malignant.
        false_negative (int): Malignant records predicted benign.

    Examples:
        >>> result = EvaluationResult(
        ...     accuracy=0.5,
        ...     correct=1,
        ...     total=2,
        ...     true_positive=0,
        ...     true_negative=1,
        ...     false_positive=0,
        ...     false_negative=1,
        ... )
        >>> result.accuracy_percent
        50.0
    """

    accuracy: float = Field(ge=0.0, le=1.0, description="Fraction of correctly classified records.")
    correct: int = Field(ge=0, description="Number of correctly classified records.")
    total: int = Field(ge=1, description="Number of evaluated records.")
    true_positive: int = Field(ge=0, description="Malignant records predicted malignant.")
    true_negative: int = Field(ge=0, description="Benign records predicted benign.")
    false_positive: int = Field(ge=0, description="Benign records predicted malignant.")
    false_negative: int = Field(ge=0, description="Malignant records predicted benign.")

    @model_validator(mode="after")
    def _validate_counts_are_consistent(self) -> EvaluationResult:
        """Validate that the confusion counts add up to `correct` and `total`.

        Returns:
            EvaluationResult: The validated model instance.

        Raises:
            ValueError: If the confusion counts disagree with `correct` or `total`.
        """
        if self.true_positive + self.true_negative != self.correct:
            raise ValueError("true_positive + true_negative must equal correct")
        if self.correct + self.false_positive + self.false_negative != self.total:
            raise ValueError("confusion counts must sum to total")
        return self

    @property
    def accuracy_percent(self) -> float:
        """Accuracy scaled to [0, 100]."""
        return self.accuracy * 100.0


def evaluate(root: TreeNode | None, records: Sequence[EncodedRecord]) -> EvaluationResult:
    """Classify every test record and compare against its true label.

    Args:
        root (TreeNode | None): Root of a built tree.
        records (Sequence[EncodedRecord]): Held-out test records.

    Returns:
        EvaluationResult: Accuracy and confusion counts.

    Raises:
        NullModelError: If `root` is `None`. Checked before the records.
        EmptyDatasetError: If `records` is empty.
    """
    if root is None:
        raise NullModelError("Cannot evaluate without a built decision tree")
    if not records:
        raise EmptyDatasetError(stage="evaluation")

    actual = [record.label for record in records]
    predicted = predict_many(root, records)
    (true_negative, false_positive), (false_negative, true_positive) = confusion_matrix(
        actual, predicted, labels=[0, 1]
    ).tolist()
    result = EvaluationResult(
        accuracy=float(accuracy_score(actual, predicted)),
        correct=true_positive + true_negative,
        total=len(records),
        true_positive=true_positive,
        true_negative=true_negative,
        false_positive=false_positive,
        false_negative=false_negative,
    )
    logger.log(STAGE_LEVEL, f"Model Accuracy: {result.accuracy_percent:.2f}%", correct=result.correct, total=result.total)
    return result
