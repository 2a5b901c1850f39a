"""Tests for classifying records by tree traversal."""

from __future__ import annotations

import pytest
from pytest_check import check

from lesiontree.exceptions import NullModelError
from lesiontree.records import EncodedRecord
from lesiontree.tree.models import InternalNode, Leaf
from lesiontree.tree.prediction import predict, predict_many


@pytest.fixture
def two_level_tree() -> InternalNode:
    """Split on sex, then on age within each branch.

    Returns:
        InternalNode: Root of a depth-2 tree with leaves labeled 0, 1, 1, 0 from left to right.
    """
    return InternalNode(
        feature=0,
        threshold=0.5,
        samples=4,
        left=InternalNode(
            feature=1,
            threshold=0.5,
            samples=2,
            left=Leaf(label=0, samples=1, confidence=1.0),
            right=Leaf(label=1, samples=1, confidence=1.0),
        ),
        right=InternalNode(
            feature=1,
            threshold=0.5,
            samples=2,
            left=Leaf(label=1, samples=1, confidence=1.0),
            right=Leaf(label=0, samples=1, confidence=1.0),
        ),
    )


class TestPredict:
    """Tests for `predict`: root-to-leaf traversal."""

    @pytest.mark.parametrize(
        ("sex", "age", "expected"),
        [(0.0, 0.2, 0), (0.0, 0.8, 1), (1.0, 0.2, 1), (1.0, 0.8, 0)],
    )
    def test_reaches_expected_leaf(self, two_level_tree: InternalNode, sex: float, age: float, expected: int) -> None:
        """Each feature vector should reach the leaf its path selects.

        Args:
            two_level_tree (InternalNode): Fixture tree.
            sex (float): Sex feature.
            age (float): Age feature.
            expected (int): Expected label.
        """
        assert predict(two_level_tree, (sex, age, 0.16, 0.1, 0.0)) == expected

    def test_value_equal_to_threshold_goes_right(self, two_level_tree: InternalNode) -> None:
        """A feature value equal to the threshold should take the right branch."""
        # Act / Assert
        with check:
            assert predict(two_level_tree, (0.0, 0.5, 0.16, 0.1, 0.0)) == 1
        with check:
            assert predict(two_level_tree, (0.5, 0.5, 0.16, 0.1, 0.0)) == 0

    def test_accepts_encoded_record(self, two_level_tree: InternalNode) -> None:
        """An EncodedRecord should be classified by its features, ignoring its label."""
        # Arrange
        record = EncodedRecord(features=(1.0, 0.2, 0.16, 0.1, 0.0), label=0)

        # Act / Assert
        assert predict(two_level_tree, record) == 1

    def test_single_leaf_predicts_its_label_for_anything(self) -> None:
        """A single-leaf tree should predict its label for every input."""
        # Arrange
        root = Leaf(label=1, samples=1, confidence=1.0)

        # Act / Assert
        for features in [(0.0, 0.0, 0.0, 0.0, 0.0), (1.0, 1.0, -0.01, -0.01, 0.0)]:
            with check:
                assert predict(root, features) == 1

    def test_missing_tree_raises_null_model_error(self) -> None:
        """Predicting without a tree should raise NullModelError."""
        with pytest.raises(NullModelError):
            predict(None, (0.0, 0.0, 0.0, 0.0, 0.0))


class TestPredictMany:
    """Tests for `predict_many`: batch classification."""

    def test_preserves_input_order(self, two_level_tree: InternalNode) -> None:
        """Predictions should line up with the input records."""
        # Arrange
        batch = [(1.0, 0.8, 0.0, 0.0, 0.0), (0.0, 0.8, 0.0, 0.0, 0.0), (0.0, 0.1, 0.0, 0.0, 0.0)]

        # Act / Assert
        assert predict_many(two_level_tree, batch) == [0, 1, 0]

    def test_missing_tree_raises_even_for_empty_input(self) -> None:
        """A missing tree should be reported even when there is nothing to classify."""
        with pytest.raises(NullModelError):
            predict_many(None, [])
