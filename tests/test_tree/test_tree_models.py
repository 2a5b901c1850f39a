"""Tests for the tree node models, rule models, and tree inspection helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError
from pytest_check import check

from lesiontree.tree.models import (
    ClassificationRule,
    InternalNode,
    Leaf,
    Predicate,
    leaf_count,
    tree_depth,
)


def _stump() -> InternalNode:
    """A single split on age with two pure leaves."""
    return InternalNode(
        feature=1,
        threshold=0.45,
        samples=4,
        left=Leaf(label=0, samples=2, confidence=1.0),
        right=Leaf(label=1, samples=2, confidence=1.0),
    )


class TestLeaf:
    """Tests for the Leaf model."""

    def test_kind_defaults_to_leaf(self) -> None:
        """A leaf should carry the "leaf" discriminator."""
        assert Leaf(label=1, samples=3, confidence=1.0).kind == "leaf"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"label": 2, "samples": 1, "confidence": 1.0},
            {"label": 0, "samples": 0, "confidence": 1.0},
            {"label": 0, "samples": 1, "confidence": 1.5},
        ],
    )
    def test_invalid_fields_raise_validation_error(self, kwargs: dict[str, object]) -> None:
        """A non-binary label, an empty leaf, or an out-of-range confidence should be rejected.

        Args:
            kwargs (dict[str, object]): Invalid constructor arguments.
        """
        with pytest.raises(ValidationError):
            Leaf(**kwargs)  # type: ignore[arg-type]


class TestInternalNode:
    """Tests for the InternalNode model: validation and JSON round trip."""

    def test_feature_name_resolves_index(self) -> None:
        """`feature_name` should map the feature index to its name."""
        assert _stump().feature_name == "age"

    @pytest.mark.parametrize("feature", [-1, 5])
    def test_feature_index_out_of_range_raises(self, feature: int) -> None:
        """A feature index outside 0..4 should be rejected.

        Args:
            feature (int): Invalid feature index.
        """
        with pytest.raises(ValidationError):
            InternalNode(
                feature=feature,
                threshold=0.5,
                samples=2,
                left=Leaf(label=0, samples=1, confidence=1.0),
                right=Leaf(label=1, samples=1, confidence=1.0),
            )

    def test_nested_tree_survives_json_round_trip(self) -> None:
        """A nested tree should deserialize to an equal tree via the kind discriminator."""
        # Arrange
        root = InternalNode(
            feature=0,
            threshold=0.5,
            samples=6,
            left=_stump(),
            right=Leaf(label=1, samples=2, confidence=1.0),
        )

        # Act
        restored = InternalNode.model_validate_json(root.model_dump_json())

        # Assert
        with check:
            assert restored == root
        with check:
            assert isinstance(restored.left, InternalNode)

    def test_is_frozen(self) -> None:
        """Assigning to a node field should fail."""
        # Arrange
        node = _stump()

        # Act / Assert
        with pytest.raises(ValidationError):
            node.threshold = 0.9  # type: ignore[misc]


class TestTreeInspection:
    """Tests for `tree_depth` and `leaf_count`."""

    def test_single_leaf_tree(self) -> None:
        """A single-leaf tree should have depth 0 and one leaf."""
        # Arrange
        root = Leaf(label=0, samples=5, confidence=0.8)

        # Act / Assert
        with check:
            assert tree_depth(root) == 0
        with check:
            assert leaf_count(root) == 1

    def test_unbalanced_tree(self) -> None:
        """Depth should follow the longest path and every leaf should be counted."""
        # Arrange
        root = InternalNode(
            feature=3,
            threshold=0.095,
            samples=7,
            left=Leaf(label=0, samples=3, confidence=1.0),
            right=_stump(),
        )

        # Act / Assert
        with check:
            assert tree_depth(root) == 2
        with check:
            assert leaf_count(root) == 3


class TestPredicate:
    """Tests for the Predicate model: string form and evaluation."""

    def test_str_renders_condition(self) -> None:
        """`str` should render `variable operator value`."""
        assert str(Predicate(variable="age", operator=">=", value=0.55)) == "age >= 0.55"

    @pytest.mark.parametrize(
        ("operator", "x", "expected"),
        [("<", 0.5, True), ("<", 0.55, False), (">=", 0.55, True), (">=", 0.5, False)],
    )
    def test_eval_compares_against_threshold(self, operator: str, x: float, expected: bool) -> None:
        """`<` and `>=` should partition values at the threshold.

        Args:
            operator (str): Comparison operator.
            x (float): Feature value to test.
            expected (bool): Expected outcome.
        """
        # Arrange
        predicate = Predicate(variable="age", operator=operator, value=0.55)  # type: ignore[arg-type]

        # Act / Assert
        assert predicate.eval(x) is expected

    def test_unknown_operator_raises_validation_error(self) -> None:
        """Operators other than `<` and `>=` should be rejected."""
        with pytest.raises(ValidationError):
            Predicate(variable="age", operator="<=", value=0.5)  # type: ignore[arg-type]


class TestClassificationRule:
    """Tests for the ClassificationRule model: string form and matching."""

    def test_str_joins_predicates(self) -> None:
        """`str` should join predicates with AND and append the prediction."""
        # Arrange
        rule = ClassificationRule(
            predicates=[
                Predicate(variable="sex", operator=">=", value=0.5),
                Predicate(variable="age", operator="<", value=0.45),
            ],
            prediction=0,
            samples=3,
            confidence=1.0,
        )

        # Act / Assert
        assert str(rule) == "IF sex >= 0.5 AND age < 0.45 THEN 0 (samples=3, confidence=1.0)"

    def test_str_without_predicates_reads_always(self) -> None:
        """A rule from a single-leaf tree should read as an unconditional rule."""
        # Arrange
        rule = ClassificationRule(predicates=[], prediction=1, samples=4, confidence=0.75)

        # Act / Assert
        assert str(rule) == "IF always THEN 1 (samples=4, confidence=0.75)"

    def test_matches_checks_every_predicate(self) -> None:
        """`matches` should hold only when every predicate holds."""
        # Arrange
        rule = ClassificationRule(
            predicates=[
                Predicate(variable="diagnosis", operator=">=", value=0.095),
                Predicate(variable="age", operator="<", value=0.45),
            ],
            prediction=1,
            samples=2,
            confidence=1.0,
        )

        # Act / Assert
        with check:
            assert rule.matches((0.0, 0.3, 0.16, 0.1, 1.0))
        with check:
            assert not rule.matches((0.0, 0.6, 0.16, 0.1, 1.0))
        with check:
            assert not rule.matches((0.0, 0.3, 0.16, 0.09, 1.0))
