"""Tests for extracting human-readable rules from a built tree."""

from __future__ import annotations

import pytest
from pytest_check import check

from lesiontree.exceptions import NullModelError
from lesiontree.records import EncodedRecord
from lesiontree.tree.building import build_tree
from lesiontree.tree.models import THRESHOLD_DECIMAL_PLACES, InternalNode, Leaf, Predicate, leaf_count
from lesiontree.tree.prediction import predict
from lesiontree.tree.rules import extract_rules


class TestExtractRules:
    """Tests for `extract_rules`: one rule per leaf, left to right."""

    def test_single_leaf_tree_yields_unconditional_rule(self) -> None:
        """A single-leaf tree should yield one rule with no predicates."""
        # Act
        rules = extract_rules(Leaf(label=0, samples=6, confidence=0.8333))

        # Assert
        assert len(rules) == 1
        with check:
            assert rules[0].predicates == []
        with check:
            assert rules[0].prediction == 0
        with check:
            assert rules[0].samples == 6

    def test_rules_follow_left_to_right_leaf_order(self) -> None:
        """Rules should list the left branch before the right with matching predicates."""
        # Arrange
        root = InternalNode(
            feature=3,
            threshold=0.095,
            samples=5,
            left=Leaf(label=1, samples=2, confidence=1.0),
            right=InternalNode(
                feature=1,
                threshold=0.45,
                samples=3,
                left=Leaf(label=0, samples=2, confidence=1.0),
                right=Leaf(label=1, samples=1, confidence=1.0),
            ),
        )

        # Act
        rules = extract_rules(root)

        # Assert
        assert len(rules) == 3
        with check:
            assert rules[0].predicates == [Predicate(variable="diagnosis", operator="<", value=0.095)]
        with check:
            assert rules[1].predicates == [
                Predicate(variable="diagnosis", operator=">=", value=0.095),
                Predicate(variable="age", operator="<", value=0.45),
            ]
        with check:
            assert [rule.prediction for rule in rules] == [1, 0, 1]

    def test_thresholds_are_exact_and_rounded_only_for_display(self) -> None:
        """Predicates should keep the exact threshold and round it only when rendered."""
        # Arrange
        root = InternalNode(
            feature=1,
            threshold=0.4567891,
            samples=2,
            left=Leaf(label=0, samples=1, confidence=1.0),
            right=Leaf(label=1, samples=1, confidence=1.0),
        )

        # Act
        rules = extract_rules(root)

        # Assert
        with check:
            assert THRESHOLD_DECIMAL_PLACES == 4
        with check:
            assert rules[0].predicates[0].value == 0.4567891
        with check:
            assert str(rules[0].predicates[0]) == "age < 0.4568"
        with check:
            assert str(rules[1].predicates[0]) == "age >= 0.4568"

    def test_record_between_exact_and_rounded_threshold_matches_predicted_leaf(self) -> None:
        """A value just above the split but below its rounded form should match the rule of the leaf it reaches."""
        # Arrange - scaled ages 45/90, 46/90 and 90/90 split at about 0.505556, shown as 0.5056
        records = [
            EncodedRecord(features=(0.0, age / 90.0, 0.16, 0.1, 0.0), label=label)  # type: ignore[arg-type]
            for age, label in [(45.0, 0), (46.0, 1), (90.0, 1)]
        ]
        root = build_tree(records)
        assert isinstance(root, InternalNode)
        features = (0.0, 0.50558, 0.16, 0.1, 0.0)
        assert root.threshold < features[1] < round(root.threshold, THRESHOLD_DECIMAL_PLACES)

        # Act
        rules = extract_rules(root)
        matching = [rule for rule in rules if rule.matches(features)]

        # Assert
        with check:
            assert predict(root, features) == 1
        with check:
            assert len(matching) == 1
        with check:
            assert matching[0].prediction == 1

    def test_rule_count_matches_leaf_count_and_predictions(self) -> None:
        """A built tree should yield one rule per leaf, and every record should match the rule of its leaf."""
        # Arrange
        records = [
            EncodedRecord(features=(float(i % 2), i / 10, 0.16, (i % 3) / 100, 0.0), label=int(i % 4 == 1))  # type: ignore[arg-type]
            for i in range(10)
        ]
        root = build_tree(records)

        # Act
        rules = extract_rules(root)

        # Assert
        with check:
            assert len(rules) == leaf_count(root)
        for record in records:
            matching = [rule for rule in rules if rule.matches(record.features)]
            with check:
                assert len(matching) == 1
            with check:
                assert matching[0].prediction == predict(root, record)

    def test_missing_tree_raises_null_model_error(self) -> None:
        """Extracting rules without a tree should raise NullModelError."""
        with pytest.raises(NullModelError):
            extract_rules(None)
