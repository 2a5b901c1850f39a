"""Pipeline orchestration: encode, split, build, and evaluate."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from lesiontree.config import TrainingConfig
from lesiontree.encoding import encode_records
from lesiontree.io import load_metadata
from lesiontree.records import RawRecord
from lesiontree.splitting import split_dataset
from lesiontree.tree.building import build_tree_from_config
from lesiontree.tree.evaluation import EvaluationResult, evaluate
from lesiontree.tree.models import ClassificationRule, InternalNode, Leaf, leaf_count, tree_depth
from lesiontree.tree.rules import extract_rules


class PipelineResult(BaseModel):
    """Structured output of one training run.

    Attributes:
        accuracy (float): Held-out accuracy in [0, 1].
        evaluation (EvaluationResult): Accuracy and confusion counts.
        tree (Leaf | InternalNode): Root of the built tree.
        rules (list[ClassificationRule]): One rule per leaf of `tree`.
        train_size (int): Number of training records.
        test_size (int): Number of test records.
        depth (int): Depth of `tree`.
        leaf_count (int): Number of leaves of `tree`.
    """

    accuracy: float = Field(ge=0.0, le=1.0, description="Held-out accuracy in [0, 1].")
    evaluation: EvaluationResult = Field(description="Accuracy and confusion counts on the test subset.")
    tree: Leaf | InternalNode = Field(discriminator="kind", description="Root of the built tree.")
    rules: list[ClassificationRule] = Field(description="One rule per leaf of the tree.")
    train_size: int = Field(ge=1, description="Number of training records.")
    test_size: int = Field(ge=1, description="Number of test records.")
    depth: int = Field(ge=0, description="Depth of the built tree.")
    leaf_count: int = Field(ge=1, description="Number of leaves of the built tree.")

    @model_validator(mode="after")
    def _validate_rules_count_matches_leaf_count(self) -> PipelineResult:
        """Validate that the number of rules equals the number of leaves.

        Returns:
            PipelineResult: The validated model instance.

        Raises:
            ValueError: If `len(rules)` does not equal `leaf_count`.
        """
        if len(self.rules) != self.leaf_count:
            raise ValueError(f"rules length ({len(self.rules)}) must equal leaf_count ({self.leaf_count})")
        return self


def run_pipeline(
    raw_records: Sequence[RawRecord | None],
    config: TrainingConfig | None = None,
) -> PipelineResult:
    """Encode raw records, split them, build a tree, and evaluate it.

    Identical input and configuration always yield an identical result.

    Args:
        raw_records (Sequence[RawRecord | None]): Raw metadata rows in source order.
        config (TrainingConfig | None): Training options. `None` reads them
            from the environment, falling back to defaults.

    Returns:
        PipelineResult: Accuracy, evaluation details, the tree and its rules.

    Raises:
        InvalidRecordError: If any raw record is `None`.
        EmptyDatasetError: If the training or test subset is empty.
    """
    config = config if config is not None else TrainingConfig()
    encoded = encode_records(raw_records)
    split = split_dataset(encoded, config.train_ratio)
    root = build_tree_from_config(split.train, config)
    evaluation = evaluate(root, split.test)
    return PipelineResult(
        accuracy=evaluation.accuracy,
        evaluation=evaluation,
        tree=root,
        rules=extract_rules(root),
        train_size=len(split.train),
        test_size=len(split.test),
        depth=tree_depth(root),
        leaf_count=leaf_count(root),
    )


def run_pipeline_from_csv(path: str | Path, config: TrainingConfig | None = None) -> PipelineResult:
    """Load a metadata CSV file and run the pipeline on its rows."""
    return run_pipeline(load_metadata(path), config)
