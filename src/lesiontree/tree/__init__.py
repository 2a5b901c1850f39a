"""Decision tree sub-package: node models, induction, prediction, evaluation, and rules."""

from __future__ import annotations

from lesiontree.tree.building import SplitCandidate, build_tree, build_tree_from_config, find_best_split
from lesiontree.tree.evaluation import EvaluationResult, evaluate
from lesiontree.tree.models import (
    ClassificationRule,
    InternalNode,
    Leaf,
    Predicate,
    PredicateOp,
    TreeNode,
    leaf_count,
    tree_depth,
)
from lesiontree.tree.prediction import predict, predict_many
from lesiontree.tree.rules import extract_rules

__all__ = [
    "ClassificationRule",
    "EvaluationResult",
    "InternalNode",
    "Leaf",
    "Predicate",
    "PredicateOp",
    "SplitCandidate",
    "TreeNode",
    "build_tree",
    "build_tree_from_config",
    "evaluate",
    "extract_rules",
    "find_best_split",
    "leaf_count",
    "predict",
    "predict_many",
    "tree_depth",
]
