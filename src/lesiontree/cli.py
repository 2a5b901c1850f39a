"""Command-line entry point: train on a metadata CSV and report held-out accuracy.

Usage:
    lesiontree metadata.csv
    lesiontree metadata.csv --max-depth 4 --criterion gini --show-rules
    python -m lesiontree metadata.csv --log-level DEBUG
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from lesiontree.config import TrainingConfig
from lesiontree.exceptions import LesionTreeError
from lesiontree.logging import STAGE_LEVEL, enable_logging
from lesiontree.pipeline import run_pipeline_from_csv

DEFAULT_METADATA_PATH = "metadata.csv"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the `lesiontree` command."""
    parser = argparse.ArgumentParser(
        prog="lesiontree",
        description="Train a decision tree on lesion metadata and report held-out accuracy.",
    )
    parser.add_argument(
        "metadata",
        nargs="?",
        default=DEFAULT_METADATA_PATH,
        help=f"Path to the metadata CSV file (default: {DEFAULT_METADATA_PATH})",
    )
    parser.add_argument("--train-ratio", type=float, help="Fraction of records used for training")
    parser.add_argument("--min-leaf-size", type=int, help="Subsets smaller than this become leaves")
    parser.add_argument("--max-depth", type=int, help="Maximum tree depth")
    parser.add_argument("--criterion", choices=["entropy", "gini"], help="Impurity measure used to rank splits")
    parser.add_argument(
        "--log-level",
        default=STAGE_LEVEL,
        choices=["TRACE", "DEBUG", "INFO", "STAGE", "WARNING", "ERROR", "CRITICAL"],
        help="Minimum level of progress messages written to stderr (default: STAGE)",
    )
    parser.add_argument("--show-rules", action="store_true", help="Print one rule per leaf after training")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command and return its exit status.

    Args:
        argv (Sequence[str] | None): Command-line arguments without the
            program name. `None` reads `sys.argv`.

    Returns:
        int: 0 on success, 1 when training or evaluation fails.
    """
    args = build_parser().parse_args(argv)
    overrides = {
        name: value
        for name, value in {
            "train_ratio": args.train_ratio,
            "min_leaf_size": args.min_leaf_size,
            "max_depth": args.max_depth,
            "criterion": args.criterion,
        }.items()
        if value is not None
    }

    with enable_logging(level=args.log_level):
        try:
            config = TrainingConfig(**overrides)
            result = run_pipeline_from_csv(args.metadata, config)
        except (LesionTreeError, FileNotFoundError, ValidationError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    print(f"Model Accuracy: {result.evaluation.accuracy_percent:.2f}%")
    if args.show_rules:
        for rule in result.rules:
            print(rule)
    return 0
