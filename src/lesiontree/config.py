"""Training configuration loaded from keyword arguments, the environment, or a `.env` file."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from lesiontree.splitting import DEFAULT_TRAIN_RATIO

type SplitCriterion = Literal["entropy", "gini"]


class TrainingConfig(
    BaseSettings,
    env_prefix="LESIONTREE_",
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
):
    """Options recognized by the training pipeline.

    Values may be passed as keyword arguments or set through environment
    variables such as `LESIONTREE_TRAIN_RATIO=0.75` and
    `LESIONTREE_MAX_DEPTH=4`.

    Attributes:
        train_ratio (float): Fraction of records assigned to training.
        min_leaf_size (int): Subsets smaller than this become leaves.
        max_depth (int | None): Depth at which recursion stops; `None` for no cap.
        criterion (SplitCriterion): Impurity measure used to rank splits.
        min_gain (float): Splits with a lower impurity reduction become leaves.

    Examples:
        >>> TrainingConfig(max_depth=3).max_depth
        3
    """

    train_ratio: float = Field(
        default=DEFAULT_TRAIN_RATIO,
        gt=0.0,
        lt=1.0,
        description="Fraction of records assigned to training.",
    )
    min_leaf_size: int = Field(
        default=1,
        ge=1,
        description="Subsets with fewer records than this are turned into leaves.",
    )
    max_depth: int | None = Field(
        default=None,
        ge=0,
        description="Maximum tree depth; None grows until the other stopping rules apply.",
    )
    criterion: SplitCriterion = Field(
        default="entropy",
        description="Impurity measure: 'entropy' (information gain) or 'gini'.",
    )
    min_gain: float = Field(
        default=0.0,
        ge=0.0,
        description="Minimum impurity reduction required to accept a split.",
    )
