"""Deterministic train/test holdout split."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Final, NamedTuple

from loguru import logger

from lesiontree.logging import STAGE_LEVEL
from lesiontree.records import EncodedRecord

DEFAULT_TRAIN_RATIO: Final[float] = 0.8


class DatasetSplit(NamedTuple):
    """Training prefix and test suffix of an encoded dataset.

    Attributes:
        train (list[EncodedRecord]): Records used to build the tree.
        test (list[EncodedRecord]): Held-out records used for evaluation.
    """

    train: list[EncodedRecord]
    test: list[EncodedRecord]


def split_dataset(
    records: Sequence[EncodedRecord],
    ratio: float = DEFAULT_TRAIN_RATIO,
) -> DatasetSplit:
    """Split records into a training prefix and a test suffix.

    The first `floor(len(records) * ratio)` records form the training set and
    the rest form the test set, both in their original order. There is no
    shuffling and no stratification, so the split is reproducible but is only
    a sound holdout when the source order is unrelated to the label. Callers
    needing stratified evaluation must reorder the records beforehand.

    Args:
        records (Sequence[EncodedRecord]): Encoded records in source order.
        ratio (float): Fraction of records assigned to training, strictly
            between 0 and 1. Defaults to 0.8.

    Returns:
        DatasetSplit: The `(train, test)` pair.

    Raises:
        ValueError: If `ratio` is not strictly between 0 and 1.
    """
    if not 0.0 < ratio < 1.0:
        raise ValueError(f"ratio must be strictly between 0 and 1, got {ratio}")
    train_count = math.floor(len(records) * ratio)
    split = DatasetSplit(train=list(records[:train_count]), test=list(records[train_count:]))
    logger.log(STAGE_LEVEL, "Dataset split", train_size=len(split.train), test_size=len(split.test))
    return split
