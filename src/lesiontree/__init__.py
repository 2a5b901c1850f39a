"""lesiontree: Decision-tree classification of skin lesion imaging metadata."""

from loguru import logger

from lesiontree.config import TrainingConfig
from lesiontree.encoding import encode_record, encode_records
from lesiontree.exceptions import EmptyDatasetError, InvalidRecordError, LesionTreeError, NullModelError
from lesiontree.logging import PACKAGE_NAME, enable_logging
from lesiontree.pipeline import PipelineResult, run_pipeline, run_pipeline_from_csv
from lesiontree.records import EncodedRecord, RawRecord
from lesiontree.splitting import split_dataset
from lesiontree.tree import build_tree, evaluate, predict

logger.disable(PACKAGE_NAME)  # noqa: RUF067 - Disable logging for the lesiontree package by default

__all__ = [
    "EmptyDatasetError",
    "EncodedRecord",
    "InvalidRecordError",
    "LesionTreeError",
    "NullModelError",
    "PipelineResult",
    "RawRecord",
    "TrainingConfig",
    "build_tree",
    "enable_logging",
    "encode_record",
    "encode_records",
    "evaluate",
    "predict",
    "run_pipeline",
    "run_pipeline_from_csv",
    "split_dataset",
]
