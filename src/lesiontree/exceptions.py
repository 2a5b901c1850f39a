"""Custom exceptions for lesiontree.

Structural errors raised by the training pipeline:

- LesionTreeError: Base class for every lesiontree error. Catch this to
  handle any failure raised by the package.
- EmptyDatasetError: Raised when the tree builder receives no training
  records or the evaluator receives no test records.
- InvalidRecordError: Raised when a raw record is absent altogether.
- NullModelError: Raised when prediction or evaluation is attempted without
  a built tree.
- MetadataColumnsError: Raised when a metadata file does not carry the
  expected columns.
- MetadataFormatError: Raised when a metadata file is empty or is not
  well-formed CSV.

Malformed individual fields never raise; they degrade to documented fallback
values in `lesiontree.encoding`.
"""

from __future__ import annotations

from typing import Literal

type PipelineStage = Literal["training", "evaluation"]


class LesionTreeError(Exception):
    """Base exception for all lesiontree errors."""


class EmptyDatasetError(LesionTreeError, ValueError):
    """Raised when a pipeline stage receives zero records.

    Attributes:
        stage (PipelineStage): The stage that received no records, either
            `"training"` or `"evaluation"`.

    Examples:
        >>> err = EmptyDatasetError(stage="training")
        >>> err.stage
        'training'
        >>> str(err)
        'Cannot run training on an empty dataset'
    """

    stage: PipelineStage

    def __init__(self, stage: PipelineStage) -> None:
        """Initialize EmptyDatasetError.

        Args:
            stage (PipelineStage): The stage that received no records.
        """
        super().__init__(f"Cannot run {stage} on an empty dataset")
        self.stage = stage

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Representation including the message and stage.
        """
        return f"{self.__class__.__name__}(message={str(self)!r}, stage={self.stage!r})"


class InvalidRecordError(LesionTreeError, ValueError):
    """Raised when a raw record is entirely absent (not merely sparse).

    Attributes:
        position (int | None): Position of the absent record in its input
            sequence, when known.
    """

    position: int | None

    def __init__(self, position: int | None = None) -> None:
        """Initialize InvalidRecordError.

        Args:
            position (int | None): Position of the absent record, if known.
        """
        where = "" if position is None else f" at position {position}"
        super().__init__(f"Raw record{where} is missing")
        self.position = position


class NullModelError(LesionTreeError):
    """Raised when prediction or evaluation is invoked without a built tree."""

    def __init__(self, message: str = "No decision tree has been built") -> None:
        """Initialize NullModelError.

        Args:
            message (str): Description of the error.
        """
        super().__init__(message)


class MetadataColumnsError(LesionTreeError, ValueError):
    """Raised when a metadata table lacks expected columns.

    Attributes:
        missing_columns (list[str]): Expected column names that are absent.
        available_columns (list[str]): Column names present in the table.

    Examples:
        >>> err = MetadataColumnsError(
        ...     missing_columns=["benign_malignant", "target"],
        ...     available_columns=["image_name", "patient_id"],
        ... )
        >>> err.missing_columns
        ['benign_malignant', 'target']
    """

    missing_columns: list[str]
    available_columns: list[str]

    def __init__(
        self,
        missing_columns: list[str],
        available_columns: list[str],
    ) -> None:
        """Initialize MetadataColumnsError.

        Args:
            missing_columns (list[str]): Expected column names that are absent.
            available_columns (list[str]): Column names present in the table.
        """
        super().__init__(f"Metadata is missing expected columns: {missing_columns}")
        self.missing_columns = missing_columns
        self.available_columns = available_columns


class MetadataFormatError(LesionTreeError, ValueError):
    """Raised when a metadata file cannot be parsed as CSV.

    Covers empty files and rows with more fields than the header. The parser
    error is chained as `__cause__`.

    Attributes:
        path (str): Path of the file that failed to parse.
    """

    path: str

    def __init__(self, path: str, reason: str) -> None:
        """Initialize MetadataFormatError.

        Args:
            path (str): Path of the file that failed to parse.
            reason (str): Parser message describing the failure.
        """
        super().__init__(f"Cannot parse metadata file {path}: {reason}")
        self.path = path
