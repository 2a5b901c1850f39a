"""Metadata loading: comma-separated lesion metadata to raw records."""

from __future__ import annotations

from pathlib import Path

import polars as pl
from loguru import logger

from lesiontree.exceptions import MetadataColumnsError, MetadataFormatError
from lesiontree.logging import STAGE_LEVEL
from lesiontree.records import RAW_FIELDS, RawRecord


def load_metadata(path: str | Path) -> list[RawRecord]:
    """Read a metadata CSV file with a header row into raw records.

    Every column is read as text. Columns are matched to `RAW_FIELDS` by
    position rather than by header name, since metadata releases name them
    differently (e.g. `age_approx`, `anatom_site_general_challenge`).

    Args:
        path (str | Path): Path to the CSV file.

    Returns:
        list[RawRecord]: One record per data row, in file order.

    Raises:
        FileNotFoundError: If `path` does not exist.
        MetadataColumnsError: If the file has fewer than nine columns.
        MetadataFormatError: If the file is empty or is not well-formed CSV.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Metadata file not found: {path}")
    try:
        df = pl.read_csv(path, infer_schema=False)
    except pl.exceptions.PolarsError as exc:
        raise MetadataFormatError(str(path), str(exc)) from exc
    records = records_from_frame(df)
    logger.log(STAGE_LEVEL, "Metadata loaded", path=str(path), count=len(records))
    return records


def records_from_frame(df: pl.DataFrame) -> list[RawRecord]:
    """Convert a metadata DataFrame into raw records.

    The first nine columns are taken in `RAW_FIELDS` order; extra columns are
    ignored. Values are cast to text and nulls become empty strings. Leading
    and trailing whitespace of every kind (spaces, tabs, carriage returns) is
    trimmed, not only spaces.

    Args:
        df (pl.DataFrame): Metadata table.

    Returns:
        list[RawRecord]: One record per row, in row order.

    Raises:
        MetadataColumnsError: If `df` has fewer than nine columns.

    Examples:
        >>> df = pl.DataFrame({
        ...     "image_name": ["ISIC_0015719"],
        ...     "patient_id": ["IP_3075186"],
        ...     "lesion_id": [""],
        ...     "sex": ["female"],
        ...     "age_approx": [45.0],
        ...     "anatom_site_general_challenge": ["upper extremity"],
        ...     "diagnosis": ["unknown"],
        ...     "benign_malignant": ["benign"],
        ...     "target": [0],
        ... })
        >>> records_from_frame(df)[0].age
        '45.0'
    """
    if df.width < len(RAW_FIELDS):
        raise MetadataColumnsError(
            missing_columns=list(RAW_FIELDS[df.width :]),
            available_columns=df.columns,
        )
    text_columns = df.select([
        pl.col(source).cast(pl.String).fill_null("").str.strip_chars().alias(field)
        for source, field in zip(df.columns, RAW_FIELDS, strict=False)
    ])
    return [RawRecord(**row) for row in text_columns.iter_rows(named=True)]
