"""Shared fixtures: a small lesion metadata table, as raw records and as a CSV file."""

from __future__ import annotations

from pathlib import Path

import polars as pl
import pytest

from lesiontree.records import RAW_FIELDS, RawRecord

# Diagnosis separates the labels; sex and age do not separate the first eight rows.
METADATA_ROWS: list[tuple[str, str, str, str]] = [
    ("male", "45", "nevus", "benign"),
    ("female", "50", "melanoma", "malignant"),
    ("female", "30", "nevus", "benign"),
    ("male", "60", "melanoma", "malignant"),
    ("male", "70", "nevus", "benign"),
    ("female", "35", "melanoma", "malignant"),
    ("female", "55", "nevus", "benign"),
    ("male", "40", "melanoma", "malignant"),
    ("male", "65", "melanoma", "malignant"),
    ("female", "25", "nevus", "benign"),
]

METADATA_HEADER: list[str] = [
    "image_name",
    "patient_id",
    "lesion_id",
    "sex",
    "age_approx",
    "anatom_site_general_challenge",
    "diagnosis",
    "benign_malignant",
    "target",
]


def _metadata_frame() -> pl.DataFrame:
    rows = [
        (
            f"ISIC_{index:07d}",
            f"IP_{index:07d}",
            "",
            sex,
            age,
            "torso",
            diagnosis,
            status,
            "1" if status == "malignant" else "0",
        )
        for index, (sex, age, diagnosis, status) in enumerate(METADATA_ROWS)
    ]
    return pl.DataFrame(rows, schema=METADATA_HEADER, orient="row")


@pytest.fixture
def metadata_records() -> list[RawRecord]:
    """Ten raw records whose held-out pair the learned tree classifies correctly.

    Returns:
        list[RawRecord]: Raw records in file order.
    """
    return [
        RawRecord(**dict(zip(RAW_FIELDS, row, strict=True)))
        for row in _metadata_frame().iter_rows()
    ]


@pytest.fixture
def metadata_csv(tmp_path: Path) -> Path:
    """Write the ten-row metadata table to a CSV file.

    Args:
        tmp_path (Path): Pytest temporary directory.

    Returns:
        Path: Path to the written CSV file.
    """
    path = tmp_path / "metadata.csv"
    _metadata_frame().write_csv(path)
    return path
