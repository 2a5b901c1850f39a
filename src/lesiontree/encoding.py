"""Feature encoding: raw metadata rows to normalized feature vectors."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence
from typing import Final

from loguru import logger

from lesiontree.exceptions import InvalidRecordError
from lesiontree.logging import STAGE_LEVEL
from lesiontree.records import EncodedRecord, Label, RawRecord

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

MISSING_CATEGORY_CODE: Final[int] = -1
_CATEGORY_MODULUS: Final[int] = 100
_CATEGORY_SCALE: Final[float] = 100.0

# Leading decimal number, tolerant of surrounding whitespace and trailing text.
_AGE_PREFIX_PATTERN: Final[re.Pattern[str]] = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


# ---------------------------------------------------------------------------
# Public interface -- Field encoders
# ---------------------------------------------------------------------------


def encode_sex(value: str) -> float:
    """Encode sex as 1.0 for exactly `"male"` and 0.0 for anything else."""
    return 1.0 if value == "male" else 0.0


def encode_label(value: str) -> Label:
    """Encode benign/malignant status as 0 for exactly `"benign"` and 1 otherwise.

    Empty values encode as 1 as well; only the literal `"benign"` is negative.
    """
    return 0 if value == "benign" else 1


def category_code(value: str) -> int:
    """Return the categorical code of a site or diagnosis value.

    The code is the first character's value modulo 100, where the character
    value is the first byte of the UTF-8 encoding read as a signed 8-bit
    integer and the remainder keeps the sign of the dividend. Empty values
    get `MISSING_CATEGORY_CODE`.

    Args:
        value (str): The raw categorical text.

    Returns:
        int: A code in (-100, 100).

    Examples:
        >>> category_code("torso")  # ord("t") == 116
        16
        >>> category_code("")
        -1
    """
    if not value:
        return MISSING_CATEGORY_CODE
    first_byte = value.encode("utf-8")[0]
    signed_value = first_byte - 256 if first_byte > 127 else first_byte
    return int(math.fmod(signed_value, _CATEGORY_MODULUS))


def parse_age(value: str) -> float:
    """Parse the leading numeric prefix of an age string.

    Text without a numeric prefix parses to 0.0, and so do negative and
    non-finite values.

    Args:
        value (str): Raw age text, e.g. `"45.0"` or `" 70 "`.

    Returns:
        float: The parsed, non-negative age.

    Examples:
        >>> parse_age("45.0")
        45.0
        >>> parse_age("60 years")
        60.0
        >>> parse_age("unknown")
        0.0
    """
    match = _AGE_PREFIX_PATTERN.match(value)
    if match is None:
        return 0.0
    age = float(match.group(1))
    if not math.isfinite(age) or age < 0.0:
        return 0.0
    return age


def scale_age(age: float, max_age: float) -> float:
    """Scale an age into [0.0, 1.0] by the dataset-wide maximum age.

    A non-positive `max_age` yields 0.0; ages above `max_age` clip to 1.0.
    """
    if max_age <= 0.0:
        return 0.0
    return min(age / max_age, 1.0)


# ---------------------------------------------------------------------------
# Public interface -- Record encoding
# ---------------------------------------------------------------------------


def max_observed_age(records: Iterable[RawRecord | None]) -> float:
    """Return the maximum parsed age across records, or 0.0 when there is none.

    Absent records are skipped here; `encode_record` rejects them.
    """
    return max((parse_age(raw.age) for raw in records if raw is not None), default=0.0)


def encode_record(raw: RawRecord | None, *, max_age: float) -> EncodedRecord:
    """Encode one raw record into a normalized feature vector and label.

    Encoding is a pure function of `raw` and `max_age`. Malformed fields
    degrade to fallback values instead of raising.

    Args:
        raw (RawRecord | None): The raw metadata row.
        max_age (float): Maximum age observed across the full dataset.

    Returns:
        EncodedRecord: Features `(sex, age, site, diagnosis, benign_malignant)`
            and the benign/malignant label.

    Raises:
        InvalidRecordError: If `raw` is `None`.

    Examples:
        >>> raw = RawRecord(sex="male", age="45", site="torso", diagnosis="nevus", benign_malignant="benign")
        >>> encode_record(raw, max_age=90.0).features
        (1.0, 0.5, 0.16, 0.1, 0.0)
    """
    if raw is None:
        raise InvalidRecordError()
    label = encode_label(raw.benign_malignant)
    features = (
        encode_sex(raw.sex),
        scale_age(parse_age(raw.age), max_age),
        category_code(raw.site) / _CATEGORY_SCALE,
        category_code(raw.diagnosis) / _CATEGORY_SCALE,
        float(label),
    )
    return EncodedRecord(features=features, label=label)


def encode_records(records: Sequence[RawRecord | None]) -> list[EncodedRecord]:
    """Encode a full dataset, scaling ages by its maximum observed age.

    Args:
        records (Sequence[RawRecord | None]): Raw rows in their source order.

    Returns:
        list[EncodedRecord]: Encoded rows in the same order.

    Raises:
        InvalidRecordError: If any record is `None`; the error carries its position.
    """
    max_age = max_observed_age(records)
    encoded: list[EncodedRecord] = []
    for position, raw in enumerate(records):
        if raw is None:
            raise InvalidRecordError(position=position)
        encoded.append(encode_record(raw, max_age=max_age))
    logger.log(STAGE_LEVEL, "Categorical variables encoded and features scaled", count=len(encoded), max_age=max_age)
    return encoded
