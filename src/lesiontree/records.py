"""Pydantic models for raw metadata rows and their encoded form."""

from __future__ import annotations

from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Public constants
# ---------------------------------------------------------------------------

RAW_FIELDS: Final[tuple[str, ...]] = (
    "image_name",
    "patient_id",
    "lesion_id",
    "sex",
    "age",
    "site",
    "diagnosis",
    "benign_malignant",
    "target",
)

FEATURE_NAMES: Final[tuple[str, ...]] = ("sex", "age", "site", "diagnosis", "benign_malignant")

N_FEATURES: Final[int] = len(FEATURE_NAMES)

type Label = Literal[0, 1]

# ---------------------------------------------------------------------------
# Public models
# ---------------------------------------------------------------------------


class RawRecord(BaseModel):
    """One row of lesion imaging metadata, as read from the source table.

    All fields are text. A missing value is the empty string; the encoder
    maps empty and malformed fields to fallback values instead of raising.

    Examples:
        >>> raw = RawRecord(sex="male", age="45", site="torso", benign_malignant="benign")
        >>> raw.diagnosis
        ''
    """

    model_config = ConfigDict(frozen=True)

    image_name: str = Field(default="", description="Image identifier, e.g. 'ISIC_2637011'.")
    patient_id: str = Field(default="", description="Patient identifier, e.g. 'IP_7279968'.")
    lesion_id: str = Field(default="", description="Lesion identifier.")
    sex: str = Field(default="", description="Patient sex, e.g. 'male' or 'female'.")
    age: str = Field(default="", description="Approximate patient age as text, e.g. '45.0'.")
    site: str = Field(default="", description="Anatomical site of the lesion, e.g. 'head/neck'.")
    diagnosis: str = Field(default="", description="Diagnosis, e.g. 'nevus' or 'melanoma'.")
    benign_malignant: str = Field(default="", description="Either 'benign' or 'malignant'.")
    target: str = Field(default="", description="Target flag as text, e.g. '0' or '1'.")


class EncodedRecord(BaseModel):
    """A raw record reduced to a fixed-length numeric feature vector plus a binary label.

    Attributes:
        features (tuple[float, float, float, float, float]): Normalized
            features in `FEATURE_NAMES` order. Every value lies in
            [-1.0, 1.0].
        label (Label): 0 for benign, 1 for malignant.

    Examples:
        >>> record = EncodedRecord(features=(1.0, 0.5, 0.16, 0.1, 0.0), label=0)
        >>> record.feature("age")
        0.5
    """

    model_config = ConfigDict(frozen=True)

    features: tuple[float, float, float, float, float] = Field(
        description="Normalized features: sex, age, site, diagnosis, benign_malignant.",
    )
    label: Label = Field(
        description="Binary label: 0 = benign, 1 = malignant.",
    )

    @field_validator("features", mode="after")
    @classmethod
    def _validate_feature_range(
        cls, value: tuple[float, float, float, float, float]
    ) -> tuple[float, float, float, float, float]:
        """Validate that every feature lies in [-1.0, 1.0].

        Args:
            value (tuple[float, float, float, float, float]): Features to validate.

        Returns:
            tuple[float, float, float, float, float]: The validated features, unchanged.

        Raises:
            ValueError: If any feature is outside [-1.0, 1.0].
        """
        out_of_range = [
            name for name, feature in zip(FEATURE_NAMES, value, strict=True) if not -1.0 <= feature <= 1.0
        ]
        if out_of_range:
            raise ValueError(f"features must lie in [-1.0, 1.0], got out-of-range values for {out_of_range}")
        return value

    def feature(self, name: str) -> float:
        """Return a feature value by name.

        Args:
            name (str): One of `FEATURE_NAMES`.

        Returns:
            float: The feature value.

        Raises:
            KeyError: If `name` is not a known feature.
        """
        try:
            index = FEATURE_NAMES.index(name)
        except ValueError:
            raise KeyError(f"Unknown feature {name!r}; expected one of {list(FEATURE_NAMES)}") from None
        return self.features[index]
