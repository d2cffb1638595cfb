"""Decoder thresholds.

Built once at startup and passed to the decoder; never mutated afterwards.

Example:
    from pgcell import ValueDecoder
    from pgcell.config import DecoderThresholds

    decoder = ValueDecoder(DecoderThresholds.from_env())
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .exceptions import ThresholdError


ENV_PREFIX = "PGCELL_"


class DecoderThresholds(BaseModel):
    """Size limits and ratios steering binary detection and rendering."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_hex_display_bytes: int = Field(32, gt=0)
    max_binary_processing_bytes: int = Field(10000, gt=0)
    binary_peek_bytes: int = Field(100, gt=0)
    # Fraction of non-null bytes that must be printable to suspect embedded text
    text_detection_ratio: float = Field(0.4, gt=0.0, lt=1.0)
    # Fraction of NUL bytes in the peeked prefix that marks data as binary
    binary_detection_ratio: float = Field(0.1, gt=0.0, lt=1.0)
    # Fraction of printable bytes required to accept an extracted substring
    valid_substring_ratio: float = Field(0.8, gt=0.0, lt=1.0)

    @model_validator(mode="after")
    def _check_sizes(self) -> "DecoderThresholds":
        if self.max_hex_display_bytes >= self.max_binary_processing_bytes:
            raise ValueError(
                "max_hex_display_bytes must be smaller than max_binary_processing_bytes"
            )
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DecoderThresholds":
        """Load thresholds from ``PGCELL_*`` environment variables.

        Unset variables keep their defaults.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            Validated thresholds.

        Raises:
            ThresholdError: If a variable is set to an invalid value.
        """
        if environ is None:
            environ = os.environ

        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip():
                values[name] = raw.strip()

        try:
            return cls(**values)
        except ValidationError as e:
            raise ThresholdError(
                "Invalid decoder thresholds", detail=str(e)
            ) from e


DEFAULT_THRESHOLDS = DecoderThresholds()
