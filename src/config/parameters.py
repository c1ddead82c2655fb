"""
Indicator store configuration using Pydantic.

This module provides type-safe, validated settings for the indicator
store: how recompute batches aggregate outcomes, whether recomputations
of one instance are serialized, an optional calc deadline, and the default
series precision applied by the CLI.
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.core import SeriesPrecision
from src.models.enums import BatchPolicy


class StoreSettings(BaseModel):
    """
    Configuration for an IndicatorStore.

    Attributes:
        batch_policy: How concurrent recompute batches aggregate outcomes
            (default: collect every outcome).
        calc_timeout: Optional deadline in seconds for a single calc run
            (default: None, unbounded).
        serialize_recompute: Run overlapping recomputations of the same
            instance one after another instead of last-write-wins
            (default: False).
        default_price_precision: Price precision pushed to PRICE indicators
            (default: 2).
        default_volume_precision: Volume precision pushed to VOLUME
            indicators (default: 0).

    Examples:
        >>> settings = StoreSettings(batch_policy="fail_fast", calc_timeout=2.5)
        >>> settings.batch_policy is BatchPolicy.FAIL_FAST
        True
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    batch_policy: BatchPolicy = Field(default=BatchPolicy.COLLECT_ALL)
    calc_timeout: Optional[float] = Field(default=None, gt=0.0)
    serialize_recompute: bool = Field(default=False)
    default_price_precision: int = Field(default=2, ge=0, le=16)
    default_volume_precision: int = Field(default=0, ge=0, le=16)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StoreSettings":
        """
        Build settings from a plain mapping, ignoring None values.

        Args:
            data: Raw settings, e.g. parsed CLI arguments.

        Returns:
            Validated StoreSettings.
        """
        return cls(**{key: value for key, value in data.items() if value is not None})

    def series_precision(self) -> SeriesPrecision:
        """Return the default precision as a SeriesPrecision."""
        return SeriesPrecision(
            price=self.default_price_precision,
            volume=self.default_volume_precision,
        )
