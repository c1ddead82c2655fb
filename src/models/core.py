"""
Core data models for the indicator store.

This module defines the immutable dataclasses shared by the store, the
built-in indicator catalog and the data sources: chart candles, plot
descriptors and the chart's series precision.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.models.enums import PlotType


@dataclass(frozen=True)
class KLineData:
    """
    Represents a single OHLCV candle of the chart's data list.

    Attributes:
        timestamp: Candle open time in epoch milliseconds.
        open: Opening price for the period.
        high: Highest price during the period.
        low: Lowest price during the period.
        close: Closing price for the period.
        volume: Traded volume during the period.
        turnover: Optional traded value during the period.

    Examples:
        >>> candle = KLineData(
        ...     timestamp=1735732800000,
        ...     open=1.1000,
        ...     high=1.1010,
        ...     low=1.0990,
        ...     close=1.1005,
        ...     volume=1000.0,
        ... )
        >>> candle.close
        1.1005
    """

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    turnover: float | None = None


@dataclass(frozen=True)
class IndicatorPlot:
    """
    Describes one visual output of an indicator.

    Every entry of an indicator's result holds one value per plot key.

    Attributes:
        key: Key of the value inside each result entry (e.g. 'ma5').
        title: Label shown in the tooltip (e.g. 'MA5: ').
        type: Visual form of the plot.
        base_value: Baseline for bar plots, if any.
        styles: Per-plot style hints consumed by the rendering layer.
    """

    key: str
    title: str = ""
    type: PlotType = PlotType.LINE
    base_value: float | None = None
    styles: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SeriesPrecision:
    """
    Decimal precision of the chart's price and volume series.

    Attributes:
        price: Digits after the decimal point for price values.
        volume: Digits after the decimal point for volume values.

    Examples:
        >>> SeriesPrecision(price=2, volume=0).price
        2
    """

    price: int = 2
    volume: int = 0

    def __post_init__(self) -> None:
        """Validate precision values after initialization."""
        if self.price < 0 or self.volume < 0:
            raise ValueError(
                f"Precision must be non-negative, got price={self.price} "
                f"volume={self.volume}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, int]) -> "SeriesPrecision":
        """Build a precision from a mapping with 'price' and 'volume' keys."""
        return cls(price=int(data["price"]), volume=int(data["volume"]))
