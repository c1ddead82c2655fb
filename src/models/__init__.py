"""Data models and entities."""

from src.models.core import IndicatorPlot, KLineData, SeriesPrecision
from src.models.enums import BatchPolicy, IndicatorSeries, PlotType
from src.models.exceptions import (
    CalculationError,
    CalculationTimeoutError,
    IndicatorStoreError,
    UnknownTemplateError,
)
from src.models.indicator_config import IndicatorConfig

__all__ = [
    "BatchPolicy",
    "CalculationError",
    "CalculationTimeoutError",
    "IndicatorConfig",
    "IndicatorPlot",
    "IndicatorSeries",
    "IndicatorStoreError",
    "KLineData",
    "PlotType",
    "SeriesPrecision",
    "UnknownTemplateError",
]
