"""Relative Strength Index (RSI) indicator implementation.

This module provides vectorized RSI computation. Average gains and losses
are simple rolling means over the period, which keeps the output bounded
in [0, 100] and equal to 50 when there is no movement at all.
"""

import logging
from typing import Any

import numpy as np
import pandas as pd

from src.data_io.frames import data_list_to_frame, frame_to_records
from src.indicators.builtin.ma import require_column, validate_periods
from src.models.core import IndicatorPlot


logger = logging.getLogger(__name__)


def compute_rsi(close: pd.Series, periods: list[int]) -> pd.DataFrame:
    """Compute one RSI per period.

    Args:
        close: Close price series.
        periods: Look-back lengths.

    Returns:
        pd.DataFrame: Columns 'rsi{period}' with values in [0, 100].

    Example:
        >>> close = pd.Series([1.0, 2.0, 3.0, 4.0])
        >>> float(compute_rsi(close, [2])["rsi2"].iloc[-1])
        100.0
    """
    delta = close.diff()
    gains = delta.clip(lower=0.0)
    losses = -delta.clip(upper=0.0)

    columns = {}
    for period in periods:
        # Rolling sums drift below zero by float error on long windows.
        avg_gain = gains.rolling(window=period, min_periods=period).mean().clip(lower=0.0)
        avg_loss = losses.rolling(window=period, min_periods=period).mean().clip(lower=0.0)
        total = avg_gain + avg_loss
        rsi = pd.Series(
            np.where(total == 0, 50.0, 100.0 * avg_gain / total.replace(0, np.nan)),
            index=close.index,
        )
        columns[f"rsi{period}"] = rsi.clip(lower=0.0, upper=100.0).where(total.notna())
    return pd.DataFrame(columns, index=close.index)


def rsi_plots(calc_params: list[Any]) -> list[IndicatorPlot]:
    """Build one line plot per RSI period."""
    return [
        IndicatorPlot(key=f"rsi{period}", title=f"RSI{period}: ")
        for period in calc_params
    ]


def calc_rsi(data_list: list[Any], indicator) -> list[dict[str, Any]]:
    """Calculation entry point of the built-in ``RSI`` template."""
    periods = validate_periods(indicator.name, indicator.calc_params)
    frame = data_list_to_frame(data_list)
    close = require_column(frame, "close", indicator.name)
    result = frame_to_records(compute_rsi(close, periods))
    logger.debug("Computed RSI periods=%s points=%d", periods, len(result))
    return result
