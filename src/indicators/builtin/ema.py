"""Exponential Moving Average (EMA) indicator implementation.

This module provides vectorized EMA computation using pandas' native
exponential weighted moving average functionality.
"""

import logging
from typing import Any

import pandas as pd

from src.data_io.frames import data_list_to_frame, frame_to_records
from src.indicators.builtin.ma import require_column, validate_periods
from src.models.core import IndicatorPlot


logger = logging.getLogger(__name__)


def compute_ema(close: pd.Series, periods: list[int]) -> pd.DataFrame:
    """Compute one EMA per period.

    Uses pandas' ewm() for vectorized computation. The smoothing factor
    alpha is computed as 2 / (period + 1) following standard EMA convention.
    Values before the first full window are left missing.

    Args:
        close: Close price series.
        periods: EMA spans.

    Returns:
        pd.DataFrame: Columns 'ema{period}'.

    Example:
        >>> close = pd.Series([10.0, 11.0, 12.0, 13.0, 14.0])
        >>> list(compute_ema(close, [3]).columns)
        ['ema3']
    """
    # span = period ensures alpha = 2 / (period + 1)
    columns = {
        f"ema{period}": close.ewm(span=period, adjust=False, min_periods=period).mean()
        for period in periods
    }
    return pd.DataFrame(columns, index=close.index)


def ema_plots(calc_params: list[Any]) -> list[IndicatorPlot]:
    """Build one line plot per EMA period."""
    return [
        IndicatorPlot(key=f"ema{period}", title=f"EMA{period}: ")
        for period in calc_params
    ]


def calc_ema(data_list: list[Any], indicator) -> list[dict[str, Any]]:
    """Calculation entry point of the built-in ``EMA`` template."""
    periods = validate_periods(indicator.name, indicator.calc_params)
    frame = data_list_to_frame(data_list)
    close = require_column(frame, "close", indicator.name)
    result = frame_to_records(compute_ema(close, periods))
    logger.debug(
        "Computed %d EMAs periods=%s points=%d", len(periods), periods, len(result)
    )
    return result
