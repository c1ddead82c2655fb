"""Simple Moving Average (MA) indicator implementation.

This module provides the vectorized MA calculation behind the built-in
``MA`` template: one rolling mean of the close price per calc param.
"""

import logging
from typing import Any

import pandas as pd

from src.data_io.frames import data_list_to_frame, frame_to_records
from src.models.core import IndicatorPlot
from src.models.exceptions import CalculationError


logger = logging.getLogger(__name__)


def validate_periods(name: str, periods: list[Any]) -> list[int]:
    """Check that every period is a positive integer.

    Args:
        name: Indicator name used in error messages.
        periods: Raw calc params.

    Returns:
        list[int]: The periods as ints.

    Raises:
        CalculationError: If a period is not a positive integer.
    """
    validated = []
    for period in periods:
        if isinstance(period, bool) or not isinstance(period, (int, float)):
            raise CalculationError(
                f"{name} period must be numeric, got {period!r}", indicator_name=name
            )
        if period < 1 or int(period) != period:
            raise CalculationError(
                f"{name} period must be a positive integer, got {period}",
                indicator_name=name,
            )
        validated.append(int(period))
    return validated


def require_column(frame: pd.DataFrame, column: str, name: str) -> pd.Series:
    """Return a numeric column of the data frame.

    Raises:
        CalculationError: If the column is missing.
    """
    if column not in frame.columns:
        raise CalculationError(
            f"Column '{column}' not found in data list. "
            f"Available: {list(frame.columns)}",
            indicator_name=name,
        )
    return frame[column].astype(float)


def compute_ma(close: pd.Series, periods: list[int]) -> pd.DataFrame:
    """Compute one simple moving average per period.

    Args:
        close: Close price series.
        periods: Rolling window lengths.

    Returns:
        pd.DataFrame: Columns 'ma{period}', NaN during warm-up.

    Example:
        >>> close = pd.Series([10.0, 11.0, 12.0, 13.0])
        >>> compute_ma(close, [2])["ma2"].tolist()[1:]
        [10.5, 11.5, 12.5]
    """
    columns = {
        f"ma{period}": close.rolling(window=period, min_periods=period).mean()
        for period in periods
    }
    return pd.DataFrame(columns, index=close.index)


def ma_plots(calc_params: list[Any]) -> list[IndicatorPlot]:
    """Build one line plot per MA period."""
    return [
        IndicatorPlot(key=f"ma{period}", title=f"MA{period}: ")
        for period in calc_params
    ]


def calc_ma(data_list: list[Any], indicator) -> list[dict[str, Any]]:
    """Calculation entry point of the built-in ``MA`` template."""
    periods = validate_periods(indicator.name, indicator.calc_params)
    frame = data_list_to_frame(data_list)
    close = require_column(frame, "close", indicator.name)
    result = frame_to_records(compute_ma(close, periods))
    logger.debug("Computed MA periods=%s points=%d", periods, len(result))
    return result
