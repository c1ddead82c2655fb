"""Volume (VOL) indicator implementation.

The built-in ``VOL`` template plots the raw volume as bars together with
moving averages of the volume, one per calc param.
"""

import logging
from typing import Any

import pandas as pd

from src.data_io.frames import data_list_to_frame, frame_to_records
from src.indicators.builtin.ma import require_column, validate_periods
from src.models.core import IndicatorPlot
from src.models.enums import PlotType


logger = logging.getLogger(__name__)


def compute_vol(volume: pd.Series, periods: list[int]) -> pd.DataFrame:
    """Compute the volume column plus one volume MA per period.

    Args:
        volume: Volume series.
        periods: Rolling window lengths.

    Returns:
        pd.DataFrame: Columns 'volume' and 'ma{period}'.
    """
    columns = {"volume": volume}
    for period in periods:
        columns[f"ma{period}"] = volume.rolling(window=period, min_periods=period).mean()
    return pd.DataFrame(columns, index=volume.index)


def vol_plots(calc_params: list[Any]) -> list[IndicatorPlot]:
    """Build the volume MA lines followed by the volume bar."""
    plots = [
        IndicatorPlot(key=f"ma{period}", title=f"MA{period}: ")
        for period in calc_params
    ]
    plots.append(
        IndicatorPlot(key="volume", title="VOLUME: ", type=PlotType.BAR, base_value=0.0)
    )
    return plots


def calc_vol(data_list: list[Any], indicator) -> list[dict[str, Any]]:
    """Calculation entry point of the built-in ``VOL`` template."""
    periods = validate_periods(indicator.name, indicator.calc_params)
    frame = data_list_to_frame(data_list)
    volume = require_column(frame, "volume", indicator.name)
    result = frame_to_records(compute_vol(volume, periods))
    logger.debug("Computed VOL periods=%s points=%d", periods, len(result))
    return result
