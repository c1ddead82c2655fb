"""Conversions between the chart data list and pandas objects.

Built-in indicator calculations work on a pandas DataFrame, while the store
hands them the chart's data list (KLineData candles or plain mappings) and
expects one plain mapping per data point back.
"""

from collections.abc import Mapping, Sequence
from dataclasses import asdict, is_dataclass
import logging
from typing import Any

import numpy as np
import pandas as pd


logger = logging.getLogger(__name__)

KLINE_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume", "turnover"]


def data_list_to_frame(data_list: Sequence[Any]) -> pd.DataFrame:
    """Build a DataFrame with one row per data point.

    Args:
        data_list: KLineData instances or mappings with OHLCV keys.

    Returns:
        pd.DataFrame: Frame in data-list order with a default RangeIndex.

    Raises:
        TypeError: If an element is neither a dataclass nor a mapping.
    """
    rows = []
    for point in data_list:
        if is_dataclass(point) and not isinstance(point, type):
            rows.append(asdict(point))
        elif isinstance(point, Mapping):
            rows.append(dict(point))
        else:
            raise TypeError(
                f"Unsupported data point type: {type(point).__name__}"
            )

    if not rows:
        return pd.DataFrame(columns=KLINE_COLUMNS)
    return pd.DataFrame.from_records(rows)


def frame_to_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a computed frame into per-point result entries.

    Missing values (warm-up periods) become None.

    Args:
        frame: Computed indicator columns, one row per data point.

    Returns:
        list[dict]: One mapping per row, keyed by column name.
    """
    if frame.empty:
        return [{} for _ in range(len(frame))]
    cleaned = frame.astype(object).where(frame.notna(), None)
    records = cleaned.to_dict("records")
    return [
        {
            key: (value.item() if isinstance(value, np.generic) else value)
            for key, value in record.items()
        }
        for record in records
    ]
