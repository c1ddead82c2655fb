"""CSV candle loading.

Reads OHLCV candles from a CSV file with pandas and returns them as the
ordered list of KLineData the indicator store feeds to calculations.
"""

import logging
from pathlib import Path

import pandas as pd

from src.models.core import KLineData


logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["timestamp", "open", "high", "low", "close"]


def _to_epoch_millis(column: pd.Series) -> pd.Series:
    if pd.api.types.is_numeric_dtype(column):
        return column.astype("int64")
    parsed = pd.to_datetime(column, utc=True)
    return (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(milliseconds=1)


def load_kline_csv(path: Path | str) -> list[KLineData]:
    """Load candles from a CSV file.

    The file needs ``timestamp, open, high, low, close`` columns (case
    insensitive); ``volume`` and ``turnover`` are optional. Timestamps may be
    epoch milliseconds or any datetime string pandas can parse. Rows are
    sorted by timestamp.

    Args:
        path: CSV file path.

    Returns:
        list[KLineData]: Candles, oldest first.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If required columns are missing.
    """
    csv_path = Path(path)
    if not csv_path.exists():
        msg = "Candle file not found: %s"
        logger.error(msg, csv_path)
        raise FileNotFoundError(msg % csv_path)

    df = pd.read_csv(csv_path)
    df.columns = [str(column).strip().lower() for column in df.columns]

    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(
            f"Missing required columns {missing} in {csv_path}. "
            f"Available: {list(df.columns)}"
        )

    df["timestamp"] = _to_epoch_millis(df["timestamp"])
    if "volume" not in df.columns:
        df["volume"] = 0.0
    df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)

    has_turnover = "turnover" in df.columns
    candles = [
        KLineData(
            timestamp=int(row.timestamp),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
            turnover=(
                float(row.turnover)
                if has_turnover and pd.notna(row.turnover)
                else None
            ),
        )
        for row in df.itertuples(index=False)
    ]

    logger.info("Loaded %d candles from %s", len(candles), csv_path)
    return candles
