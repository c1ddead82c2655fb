"""Unit tests for CSV candle loading and the in-memory data source."""

import pytest

from src.data_io.loader import load_kline_csv
from src.data_io.source import DataSource, ListDataSource
from src.models.core import KLineData


def test_load_epoch_millis(tmp_path):
    csv_path = tmp_path / "candles.csv"
    csv_path.write_text(
        "Timestamp,Open,High,Low,Close,Volume\n"
        "1735689660000,2,3,1,2.5,20\n"
        "1735689600000,1,2,0.5,1.5,10\n"
    )
    candles = load_kline_csv(csv_path)
    assert [c.timestamp for c in candles] == [1735689600000, 1735689660000]
    assert candles[0] == KLineData(
        timestamp=1735689600000, open=1.0, high=2.0, low=0.5, close=1.5, volume=10.0
    )


def test_load_datetime_strings_without_volume(tmp_path):
    csv_path = tmp_path / "candles.csv"
    csv_path.write_text(
        "timestamp,open,high,low,close\n"
        "2025-01-01T00:00:00Z,1,2,0.5,1.5\n"
    )
    candles = load_kline_csv(csv_path)
    assert candles[0].timestamp == 1735689600000
    assert candles[0].volume == 0.0
    assert candles[0].turnover is None


def test_missing_columns(tmp_path):
    csv_path = tmp_path / "candles.csv"
    csv_path.write_text("timestamp,close\n1,2\n")
    with pytest.raises(ValueError, match="Missing required columns"):
        load_kline_csv(csv_path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_kline_csv(tmp_path / "absent.csv")


def test_list_data_source(candles):
    source = ListDataSource()
    assert isinstance(source, DataSource)
    assert source.get_data_list() == []
    source.set_data_list(candles[:2])
    source.append(candles[2])
    assert source.get_data_list() == candles[:3]
    assert len(source) == 3
