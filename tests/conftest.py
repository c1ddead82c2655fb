"""
Pytest configuration and global fixtures.

This module provides shared test fixtures used across the test suite:
deterministic candle data, template registries and indicator stores.
"""

import asyncio
import random

import numpy as np
import pytest

from src.config.parameters import StoreSettings
from src.data_io.source import ListDataSource
from src.indicators.registry.builtins import register_builtins
from src.indicators.registry.specs import IndicatorTemplate
from src.indicators.registry.store import TemplateRegistry
from src.models.core import IndicatorPlot, KLineData
from src.models.enums import IndicatorSeries
from src.store.indicator_store import IndicatorStore


SEED = 42


def _apply_global_seed():
    """Apply global deterministic seed for tests.

    Ensures repeatable outcomes for any test relying on random or numpy generation.
    """
    random.seed(SEED)
    np.random.seed(SEED)


_apply_global_seed()


def make_candles(count: int = 120, start_price: float = 100.0) -> list[KLineData]:
    """Build a deterministic random-walk candle list."""
    rng = np.random.default_rng(SEED)
    closes = start_price + np.cumsum(rng.normal(0.0, 1.0, count))
    candles = []
    previous = start_price
    for index, close in enumerate(closes):
        high = max(previous, close) + 0.5
        low = min(previous, close) - 0.5
        candles.append(
            KLineData(
                timestamp=1_735_689_600_000 + index * 60_000,
                open=float(previous),
                high=float(high),
                low=float(low),
                close=float(close),
                volume=float(1000 + index * 10),
            )
        )
        previous = close
    return candles


def sum_calc(data_list, indicator):
    """Deterministic calc: running sum of closes scaled by the first param."""
    factor = indicator.calc_params[0] if indicator.calc_params else 1
    total = 0.0
    result = []
    for point in data_list:
        total += point.close
        result.append({"sum": total * factor})
    return result


def make_template(name: str, series=IndicatorSeries.NORMAL, calc=sum_calc, calc_params=None):
    """Build a minimal template for store tests."""
    return IndicatorTemplate(
        name=name,
        calc=calc,
        series=series,
        calc_params=list(calc_params if calc_params is not None else [1]),
        plots=[IndicatorPlot(key="sum", title="SUM: ")],
    )


@pytest.fixture()
def candles():
    """Provide 120 deterministic candles."""
    return make_candles()


@pytest.fixture()
def data_source(candles):
    """Provide an in-memory data source over the sample candles."""
    return ListDataSource(candles)


@pytest.fixture()
def registry():
    """Provide a registry with the built-ins plus a few test templates."""
    registry = register_builtins(TemplateRegistry())
    registry.register_template(make_template("SUM"))
    registry.register_template(make_template("PSUM", series=IndicatorSeries.PRICE))
    registry.register_template(make_template("VSUM", series=IndicatorSeries.VOLUME))
    return registry


@pytest.fixture()
def store(registry, data_source):
    """Provide an indicator store with default settings."""
    return IndicatorStore(registry, data_source)


@pytest.fixture()
def store_factory(registry, data_source):
    """
    Provide a factory building stores with custom settings.

    Examples:
        >>> def test_custom(store_factory):
        ...     store = store_factory(calc_timeout=0.5)
    """

    def _create_store(**overrides):
        return IndicatorStore(registry, data_source, StoreSettings(**overrides))

    return _create_store


class Gate:
    """Async calc whose completion is controlled by the test."""

    def __init__(self, payload="done"):
        self.payload = payload
        self.event = asyncio.Event()
        self.started = 0

    async def __call__(self, data_list, indicator):
        self.started += 1
        await self.event.wait()
        return [{"value": self.payload} for _ in data_list]


@pytest.fixture()
def template_factory():
    """Provide the minimal template builder."""
    return make_template


@pytest.fixture()
def gate_factory():
    """Provide the controllable async calc class."""
    return Gate
