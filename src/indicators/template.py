"""Indicator instance with conditional setters and async recomputation.

An Indicator is the mutable realization of a registered template. Every
overridable attribute has a setter that only writes when the new value
actually differs and reports whether it did, which is what the override
path uses for change detection.
"""

import asyncio
import copy
import inspect
import logging
import math
from typing import Any, Callable, Optional

from src.models.core import IndicatorPlot
from src.models.enums import IndicatorSeries
from src.models.exceptions import CalculationTimeoutError


logger = logging.getLogger(__name__)

CalcFunc = Callable[[list[Any], "Indicator"], Any]


def _default_calc(data_list: list[Any], _indicator: "Indicator") -> list[Any]:
    return [{} for _ in data_list]


def _merge_styles(target: dict[str, Any], source: dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge_styles(target[key], value)
        else:
            target[key] = copy.deepcopy(value)


class Indicator:
    """A configured, stateful indicator attached to one chart pane.

    Attributes:
        name: Template name; identity of the instance inside its pane.
        short_name: Display label.
        series: Series classification deciding precision propagation.
        calc_params: Ordered calculation parameters.
        precision: Decimal digits for formatted output.
        plots: Visual output descriptors.
        min_value: Optional lower scale bound.
        max_value: Optional upper scale bound.
        should_ohlc: Whether the pane also shows candles.
        should_format_big_number: Whether values are abbreviated.
        styles: Style overrides, or None to use the chart's styles.
        extend_data: Opaque payload handed through to calc and draw.
        regenerate_plots: Optional ``fn(calc_params) -> list[IndicatorPlot]``.
        create_tool_tip_data_source: Optional tooltip builder.
        draw: Optional custom drawing callback.
        calc: ``calc(data_list, indicator)`` returning one entry per data
            point; may be a coroutine function.
        result: Output of the last successful calc.
    """

    def __init__(
        self,
        name: str,
        short_name: Optional[str] = None,
        series: IndicatorSeries = IndicatorSeries.NORMAL,
        calc_params: Optional[list[Any]] = None,
        precision: int = 4,
        plots: Optional[list[IndicatorPlot]] = None,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        should_ohlc: bool = False,
        should_format_big_number: bool = False,
        styles: Optional[dict[str, Any]] = None,
        extend_data: Any = None,
        regenerate_plots: Optional[Callable[[list[Any]], list[IndicatorPlot]]] = None,
        create_tool_tip_data_source: Optional[Callable[..., Any]] = None,
        draw: Optional[Callable[..., Any]] = None,
        calc: Optional[CalcFunc] = None,
    ) -> None:
        if not name:
            raise ValueError("Indicator name cannot be empty")

        self.name = name
        self.short_name = short_name if short_name is not None else name
        self.series = IndicatorSeries(series)
        self.calc_params: list[Any] = list(calc_params or [])
        self.precision = precision
        self.plots: list[IndicatorPlot] = list(plots or [])
        self.min_value = min_value
        self.max_value = max_value
        self.should_ohlc = should_ohlc
        self.should_format_big_number = should_format_big_number
        self.styles = copy.deepcopy(styles) if styles is not None else None
        self.extend_data = extend_data
        self.regenerate_plots = regenerate_plots
        self.create_tool_tip_data_source = create_tool_tip_data_source
        self.draw = draw
        self.calc: CalcFunc = calc or _default_calc
        self.result: list[Any] = []

        # True once precision was set by a user override; forced series
        # precision updates no longer apply after that.
        self._precision_pinned = False
        self._calc_lock: Optional[asyncio.Lock] = None
        self._calc_lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def __repr__(self) -> str:
        return (
            f"Indicator(name={self.name!r}, series={self.series.value}, "
            f"calc_params={self.calc_params!r}, precision={self.precision})"
        )

    # --- Conditional setters ---------------------------------------------------
    def set_short_name(self, short_name: str) -> bool:
        if short_name is not None and self.short_name != short_name:
            self.short_name = short_name
            return True
        return False

    def set_series(self, series: IndicatorSeries) -> bool:
        if series is None:
            return False
        series = IndicatorSeries(series)
        if self.series is not series:
            self.series = series
            return True
        return False

    def set_calc_params(self, calc_params: list[Any]) -> bool:
        """Set calc params and regenerate plots from them.

        Returns:
            bool: True if the parameters differ from the current ones.
        """
        if calc_params is None:
            return False
        calc_params = list(calc_params)
        if self.calc_params == calc_params:
            return False
        plots = self.plots
        if self.regenerate_plots is not None:
            plots = list(self.regenerate_plots(calc_params))
        self.calc_params = calc_params
        self.plots = plots
        return True

    def set_plots(self, plots: list[IndicatorPlot]) -> bool:
        if plots is None:
            return False
        plots = list(plots)
        if self.plots != plots:
            self.plots = plots
            return True
        return False

    def set_min_value(self, min_value: Optional[float]) -> bool:
        if self.min_value != min_value:
            self.min_value = min_value
            return True
        return False

    def set_max_value(self, max_value: Optional[float]) -> bool:
        if self.max_value != max_value:
            self.max_value = max_value
            return True
        return False

    def set_precision(self, precision: int, forced: bool = False) -> bool:
        """Set the output precision.

        Negative values are ignored. A user (non-forced) change pins the
        precision so later forced series updates leave it alone.

        Args:
            precision: Decimal digits; fractional values are floored.
            forced: True when pushed by a chart-wide series precision change.

        Returns:
            bool: True if the precision changed.
        """
        if precision is None or precision < 0:
            return False
        precision = math.floor(precision)
        if precision == self.precision:
            return False
        if forced and self._precision_pinned:
            return False
        self.precision = precision
        if not forced:
            self._precision_pinned = True
        return True

    def set_should_ohlc(self, should_ohlc: bool) -> bool:
        if should_ohlc is not None and self.should_ohlc != should_ohlc:
            self.should_ohlc = should_ohlc
            return True
        return False

    def set_should_format_big_number(self, should_format_big_number: bool) -> bool:
        if should_format_big_number is not None and self.should_format_big_number != should_format_big_number:
            self.should_format_big_number = should_format_big_number
            return True
        return False

    def set_styles(self, styles: dict[str, Any]) -> bool:
        """Deep-merge style overrides into the current styles.

        Returns:
            bool: True if the merged styles differ from the current ones.
        """
        merged = copy.deepcopy(self.styles) if self.styles is not None else {}
        _merge_styles(merged, styles)
        if merged == self.styles:
            return False
        self.styles = merged
        return True

    def set_extend_data(self, extend_data: Any) -> bool:
        if extend_data is not self.extend_data:
            self.extend_data = extend_data
            return True
        return False

    def set_regenerate_plots(self, regenerate_plots: Callable[..., Any]) -> bool:
        if regenerate_plots is not self.regenerate_plots:
            self.regenerate_plots = regenerate_plots
            return True
        return False

    def set_create_tool_tip_data_source(self, create_tool_tip_data_source: Callable[..., Any]) -> bool:
        if create_tool_tip_data_source is not self.create_tool_tip_data_source:
            self.create_tool_tip_data_source = create_tool_tip_data_source
            return True
        return False

    def set_draw(self, draw: Callable[..., Any]) -> bool:
        if draw is not self.draw:
            self.draw = draw
            return True
        return False

    # --- Calculation -----------------------------------------------------------
    async def calc_indicator(
        self,
        data_list: list[Any],
        timeout: Optional[float] = None,
        serialize: bool = False,
    ) -> bool:
        """Run calc over the data list and store its output as result.

        Any exception raised by calc (or a timeout) is logged and reported
        as False; the previous result is kept in that case.

        Args:
            data_list: The chart's full ordered data list.
            timeout: Optional deadline in seconds for one calc run.
            serialize: When True, overlapping runs on this instance are
                executed one after another instead of racing.

        Returns:
            bool: True if calc succeeded and result was replaced.
        """
        if serialize:
            async with self._lock_for_running_loop():
                return await self._run_calc(data_list, timeout)
        return await self._run_calc(data_list, timeout)

    def _lock_for_running_loop(self) -> asyncio.Lock:
        # An asyncio.Lock is bound to one event loop; start a fresh one when
        # the instance is recomputed under a different loop.
        loop = asyncio.get_running_loop()
        if self._calc_lock is None or self._calc_lock_loop is not loop:
            self._calc_lock = asyncio.Lock()
            self._calc_lock_loop = loop
        return self._calc_lock

    async def _run_calc(self, data_list: list[Any], timeout: Optional[float]) -> bool:
        try:
            if timeout is None:
                result = await self._invoke_calc(data_list)
            else:
                result = await asyncio.wait_for(self._invoke_calc(data_list), timeout=timeout)
            result = list(result) if result is not None else []
        except asyncio.TimeoutError:
            error = CalculationTimeoutError(self.name, timeout)
            logger.warning("Indicator calc failed name=%s: %s", self.name, error)
            return False
        except Exception:  # pylint: disable=broad-except
            logger.warning(
                "Indicator calc failed name=%s calc_params=%s",
                self.name,
                self.calc_params,
                exc_info=True,
            )
            return False

        self.result = result
        logger.debug(
            "Computed indicator name=%s points=%d", self.name, len(self.result)
        )
        return True

    async def _invoke_calc(self, data_list: list[Any]) -> Any:
        result = self.calc(data_list, self)
        if inspect.isawaitable(result):
            result = await result
        return result
