"""Indicator template data structures.

This module defines the declarative description of an indicator template:
the defaults a freshly created instance starts from.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from src.indicators.template import CalcFunc, Indicator
from src.models.core import IndicatorPlot
from src.models.enums import IndicatorSeries


@dataclass
class IndicatorTemplate:
    """Default configuration of a registered indicator.

    Attributes:
        name: Unique template identifier.
        calc: Calculation callable, ``calc(data_list, indicator)``.
        short_name: Default display label (defaults to ``name``).
        series: Series classification.
        calc_params: Default calculation parameters.
        precision: Default output precision.
        plots: Default plots; ignored when ``regenerate_plots`` is set.
        regenerate_plots: Builds plots from calc params.
        should_ohlc: Whether the pane also shows candles.
        should_format_big_number: Whether values are abbreviated.
        min_value: Optional lower scale bound.
        max_value: Optional upper scale bound.
        styles: Default style overrides.
        version: Semantic version string.
    """

    name: str
    calc: CalcFunc
    short_name: Optional[str] = None
    series: IndicatorSeries = IndicatorSeries.NORMAL
    calc_params: List[Any] = field(default_factory=list)
    precision: int = 4
    plots: List[IndicatorPlot] = field(default_factory=list)
    regenerate_plots: Optional[Callable[[List[Any]], List[IndicatorPlot]]] = None
    should_ohlc: bool = False
    should_format_big_number: bool = False
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    styles: Optional[Dict[str, Any]] = None
    version: str = "1.0.0"

    def __post_init__(self) -> None:
        """Validate indicator template after initialization."""
        if not self.name:
            raise ValueError("Indicator name cannot be empty")

        if not callable(self.calc):
            raise ValueError(f"Indicator '{self.name}' calc must be callable")

        if self.precision < 0:
            raise ValueError(
                f"Indicator '{self.name}' precision must be >= 0, got {self.precision}"
            )

    def instantiate(self) -> Indicator:
        """Create a fresh default-configured instance of this template."""
        plots = (
            self.regenerate_plots(list(self.calc_params))
            if self.regenerate_plots is not None
            else self.plots
        )
        return Indicator(
            name=self.name,
            short_name=self.short_name,
            series=self.series,
            calc_params=list(self.calc_params),
            precision=self.precision,
            plots=list(plots),
            min_value=self.min_value,
            max_value=self.max_value,
            should_ohlc=self.should_ohlc,
            should_format_big_number=self.should_format_big_number,
            styles=self.styles,
            regenerate_plots=self.regenerate_plots,
            calc=self.calc,
        )
