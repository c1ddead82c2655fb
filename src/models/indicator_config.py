"""
Indicator configuration patch model using Pydantic.

An IndicatorConfig names an indicator and carries any subset of its
overridable fields. Which fields were actually provided is read from
``model_fields_set``, so a field left out of the patch and a field set to
``None`` stay distinguishable.
"""

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.models.core import IndicatorPlot
from src.models.enums import IndicatorSeries


class IndicatorConfig(BaseModel):
    """
    Partial configuration for an indicator instance.

    Only ``name`` is required. Keys may be given in snake_case or in
    camelCase (``calcParams``, ``shortName``, ``createToolTipDataSource``).
    ``result`` is not part of the model: computed output cannot be
    overridden.

    Attributes:
        name: Template name, also the instance key inside its pane.
        short_name: Display label.
        series: Series classification.
        calc_params: Ordered calculation parameters.
        precision: Decimal digits for formatted output; fractional values
            are floored when applied.
        plots: Visual output descriptors.
        min_value: Lower scale bound for the rendering layer.
        max_value: Upper scale bound for the rendering layer.
        should_ohlc: Whether the pane also shows candles.
        should_format_big_number: Whether values are abbreviated (K/M/B).
        styles: Style overrides, deep-merged into the current styles.
        extend_data: Opaque payload passed to calc and draw.
        regenerate_plots: Builds plots from calc params.
        create_tool_tip_data_source: Builds tooltip content.
        draw: Custom drawing callback.
        calc: Calculation callable, ``calc(data_list, indicator)``.

    Examples:
        >>> patch = IndicatorConfig.model_validate({"name": "MA", "calcParams": [10]})
        >>> patch.calc_params
        [10]
        >>> sorted(patch.model_fields_set)
        ['calc_params', 'name']
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="forbid",
    )

    name: str = Field(min_length=1)
    short_name: Optional[str] = None
    series: Optional[IndicatorSeries] = None
    calc_params: Optional[list[Any]] = None
    precision: Optional[float] = None
    plots: Optional[list[IndicatorPlot]] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    should_ohlc: Optional[bool] = None
    should_format_big_number: Optional[bool] = None
    styles: Optional[dict[str, Any]] = None
    extend_data: Any = None
    regenerate_plots: Optional[Callable[..., Any]] = None
    create_tool_tip_data_source: Optional[Callable[..., Any]] = None
    draw: Optional[Callable[..., Any]] = None
    calc: Optional[Callable[..., Any]] = None

    @field_validator("plots", mode="before")
    @classmethod
    def coerce_plots(cls, value):
        """Accept plot descriptors given as plain mappings."""
        if value is None:
            return value
        return [
            IndicatorPlot(**plot) if isinstance(plot, dict) else plot
            for plot in value
        ]

    def provided(self) -> dict[str, Any]:
        """
        Return the explicitly provided fields, excluding ``name``.

        Returns:
            Mapping of field name to value for every field set on the patch,
            including fields explicitly set to ``None``.
        """
        return {
            field_name: getattr(self, field_name)
            for field_name in self.model_fields_set
            if field_name != "name"
        }
