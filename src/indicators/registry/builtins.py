"""Built-in indicator templates.

This module describes the reference templates (MA, EMA, VOL, RSI) and
registers them with a TemplateRegistry on request. Nothing is registered
at import time; every store owns its registry.
"""

import logging

from src.indicators.builtin.ema import calc_ema, ema_plots
from src.indicators.builtin.ma import calc_ma, ma_plots
from src.indicators.builtin.rsi import calc_rsi, rsi_plots
from src.indicators.builtin.vol import calc_vol, vol_plots
from src.indicators.registry.specs import IndicatorTemplate
from src.indicators.registry.store import TemplateRegistry
from src.models.enums import IndicatorSeries


logger = logging.getLogger(__name__)


def builtin_templates() -> list[IndicatorTemplate]:
    """Return fresh descriptions of every built-in template.

    Returns:
        list[IndicatorTemplate]: MA, EMA, VOL and RSI templates.
    """
    return [
        IndicatorTemplate(
            name="MA",
            short_name="MA",
            series=IndicatorSeries.PRICE,
            calc_params=[5, 10, 30, 60],
            precision=2,
            should_ohlc=True,
            regenerate_plots=ma_plots,
            calc=calc_ma,
        ),
        IndicatorTemplate(
            name="EMA",
            short_name="EMA",
            series=IndicatorSeries.PRICE,
            calc_params=[6, 12, 20],
            precision=2,
            should_ohlc=True,
            regenerate_plots=ema_plots,
            calc=calc_ema,
        ),
        IndicatorTemplate(
            name="VOL",
            short_name="VOL",
            series=IndicatorSeries.VOLUME,
            calc_params=[5, 10, 20],
            precision=0,
            should_format_big_number=True,
            min_value=0.0,
            regenerate_plots=vol_plots,
            calc=calc_vol,
        ),
        IndicatorTemplate(
            name="RSI",
            short_name="RSI",
            series=IndicatorSeries.NORMAL,
            calc_params=[6, 12, 24],
            precision=2,
            min_value=0.0,
            max_value=100.0,
            regenerate_plots=rsi_plots,
            calc=calc_rsi,
        ),
    ]


def register_builtins(registry: TemplateRegistry) -> TemplateRegistry:
    """Register all built-in templates with the given registry.

    Re-registering replaces the previous factories, so calling this more
    than once is safe.

    Args:
        registry: Registry to populate.

    Returns:
        TemplateRegistry: The same registry, for chaining.
    """
    templates = builtin_templates()
    for template in templates:
        registry.register_template(template)

    logger.info(
        "Built-in indicator templates registered: %s",
        ", ".join(template.name for template in templates),
    )
    return registry
