"""
Enumerations for the indicator store.

This module defines type-safe enumerations used to classify indicator
instances, describe their plots and select the batch recompute policy.
"""

from enum import Enum


class IndicatorSeries(str, Enum):
    """
    Indicator series classification.

    Decides which series precision an instance follows when the chart's
    price/volume precision changes. Inherits from str so that plain strings
    coming from configuration compare equal to members.

    Attributes:
        NORMAL: Generic indicator (oscillators etc.); precision is never
            propagated to it.
        PRICE: Indicator plotted in price units (MA, EMA, BOLL...).
        VOLUME: Indicator plotted in volume units (VOL, OBV...).

    Examples:
        >>> IndicatorSeries.PRICE.value
        'price'
        >>> IndicatorSeries("volume") is IndicatorSeries.VOLUME
        True
    """

    NORMAL = "normal"
    PRICE = "price"
    VOLUME = "volume"


class PlotType(str, Enum):
    """
    Visual form of a single indicator plot.

    Attributes:
        LINE: Continuous line.
        BAR: Histogram bar.
        CIRCLE: Dot per data point.
    """

    LINE = "line"
    BAR = "bar"
    CIRCLE = "circle"


class BatchPolicy(str, Enum):
    """
    Aggregation policy for concurrent recompute batches.

    Attributes:
        COLLECT_ALL: Wait for every recomputation and report every outcome.
        FAIL_FAST: Return as soon as one recomputation reports failure;
            unsettled slots are reported as failed.

    Examples:
        >>> BatchPolicy("fail_fast") is BatchPolicy.FAIL_FAST
        True
    """

    COLLECT_ALL = "collect_all"
    FAIL_FAST = "fail_fast"
