"""Partial-field override of indicator instances.

``apply_override`` merges an IndicatorConfig patch into an existing
Indicator through its conditional setters and reports two flags: whether
anything changed, and whether the calc params changed (the only change
that requires a recomputation).
"""

import logging
from collections.abc import Mapping
from typing import Any, Union

from src.indicators.template import Indicator
from src.models.indicator_config import IndicatorConfig


logger = logging.getLogger(__name__)

# Patch field -> conditional setter, in application order.
SETTERS: dict[str, str] = {
    "short_name": "set_short_name",
    "series": "set_series",
    "calc_params": "set_calc_params",
    "plots": "set_plots",
    "min_value": "set_min_value",
    "max_value": "set_max_value",
    "precision": "set_precision",
    "should_ohlc": "set_should_ohlc",
    "should_format_big_number": "set_should_format_big_number",
    "styles": "set_styles",
    "extend_data": "set_extend_data",
    "regenerate_plots": "set_regenerate_plots",
    "create_tool_tip_data_source": "set_create_tool_tip_data_source",
    "draw": "set_draw",
}

# None on these fields means "keep current", not "clear".
IGNORE_NONE = frozenset(
    {"styles", "regenerate_plots", "create_tool_tip_data_source", "draw", "calc"}
)

# Instance state an override may touch; restored as a whole on failure.
OVERRIDABLE_STATE = (*SETTERS, "calc", "_precision_pinned")


def snapshot_state(indicator: Indicator) -> dict[str, Any]:
    """Capture the overridable attributes of an indicator.

    Setters always assign fresh objects, so a shallow capture is enough to
    restore the previous state.
    """
    return {attr: getattr(indicator, attr) for attr in OVERRIDABLE_STATE}


def restore_state(indicator: Indicator, snapshot: dict[str, Any]) -> None:
    for attr, value in snapshot.items():
        setattr(indicator, attr, value)


def as_config(config: Union[IndicatorConfig, Mapping[str, Any]]) -> IndicatorConfig:
    """Validate a raw mapping into an IndicatorConfig.

    Raises:
        pydantic.ValidationError: If the mapping is not a valid patch.
    """
    if isinstance(config, IndicatorConfig):
        return config
    return IndicatorConfig.model_validate(config)


def apply_override(
    indicator: Indicator, patch: Union[IndicatorConfig, Mapping[str, Any]]
) -> tuple[bool, bool]:
    """Apply the provided fields of a patch to an indicator.

    The patch is validated before any setter runs and the merge contains
    no suspension point. If a setter raises (for example a user supplied
    ``regenerate_plots``), the indicator is restored to its state before
    the call and the error propagates.

    Args:
        indicator: Instance to mutate in place.
        patch: Fields to override; only explicitly provided ones apply.

    Returns:
        tuple[bool, bool]: ``(changed, calc_params_changed)``.
    """
    provided = as_config(patch).provided()
    snapshot = snapshot_state(indicator)

    changed = False
    calc_params_changed = False
    try:
        for field_name, setter_name in SETTERS.items():
            if field_name not in provided:
                continue
            value = provided[field_name]
            if value is None and field_name in IGNORE_NONE:
                continue
            if getattr(indicator, setter_name)(value):
                changed = True
                if field_name == "calc_params":
                    calc_params_changed = True
    except Exception:
        restore_state(indicator, snapshot)
        logger.warning(
            "Override rolled back name=%s fields=%s", indicator.name, sorted(provided)
        )
        raise

    # calc is swapped unconditionally and never counts as a change.
    calc = provided.get("calc")
    if calc is not None:
        indicator.calc = calc

    logger.debug(
        "Override applied name=%s fields=%s changed=%s calc_params_changed=%s",
        indicator.name,
        sorted(provided),
        changed,
        calc_params_changed,
    )
    return changed, calc_params_changed
