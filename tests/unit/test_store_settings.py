"""Unit tests for StoreSettings validation."""

import pytest
from pydantic import ValidationError

from src.config.parameters import StoreSettings
from src.models.core import SeriesPrecision
from src.models.enums import BatchPolicy


def test_defaults():
    settings = StoreSettings()
    assert settings.batch_policy is BatchPolicy.COLLECT_ALL
    assert settings.calc_timeout is None
    assert settings.serialize_recompute is False
    assert settings.series_precision() == SeriesPrecision(price=2, volume=0)


def test_policy_from_string():
    assert StoreSettings(batch_policy="fail_fast").batch_policy is BatchPolicy.FAIL_FAST


@pytest.mark.parametrize(
    "overrides",
    [
        {"calc_timeout": 0},
        {"calc_timeout": -1.0},
        {"default_price_precision": -1},
        {"batch_policy": "sometimes"},
        {"unknown_option": True},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(ValidationError):
        StoreSettings(**overrides)


def test_from_mapping_drops_none():
    settings = StoreSettings.from_mapping(
        {"calc_timeout": None, "default_volume_precision": 3}
    )
    assert settings.calc_timeout is None
    assert settings.default_volume_precision == 3


def test_settings_are_frozen():
    settings = StoreSettings()
    with pytest.raises(ValidationError):
        settings.calc_timeout = 1.0
