"""Indicator instance store: per-pane tables, overrides and recomputation."""

from src.store.indicator_store import IndicatorStore
from src.store.override import apply_override
from src.store.recompute import RecomputeCoordinator

__all__ = [
    "IndicatorStore",
    "RecomputeCoordinator",
    "apply_override",
]
