"""Indicator template registry package.

This package provides the registry that maps indicator type names to
factories producing default-configured indicator instances.
"""

from .specs import IndicatorTemplate
from .store import IndicatorFactory, TemplateRegistry


__all__ = [
    "IndicatorFactory",
    "IndicatorTemplate",
    "TemplateRegistry",
]
