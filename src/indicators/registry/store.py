"""Indicator template registry.

This module provides the storage and API for registering, unregistering
and instantiating indicator templates. A template is registered as a
zero-argument factory producing a fresh default-configured Indicator.
"""

import logging
from typing import Callable, Dict, List

from src.indicators.template import Indicator
from src.models.exceptions import UnknownTemplateError

from .specs import IndicatorTemplate

logger = logging.getLogger(__name__)

IndicatorFactory = Callable[[], Indicator]


class TemplateRegistry:
    """Registry mapping indicator type names to instance factories."""

    def __init__(self) -> None:
        """Initialize the template registry."""
        self._factories: Dict[str, IndicatorFactory] = {}

    def register(self, name: str, factory: IndicatorFactory) -> None:
        """Register an indicator factory.

        A later registration under the same name replaces the earlier one.

        Args:
            name: Indicator type name.
            factory: Callable returning a new default-configured Indicator.

        Raises:
            ValueError: If name is empty or factory is not callable.
        """
        if not name:
            raise ValueError("Indicator template name cannot be empty")
        if not callable(factory):
            raise ValueError(f"Factory for indicator template '{name}' must be callable")

        replaced = name in self._factories
        self._factories[name] = factory
        logger.info("Registered indicator template: %s (replaced=%s)", name, replaced)

    def register_template(self, template: IndicatorTemplate) -> None:
        """Register a declarative template under its own name.

        Args:
            template: The indicator template to register.
        """
        self.register(template.name, template.instantiate)

    def unregister(self, name: str) -> None:
        """Unregister an indicator template by name.

        Args:
            name: The template name to unregister.

        Raises:
            KeyError: If the template is not registered.
        """
        if name not in self._factories:
            raise KeyError(f"Indicator template '{name}' is not registered")

        del self._factories[name]
        logger.info("Unregistered indicator template: %s", name)

    def create(self, name: str) -> Indicator:
        """Create a fresh default instance of a registered template.

        Args:
            name: The template name.

        Returns:
            Indicator: A new instance with the template's defaults.

        Raises:
            UnknownTemplateError: If no factory is registered under name.
        """
        factory = self._factories.get(name)
        if factory is None:
            logger.error("Unknown indicator template requested name=%s", name)
            raise UnknownTemplateError(name, available=self.list_all())
        return factory()

    def list_all(self) -> List[str]:
        """List all registered template names.

        Returns:
            List[str]: Registered names in registration order.
        """
        return list(self._factories.keys())

    def exists(self, name: str) -> bool:
        """Check if a template is registered.

        Args:
            name: The template name.

        Returns:
            bool: True if registered, False otherwise.
        """
        return name in self._factories

    def clear(self) -> None:
        """Clear all registered templates (primarily for testing)."""
        self._factories.clear()
        logger.info("Cleared indicator template registry")
