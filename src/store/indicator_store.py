"""Per-pane indicator instance store.

This module provides IndicatorStore, which owns the two-level instance
table (pane id -> indicator name -> Indicator) and implements the instance
lifecycle on top of it:

- add: create from the template registry, override, recompute
- override: partial reconfiguration, recompute only on calc param changes
- recompute: concurrent recomputation of one, several or all instances
- remove: by name or whole pane, with empty panes dropped
- series precision propagation to PRICE/VOLUME instances

All table mutations are synchronous; the only suspension points are the
calc invocations launched by the recompute coordinator.
"""

from collections.abc import Mapping
import logging
from typing import Any, Optional, Union

from src.config.parameters import StoreSettings
from src.data_io.source import DataSource
from src.indicators.registry.store import TemplateRegistry
from src.indicators.template import Indicator
from src.models.core import SeriesPrecision
from src.models.enums import IndicatorSeries
from src.models.indicator_config import IndicatorConfig
from src.store.override import apply_override, as_config, restore_state, snapshot_state
from src.store.recompute import RecomputeCoordinator


logger = logging.getLogger(__name__)

ConfigLike = Union[IndicatorConfig, Mapping[str, Any]]
InstanceTable = dict[str, dict[str, Indicator]]


class IndicatorStore:
    """Registry and lifecycle manager for indicator instances on chart panes.

    Within one pane indicator names are unique; the same name may live in
    several panes. A pane entry exists only while it holds instances.

    Examples:
        >>> from src.data_io.source import ListDataSource
        >>> from src.indicators.registry.builtins import register_builtins
        >>> store = IndicatorStore(register_builtins(TemplateRegistry()), ListDataSource())
        >>> store.has_instances("candle_pane")
        False
    """

    def __init__(
        self,
        registry: TemplateRegistry,
        data_source: DataSource,
        settings: Optional[StoreSettings] = None,
    ) -> None:
        self._registry = registry
        self._settings = settings or StoreSettings()
        self._coordinator = RecomputeCoordinator(data_source, self._settings)
        self._instances: InstanceTable = {}

    @property
    def registry(self) -> TemplateRegistry:
        return self._registry

    @property
    def settings(self) -> StoreSettings:
        return self._settings

    @property
    def coordinator(self) -> RecomputeCoordinator:
        return self._coordinator

    # --- Lifecycle ---------------------------------------------------------------
    async def add_instance(self, pane_id: str, config: ConfigLike, is_stack: bool) -> bool:
        """Create an indicator in a pane and compute it.

        Adding a name that already exists in the pane is a no-op. Without
        stacking, every other instance of the pane is removed first.

        Args:
            pane_id: Target pane.
            config: Template name plus fields overriding its defaults.
            is_stack: Keep the pane's other instances.

        Returns:
            bool: False for a duplicate; otherwise the success flag of the
                initial computation.

        Raises:
            UnknownTemplateError: If no template is registered under the
                name. The table is left untouched.
            pydantic.ValidationError: If config is not a valid patch.
        """
        config = as_config(config)
        name = config.name

        pane_instances = self._instances.get(pane_id)
        if pane_instances is not None and name in pane_instances:
            logger.debug("Indicator already in pane pane=%s name=%s", pane_id, name)
            return False

        instance = self._registry.create(name)
        apply_override(instance, config)

        if pane_instances is None:
            pane_instances = self._instances.setdefault(pane_id, {})
        if not is_stack and pane_instances:
            logger.debug(
                "Replacing pane indicators pane=%s removed=%s",
                pane_id,
                list(pane_instances),
            )
            pane_instances.clear()
        pane_instances[name] = instance
        logger.info("Added indicator pane=%s name=%s stack=%s", pane_id, name, is_stack)

        return await self._coordinator.recompute(instance)

    def get_instances(self, pane_id: str) -> dict[str, Indicator]:
        """Return the pane's instances, or an empty mapping."""
        return self._instances.get(pane_id, {})

    def get_instance(
        self, pane_id: Optional[str] = None, name: Optional[str] = None
    ) -> Union[InstanceTable, dict[str, Indicator], Indicator, None]:
        """Look up the whole table, one pane, or one instance.

        Args:
            pane_id: Pane to look in; None returns the whole table.
            name: Indicator name inside the pane.

        Returns:
            The table when no pane is given, the pane's mapping (or None)
            when only a pane is given, else the instance (or None).
        """
        if pane_id is None:
            return self._instances
        pane_instances = self._instances.get(pane_id)
        if name is None:
            return pane_instances
        if pane_instances is None:
            return None
        return pane_instances.get(name)

    def has_instances(self, pane_id: str) -> bool:
        return bool(self._instances.get(pane_id))

    def remove_instance(self, pane_id: str, name: Optional[str] = None) -> bool:
        """Remove one instance, or every instance of a pane.

        Args:
            pane_id: Pane to remove from.
            name: Instance to remove; None clears the pane.

        Returns:
            bool: True if something was removed.
        """
        pane_instances = self._instances.get(pane_id)
        if pane_instances is None:
            return False

        removed = False
        if name is not None:
            if name in pane_instances:
                del pane_instances[name]
                removed = True
        elif pane_instances:
            pane_instances.clear()
            removed = True

        if not pane_instances:
            del self._instances[pane_id]

        if removed:
            logger.info("Removed indicator pane=%s name=%s", pane_id, name or "*")
        return removed

    # --- Recomputation ------------------------------------------------------------
    async def calc_instance(
        self, name: Optional[str] = None, pane_id: Optional[str] = None
    ) -> list[bool]:
        """Recompute a selection of instances concurrently.

        Selection: name and pane -> that instance; name only -> that name in
        every pane; neither -> every instance. A pane without a name is not a
        supported selection and recomputes nothing.

        Returns:
            list[bool]: Success flags in selection order.
        """
        targets: list[Indicator] = []
        if name is not None:
            if pane_id is not None:
                instance = self._instances.get(pane_id, {}).get(name)
                if instance is not None:
                    targets.append(instance)
            else:
                for pane_instances in self._instances.values():
                    if name in pane_instances:
                        targets.append(pane_instances[name])
        elif pane_id is not None:
            logger.warning(
                "Recompute by pane without indicator name is not supported pane=%s",
                pane_id,
            )
        else:
            for pane_instances in self._instances.values():
                targets.extend(pane_instances.values())

        return await self._coordinator.run_batch(targets)

    async def override(self, config: ConfigLike, pane_id: Optional[str] = None) -> list[bool]:
        """Reconfigure an indicator in one pane or in every pane.

        Only instances whose calc params changed are recomputed; purely
        presentational changes never trigger a calc.

        Args:
            config: Indicator name plus the fields to override.
            pane_id: Pane to target; None targets every pane.

        Returns:
            list[bool]: Success flags of the recomputations that ran.

        Raises:
            pydantic.ValidationError: If config is not a valid patch.
            Exception: Whatever a setter callback such as
                ``regenerate_plots`` raised; every targeted instance is left
                as it was before the call and nothing is recomputed.
        """
        config = as_config(config)
        if pane_id is not None:
            panes = [self._instances[pane_id]] if pane_id in self._instances else []
        else:
            panes = list(self._instances.values())

        targets: list[Indicator] = []
        applied: list[tuple[Indicator, dict[str, Any]]] = []
        try:
            for pane_instances in panes:
                instance = pane_instances.get(config.name)
                if instance is None:
                    continue
                snapshot = snapshot_state(instance)
                _changed, calc_params_changed = apply_override(instance, config)
                applied.append((instance, snapshot))
                if calc_params_changed:
                    targets.append(instance)
        except Exception:
            for instance, snapshot in applied:
                restore_state(instance, snapshot)
            raise

        return await self._coordinator.run_batch(targets)

    # --- Precision ----------------------------------------------------------------
    def set_series_precision(
        self, precision: Union[SeriesPrecision, Mapping[str, int]]
    ) -> None:
        """Push the chart's price/volume precision to matching instances.

        PRICE instances take ``precision.price`` and VOLUME instances take
        ``precision.volume``; other series are left alone. Instances whose
        precision was set by an override keep it. Never recomputes.
        """
        if not isinstance(precision, SeriesPrecision):
            precision = SeriesPrecision.from_mapping(precision)

        updated = 0
        for pane_instances in self._instances.values():
            for instance in pane_instances.values():
                if instance.series is IndicatorSeries.PRICE:
                    updated += instance.set_precision(precision.price, forced=True)
                elif instance.series is IndicatorSeries.VOLUME:
                    updated += instance.set_precision(precision.volume, forced=True)

        logger.debug(
            "Series precision applied price=%d volume=%d updated=%d",
            precision.price,
            precision.volume,
            updated,
        )
