"""Concurrent recomputation of indicator instances.

The coordinator pulls the chart's data list from the data source, launches
one recomputation per selected instance as an asyncio task, and joins the
batch according to the configured BatchPolicy.
"""

import asyncio
import logging
from typing import Any, Optional

from src.config.parameters import StoreSettings
from src.data_io.source import DataSource
from src.indicators.template import Indicator
from src.models.enums import BatchPolicy


logger = logging.getLogger(__name__)


class RecomputeCoordinator:
    """Runs indicator recomputations and aggregates their outcomes.

    Overlapping recomputations of the same instance are not deduplicated:
    whichever settles last writes the result, unless
    ``settings.serialize_recompute`` is enabled.
    """

    def __init__(self, data_source: DataSource, settings: Optional[StoreSettings] = None) -> None:
        self._data_source = data_source
        self._settings = settings or StoreSettings()
        # Tasks left running by fail-fast batches; kept referenced until done.
        self._background: set[asyncio.Task] = set()

    @property
    def settings(self) -> StoreSettings:
        return self._settings

    def data_list(self) -> list[Any]:
        """Return the data source's current data list."""
        return list(self._data_source.get_data_list())

    async def recompute(self, indicator: Indicator, data_list: Optional[list[Any]] = None) -> bool:
        """Recompute one instance.

        Args:
            indicator: Instance whose result is replaced on success.
            data_list: Data to feed calc; defaults to the source's list.

        Returns:
            bool: True if calc succeeded.
        """
        if data_list is None:
            data_list = self.data_list()
        return await indicator.calc_indicator(
            data_list,
            timeout=self._settings.calc_timeout,
            serialize=self._settings.serialize_recompute,
        )

    async def run_batch(self, indicators: list[Indicator]) -> list[bool]:
        """Recompute instances concurrently and join them.

        Args:
            indicators: Instances in selection order.

        Returns:
            list[bool]: One success flag per instance, in selection order.
                Under FAIL_FAST, instances still running when the first
                failure is observed are reported as False.
        """
        if not indicators:
            return []

        data_list = self.data_list()
        tasks = [
            asyncio.ensure_future(self.recompute(indicator, data_list))
            for indicator in indicators
        ]

        if self._settings.batch_policy is BatchPolicy.COLLECT_ALL:
            outcomes = list(await asyncio.gather(*tasks))
        else:
            outcomes = await self._join_fail_fast(tasks)

        failed = outcomes.count(False)
        if failed:
            logger.warning(
                "Recompute batch finished size=%d failed=%d policy=%s",
                len(outcomes),
                failed,
                self._settings.batch_policy.value,
            )
        else:
            logger.debug("Recompute batch finished size=%d", len(outcomes))
        return outcomes

    async def _join_fail_fast(self, tasks: list[asyncio.Future]) -> list[bool]:
        pending = set(tasks)
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            if any(not task.result() for task in done):
                break

        for task in pending:
            self._background.add(task)
            task.add_done_callback(self._background.discard)
        if pending:
            logger.debug(
                "Fail-fast batch returned early, %d recomputations still running",
                len(pending),
            )
        return [task.result() if task.done() else False for task in tasks]

    async def drain(self) -> None:
        """Wait for recomputations left running by fail-fast batches."""
        if self._background:
            await asyncio.gather(*list(self._background))
