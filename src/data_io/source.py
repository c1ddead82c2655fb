"""Chart data sources feeding indicator calculations.

The indicator store only needs ``get_data_list()``: the chart's full,
ordered list of data points. ``ListDataSource`` is the in-memory
implementation used by the CLI and the tests.
"""

from collections.abc import Iterable, Sequence
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DataSource(Protocol):
    """Anything that can hand out the chart's ordered data list."""

    def get_data_list(self) -> Sequence[Any]:
        """Return the chart's data points, oldest first."""
        ...


class ListDataSource:
    """In-memory data source backed by a plain list."""

    def __init__(self, data_list: Iterable[Any] | None = None) -> None:
        self._data_list: list[Any] = list(data_list or [])

    def get_data_list(self) -> list[Any]:
        return self._data_list

    def set_data_list(self, data_list: Iterable[Any]) -> None:
        """Replace the whole data list."""
        self._data_list = list(data_list)
        logger.debug("Data list replaced points=%d", len(self._data_list))

    def append(self, point: Any) -> None:
        """Append a newer data point."""
        self._data_list.append(point)

    def __len__(self) -> int:
        return len(self._data_list)
