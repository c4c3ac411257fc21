"""Capacity-bounded caches rebuilt from each telemetry refresh."""

import logging
import math
from collections.abc import Iterable

from gribble.models import CachedNetworkInterface, CachedProcess
from gribble.monitor import RawNetworkInterface, RawProcess

logger = logging.getLogger(__name__)


def _cpu_sort_key(proc: CachedProcess) -> float:
    """CPU usage as a sort key; NaN and other junk rank as idle."""
    try:
        value = float(proc.cpu_usage)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value):
        return 0.0
    return value


class ProcessCache:
    """
    Processes ordered by CPU usage, highest first.

    Rebuilt wholesale on every refresh. The provider's first ``capacity``
    processes are kept; ties keep the provider's relative order.
    """

    def __init__(self, capacity: int = 1000) -> None:
        self._capacity = capacity
        self._items: list[CachedProcess] = []

    @property
    def items(self) -> list[CachedProcess]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def rebuild(self, processes: Iterable[RawProcess]) -> None:
        """Replace the cache contents with a sorted copy of the provider data."""
        cached: list[CachedProcess] = []
        for proc in processes:
            if len(cached) >= self._capacity:
                break
            cached.append(
                CachedProcess(
                    name=proc.name,
                    pid=proc.pid,
                    cpu_usage=proc.cpu_usage,
                    memory=proc.memory,
                )
            )
        # sorted() is stable, also with reverse=True
        self._items = sorted(cached, key=_cpu_sort_key, reverse=True)


class NetworkCache:
    """Network interfaces in provider order, capped at ``capacity``."""

    def __init__(self, capacity: int = 100) -> None:
        self._capacity = capacity
        self._items: list[CachedNetworkInterface] = []

    @property
    def items(self) -> list[CachedNetworkInterface]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def rebuild(self, interfaces: Iterable[RawNetworkInterface]) -> None:
        cached: list[CachedNetworkInterface] = []
        for iface in interfaces:
            if len(cached) >= self._capacity:
                break
            cached.append(
                CachedNetworkInterface(
                    name=iface.name,
                    total_received=iface.total_received,
                    total_transmitted=iface.total_transmitted,
                )
            )
        self._items = cached

    def find(self, name: str) -> CachedNetworkInterface | None:
        """Look up an interface by name."""
        for iface in self._items:
            if iface.name == name:
                return iface
        return None
