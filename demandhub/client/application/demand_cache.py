"""
Application layer: cache of demand records.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from demandhub.common.models import Demand


class DemandCache:
    """Keeps the last fetched list and single-demand entries in sync.

    Every write of a demand replaces its item entry and its list entry in the
    same critical section, so readers never see them disagree.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: dict[int, Demand] = {}
        self._list: list[Demand] | None = None

    def put_list(self, demands: list[Demand]) -> None:
        with self._lock:
            self._list = list(demands)
            for demand in demands:
                self._items[demand.id] = demand

    def get_list(self) -> list[Demand] | None:
        with self._lock:
            return None if self._list is None else list(self._list)

    def get(self, demand_id: int) -> Demand | None:
        with self._lock:
            return self._items.get(demand_id)

    def put(self, demand: Demand) -> None:
        """Store a fetched or updated demand."""
        with self._lock:
            self._items[demand.id] = demand
            if self._list is not None:
                self._list = [
                    demand if cached.id == demand.id else cached for cached in self._list
                ]

    def add(self, demand: Demand) -> None:
        """Store a newly created demand at the head of the list."""
        with self._lock:
            self._items[demand.id] = demand
            if self._list is not None:
                self._list = [demand] + [d for d in self._list if d.id != demand.id]

    def remove(self, demand_id: int) -> None:
        with self._lock:
            self._items.pop(demand_id, None)
            if self._list is not None:
                self._list = [d for d in self._list if d.id != demand_id]

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._list = None
