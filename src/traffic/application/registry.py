"""
Registry of simulated roads.
"""
from typing import Dict, Iterator, List, Optional
from ..domain.entities import Road, RoadRates, TrafficPattern
from ..domain.protocols import TrafficInstruments
from ...common.exceptions import RoadNotFoundError
from ...common.locks import ReadWriteLock


class RoadRegistry:
    """
    Owns the name -> Road mapping.
    Read-mostly after startup: lookups take a shared lock, registration an exclusive one.
    """

    def __init__(self, instruments: Optional[TrafficInstruments] = None):
        self._roads: Dict[str, Road] = {}
        self._lock = ReadWriteLock()
        self.instruments = instruments

    def register(self, name: str, rates: RoadRates) -> Road:
        """
        Creates a road with the given default rates.

        Raises:
            ValueError: if the name is already registered
        """
        listener = self.instruments.set_occupancy if self.instruments else None
        with self._lock.write_locked():
            if name in self._roads:
                raise ValueError(f"Road {name} already exists")
            road = Road(name, rates, listener=listener)
            self._roads[name] = road

        if self.instruments:
            self.instruments.set_occupancy(name, road.occupancy)
            self.instruments.set_pattern(name, TrafficPattern.NORMAL)
        return road

    def get(self, name: str) -> Road:
        with self._lock.read_locked():
            road = self._roads.get(name)
        if road is None:
            raise RoadNotFoundError(name)
        return road

    def names(self) -> List[str]:
        with self._lock.read_locked():
            return list(self._roads)

    def roads(self) -> List[Road]:
        with self._lock.read_locked():
            return list(self._roads.values())

    def __contains__(self, name: str) -> bool:
        with self._lock.read_locked():
            return name in self._roads

    def __iter__(self) -> Iterator[Road]:
        return iter(self.roads())

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._roads)
