"""
Live simulation: entry and exit workers per road running in background threads.
"""
import logging
import random
import threading
from abc import ABC, abstractmethod
from typing import List, Optional
from ..domain.entities import ALL_COHORTS, Road
from ..domain.protocols import RandomSource, TrafficInstruments
from .registry import RoadRegistry

logger = logging.getLogger(__name__)


class RoadWorker(ABC):
    """
    Base loop shared by entry and exit workers.
    Each cycle computes a randomized delay from the current rate, acts once, then sleeps.
    """
    kind = "worker"

    def __init__(self, road: Road, rng: RandomSource, stop_event: threading.Event,
                 instruments: Optional[TrafficInstruments] = None):
        self.road = road
        self.rng = rng
        self.stop_event = stop_event
        self.instruments = instruments
        self.cycles = 0

    @abstractmethod
    def current_rate(self) -> int:
        """Rate that paces this worker."""
        pass

    def next_delay(self) -> float:
        """Delay in seconds: uniform(0, 1000) / rate + min_delay, computed in milliseconds."""
        rates = self.road.rates
        rate = max(1, self.current_rate())
        delay_ms = self.rng.uniform(0, 1000) / rate + rates.min_delay_ms
        return delay_ms / 1000.0

    @abstractmethod
    def step(self) -> bool:
        """Acts once on the road. Returns True if occupancy changed."""
        pass

    def run(self):
        while not self.stop_event.is_set():
            delay = self.next_delay()
            self.step()
            self.cycles += 1
            self.stop_event.wait(delay)


class EntryWorker(RoadWorker):
    """Adds cars of a random cohort while the road is below capacity."""
    kind = "entry"

    def current_rate(self) -> int:
        return self.road.rates.entry_rate

    def step(self) -> bool:
        cohort = self.rng.choice(ALL_COHORTS)
        if not self.road.try_enter():
            return False
        if self.instruments:
            self.instruments.record_entry(self.road.name, cohort)
        return True


class ExitWorker(RoadWorker):
    """Removes a car while the road is not empty. Exits carry no cohort."""
    kind = "exit"

    def current_rate(self) -> int:
        return self.road.rates.exit_rate

    def step(self) -> bool:
        return self.road.try_exit()


class SimulationSupervisor:
    """
    Owns the lifetime of every simulation worker.
    Workers share one stop event so the whole simulation can be halted at once.
    """

    def __init__(
        self,
        registry: RoadRegistry,
        instruments: Optional[TrafficInstruments] = None,
        entry_workers: int = 5,
        exit_workers: int = 3,
        seed: Optional[int] = None,
    ):
        self.registry = registry
        self.instruments = instruments
        self.entry_workers = entry_workers
        self.exit_workers = exit_workers
        self.seed = seed
        self._stop_event = threading.Event()
        self._workers: List[RoadWorker] = []
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return any(t.is_alive() for t in self._threads)

    @property
    def workers(self) -> List[RoadWorker]:
        with self._lock:
            return list(self._workers)

    def _rng_for(self, road: str, kind: str, replica: int) -> random.Random:
        if self.seed is None:
            return random.Random()
        return random.Random(f"{self.seed}/{road}/{kind}/{replica}")

    def build_workers(self, road: Road) -> List[RoadWorker]:
        """Creates the entry and exit workers of one road without starting them."""
        workers: List[RoadWorker] = []
        for i in range(self.entry_workers):
            rng = self._rng_for(road.name, EntryWorker.kind, i)
            workers.append(EntryWorker(road, rng, self._stop_event, self.instruments))
        for i in range(self.exit_workers):
            rng = self._rng_for(road.name, ExitWorker.kind, i)
            workers.append(ExitWorker(road, rng, self._stop_event, self.instruments))
        return workers

    def start(self):
        """Starts workers for every registered road. Calling it again while running is a no-op."""
        with self._lock:
            if self._threads:
                logger.info("Simulation already running")
                return

            self._stop_event.clear()
            replicas = {}
            for road in self.registry.roads():
                for worker in self.build_workers(road):
                    n = replicas.get((road.name, worker.kind), 0)
                    replicas[(road.name, worker.kind)] = n + 1
                    thread = threading.Thread(
                        target=worker.run,
                        name=f"{worker.kind}-{road.name}-{n}",
                        daemon=True,
                    )
                    self._workers.append(worker)
                    self._threads.append(thread)

            for thread in self._threads:
                thread.start()

        logger.info(
            "Simulation started: %d roads, %d entry and %d exit workers per road",
            len(self.registry), self.entry_workers, self.exit_workers,
        )

    def stop(self, timeout: float = 2.0):
        """Signals every worker to stop and waits for them (with timeout to avoid hang)."""
        self._stop_event.set()
        with self._lock:
            threads = list(self._threads)
            self._threads = []
            self._workers = []

        for thread in threads:
            thread.join(timeout=timeout)

        if threads:
            logger.info("Simulation stopped (%d workers)", len(threads))
