"""
Domain entities for the road traffic module.
"""
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Tuple

COLORS = ("red", "blue", "green", "black", "white")
MAKERS = ("Toyota", "Ford", "BMW", "Tesla", "Honda")

# Rates divide the randomized delay, so they can never reach zero
MIN_RATE = 1


@dataclass(frozen=True)
class Cohort:
    """
    A (color, maker) label pair used to partition counts.
    """
    color: str
    maker: str

    @property
    def key(self) -> str:
        return f"{self.color}/{self.maker}"


ALL_COHORTS: List[Cohort] = [Cohort(color, maker) for color in COLORS for maker in MAKERS]


class TrafficPattern(Enum):
    """Named traffic presets. The value is the code reported on the pattern gauge."""
    NIGHT = 1
    NORMAL = 2
    RUSH_HOUR = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, name: Optional[str]) -> "TrafficPattern":
        """Unknown or missing names fall back to NORMAL."""
        if name == "rush_hour":
            return cls.RUSH_HOUR
        if name == "night":
            return cls.NIGHT
        return cls.NORMAL


@dataclass(frozen=True)
class RoadRates:
    """
    Rate parameters of a road. Swapped as a whole, never mutated in place.
    """
    entry_rate: int
    exit_rate: int
    capacity: int
    min_delay_ms: int

    def bounded(self) -> "RoadRates":
        return RoadRates(
            entry_rate=max(MIN_RATE, int(self.entry_rate)),
            exit_rate=max(MIN_RATE, int(self.exit_rate)),
            capacity=max(MIN_RATE, int(self.capacity)),
            min_delay_ms=max(0, int(self.min_delay_ms)),
        )


@dataclass(frozen=True)
class PatternPreset:
    """Rates applied by a pattern plus the share of capacity to settle at."""
    pattern: TrafficPattern
    rates: RoadRates
    target_fraction: float


PATTERN_PRESETS = {
    TrafficPattern.RUSH_HOUR: PatternPreset(
        TrafficPattern.RUSH_HOUR,
        RoadRates(entry_rate=8, exit_rate=2, capacity=150, min_delay_ms=100),
        target_fraction=0.8,
    ),
    TrafficPattern.NIGHT: PatternPreset(
        TrafficPattern.NIGHT,
        RoadRates(entry_rate=1, exit_rate=12, capacity=50, min_delay_ms=10000),
        target_fraction=0.05,
    ),
    TrafficPattern.NORMAL: PatternPreset(
        TrafficPattern.NORMAL,
        RoadRates(entry_rate=3, exit_rate=4, capacity=100, min_delay_ms=1000),
        target_fraction=0.4,
    ),
}

OccupancyListener = Callable[[str, float], None]


class Road:
    """
    Mutable per-road state.

    Rate parameters live in an immutable RoadRates snapshot that is replaced
    atomically. Occupancy changes happen inside a dedicated lock, and the
    optional listener is called while that lock is held so observers always
    see a value some mutation actually produced.
    """

    def __init__(self, name: str, rates: RoadRates, listener: Optional[OccupancyListener] = None):
        self.name = name
        self._rates = rates.bounded()
        self._rates_lock = threading.Lock()
        self._occupancy = 0.0
        self._occupancy_lock = threading.Lock()
        self._listener = listener
        self.pattern = TrafficPattern.NORMAL

    @property
    def rates(self) -> RoadRates:
        with self._rates_lock:
            return self._rates

    def set_rates(self, rates: RoadRates) -> RoadRates:
        bounded = rates.bounded()
        with self._rates_lock:
            self._rates = bounded
        return bounded

    @property
    def occupancy(self) -> float:
        with self._occupancy_lock:
            return self._occupancy

    def try_enter(self) -> bool:
        """Adds one car unless the road is at or above capacity."""
        capacity = self.rates.capacity
        with self._occupancy_lock:
            if self._occupancy >= capacity:
                return False
            self._occupancy += 1
            self._notify()
            return True

    def try_exit(self) -> bool:
        """Removes one car if any is on the road."""
        with self._occupancy_lock:
            if self._occupancy <= 0:
                return False
            self._occupancy = max(0.0, self._occupancy - 1)
            self._notify()
            return True

    def snap_down(self, target: float) -> Tuple[float, float]:
        """Caps occupancy at target in one step. Returns (before, after)."""
        with self._occupancy_lock:
            before = self._occupancy
            self._occupancy = max(0.0, min(before, target))
            if self._occupancy != before:
                self._notify()
            return before, self._occupancy

    def _notify(self):
        if self._listener is not None:
            self._listener(self.name, self._occupancy)

    def __repr__(self):
        return f"Road(name={self.name!r}, occupancy={self.occupancy}, pattern={self.pattern.label})"


@dataclass(frozen=True)
class TrafficRegime:
    """Time-of-day traffic conditions used by the backfill."""
    name: str
    base_rate: float  # cars per cohort per step
    travel_time_minutes: float


@dataclass
class RecentEntry:
    """
    Cars of one cohort that entered a road at a synthetic time step.
    """
    timestamp: datetime
    cohort: Cohort
    count: float


@dataclass(frozen=True)
class SamplePoint:
    """
    One reconstructed sample for a (road, cohort) at a timestamp.
    """
    timestamp: datetime
    road: str
    cohort: Cohort
    occupancy: float
    total: float

    @property
    def timestamp_ms(self) -> int:
        return int(self.timestamp.timestamp() * 1000)


@dataclass
class BackfillWindow:
    """Bounds of a reconstruction: samples cover [start, end)."""
    start: datetime
    end: datetime
    timestamps: List[datetime] = field(default_factory=list)
