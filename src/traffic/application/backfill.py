"""
Retroactive reconstruction of a historical traffic window.

The reconstruction never looks at live occupancy: it starts from empty roads
and zero totals, replays synthetic arrivals step by step and keeps each
cohort "on the road" for a travel time that depends on the hour of day.
"""
import logging
import random
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from ..domain.entities import (
    ALL_COHORTS, BackfillWindow, Cohort, RecentEntry, SamplePoint, TrafficRegime,
)
from ..domain.protocols import RandomSource
from .registry import RoadRegistry
from ...common.logging import log_execution_time

logger = logging.getLogger(__name__)

MORNING_RUSH = TrafficRegime("morning_rush", base_rate=4.0, travel_time_minutes=40.0)
EVENING_RUSH = TrafficRegime("evening_rush", base_rate=4.0, travel_time_minutes=40.0)
NIGHT = TrafficRegime("night", base_rate=0.5, travel_time_minutes=10.0)
DAYTIME = TrafficRegime("daytime", base_rate=2.0, travel_time_minutes=25.0)


def regime_for(moment: datetime) -> TrafficRegime:
    """Traffic regime for the hour of a timestamp."""
    hour = moment.hour
    if 7 <= hour <= 9:
        return MORNING_RUSH
    if 16 <= hour <= 18:
        return EVENING_RUSH
    if hour >= 23 or hour <= 4:
        return NIGHT
    return DAYTIME


def backfill_window(
    now: datetime,
    head_margin: timedelta = timedelta(minutes=1),
    length: timedelta = timedelta(minutes=55),
    step: timedelta = timedelta(minutes=5),
) -> BackfillWindow:
    """
    Window that stays clear of the live head block but inside the ingestion limit.

    end is now minus the margin, truncated to the minute; samples are taken
    every step across [end - length, end).
    """
    end = (now - head_margin).replace(second=0, microsecond=0)
    start = end - length

    timestamps = []
    t = start
    while t < end:
        timestamps.append(t)
        t += step
    return BackfillWindow(start=start, end=end, timestamps=timestamps)


class _RoadHistory:
    """Per-road reconstruction state. Discarded after a run."""

    def __init__(self, name: str):
        self.name = name
        self.entries: List[RecentEntry] = []
        self.occupancy: Dict[Cohort, float] = {c: 0.0 for c in ALL_COHORTS}
        self.totals: Dict[Cohort, float] = {c: 0.0 for c in ALL_COHORTS}

    def expire(self, cutoff: datetime):
        """Drops entries at or before cutoff and recounts occupancy from what is left."""
        self.entries = [e for e in self.entries if e.timestamp > cutoff]
        for cohort in self.occupancy:
            self.occupancy[cohort] = 0.0
        for entry in self.entries:
            self.occupancy[entry.cohort] += entry.count


class BackfillReconstructor:
    """
    Builds a self-consistent history of occupancy (gauge) and cumulative
    totals (counter) for every known road and cohort.
    """

    def __init__(
        self,
        registry: RoadRegistry,
        rng: Optional[RandomSource] = None,
        head_margin_minutes: int = 1,
        window_minutes: int = 55,
        step_minutes: int = 5,
    ):
        self.registry = registry
        self.rng = rng if rng is not None else random.Random()
        self.head_margin = timedelta(minutes=head_margin_minutes)
        self.window_length = timedelta(minutes=window_minutes)
        self.step = timedelta(minutes=step_minutes)

    def window(self, now: datetime) -> BackfillWindow:
        return backfill_window(now, self.head_margin, self.window_length, self.step)

    @log_execution_time(logger)
    def reconstruct(self, now: datetime) -> List[SamplePoint]:
        """
        Returns samples ordered by timestamp, then road, then cohort.
        All samples lie in [window.start, window.end).
        """
        window = self.window(now)
        histories = [_RoadHistory(name) for name in self.registry.names()]

        logger.info(
            "Reconstructing %s -> %s (%d timestamps, %d roads)",
            window.start.isoformat(), window.end.isoformat(), len(window.timestamps), len(histories),
        )

        samples: List[SamplePoint] = []
        for t in window.timestamps:
            regime = regime_for(t)
            cutoff = t - timedelta(minutes=regime.travel_time_minutes)

            for history in histories:
                history.expire(cutoff)

                for cohort in ALL_COHORTS:
                    entering = regime.base_rate * self.rng.uniform(0.5, 1.5)
                    history.occupancy[cohort] += entering
                    history.totals[cohort] += entering
                    history.entries.append(RecentEntry(timestamp=t, cohort=cohort, count=entering))

                    samples.append(SamplePoint(
                        timestamp=t,
                        road=history.name,
                        cohort=cohort,
                        occupancy=history.occupancy[cohort],
                        total=history.totals[cohort],
                    ))

        return samples
