"""
Applies traffic pattern presets to roads.
"""
import logging
from typing import Optional
from ..domain.entities import PATTERN_PRESETS, TrafficPattern
from ..domain.protocols import TrafficInstruments
from .registry import RoadRegistry

logger = logging.getLogger(__name__)


class RateController:
    """
    Swaps a road's rate parameters for a pattern preset and rebalances occupancy.

    Traffic dissipates faster than it builds: when the road holds more cars
    than the new target the surplus is removed at once, otherwise occupancy
    climbs through ordinary entry events. The target is taken from the
    capacity in force before the swap.
    """

    def __init__(self, registry: RoadRegistry, instruments: Optional[TrafficInstruments] = None):
        self.registry = registry
        self.instruments = instruments

    def apply_pattern(self, road_name: str, pattern_name: Optional[str]) -> TrafficPattern:
        """
        Applies the preset named pattern_name to the road.

        Unknown pattern names fall back to normal.

        Raises:
            RoadNotFoundError: if the road is not registered (no state is changed)
        """
        road = self.registry.get(road_name)
        preset = PATTERN_PRESETS[TrafficPattern.parse(pattern_name)]

        target = road.rates.capacity * preset.target_fraction

        road.set_rates(preset.rates)
        road.pattern = preset.pattern
        if self.instruments:
            self.instruments.set_pattern(road.name, preset.pattern)

        occupancy_before, occupancy_after = road.snap_down(target)

        logger.info(
            "Pattern %s applied to %s (occupancy %.1f -> %.1f, target %.1f)",
            preset.pattern.label, road.name, occupancy_before, occupancy_after, target,
        )
        return preset.pattern
