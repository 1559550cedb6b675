"""
Facade over the traffic components used by the HTTP layer and the CLI.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional
from ...domain.entities import TrafficPattern
from ...domain.protocols import SampleEncoder
from ..backfill import BackfillReconstructor
from ..rate_controller import RateController
from ..registry import RoadRegistry
from ..simulator import SimulationSupervisor
from ....common.metrics import TrafficMetrics
from ....common.schemas import RoadStatus

logger = logging.getLogger(__name__)


class TrafficExporterService:
    """
    Owns the registry, the live simulation and the backfill pipeline.
    """

    def __init__(
        self,
        registry: RoadRegistry,
        metrics: TrafficMetrics,
        controller: RateController,
        supervisor: SimulationSupervisor,
        reconstructor: BackfillReconstructor,
        encoder: SampleEncoder,
    ):
        self.registry = registry
        self.metrics = metrics
        self.controller = controller
        self.supervisor = supervisor
        self.reconstructor = reconstructor
        self.encoder = encoder

    def start(self):
        self.supervisor.start()

    def stop(self):
        self.supervisor.stop()

    @property
    def is_running(self) -> bool:
        return self.supervisor.is_running

    def set_pattern(self, road: str, pattern_name: Optional[str]) -> TrafficPattern:
        """Raises RoadNotFoundError for unknown roads."""
        return self.controller.apply_pattern(road, pattern_name)

    def backfill_payload(self, now: Optional[datetime] = None) -> bytes:
        """
        Reconstructs the history ending before now and encodes it.
        Nothing is returned if encoding fails (EncodingError propagates).
        """
        if now is None:
            now = datetime.now(timezone.utc)

        logger.info("Backfill request received (now: %s)", now.isoformat())
        samples = self.reconstructor.reconstruct(now)
        payload = self.encoder.encode(samples)

        window = self.reconstructor.window(now)
        logger.info(
            "Backfill payload ready: %d samples, %d bytes, range %s to %s",
            len(samples), len(payload), window.start.isoformat(), window.end.isoformat(),
        )
        return payload

    def get_status(self) -> List[RoadStatus]:
        statuses = []
        for road in self.registry.roads():
            rates = road.rates
            statuses.append(RoadStatus(
                name=road.name,
                occupancy=road.occupancy,
                pattern=road.pattern.label,
                pattern_code=road.pattern.value,
                entry_rate=rates.entry_rate,
                exit_rate=rates.exit_rate,
                capacity=rates.capacity,
                min_delay_ms=rates.min_delay_ms,
            ))
        return statuses
