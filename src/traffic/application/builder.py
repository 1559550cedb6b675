"""
Builds the traffic exporter components from configuration.
"""
import random
from typing import Any, Dict, Optional
from omegaconf import DictConfig
from prometheus_client import CollectorRegistry
from ..domain.entities import RoadRates
from ..infrastructure.remote_write import RemoteWriteEncoder
from .backfill import BackfillReconstructor
from .rate_controller import RateController
from .registry import RoadRegistry
from .simulator import SimulationSupervisor
from .services.exporter import TrafficExporterService
from ...common.metrics import TrafficMetrics


class TrafficApplicationBuilder:
    """
    Step-by-step construction of the exporter, mirroring the config layout.
    Every build_* returns the builder so calls can be chained.
    """

    def __init__(self, cfg: DictConfig, collector_registry: Optional[CollectorRegistry] = None):
        self.cfg = cfg
        self.collector_registry = collector_registry
        self.metrics: Optional[TrafficMetrics] = None
        self.registry: Optional[RoadRegistry] = None
        self.controller: Optional[RateController] = None
        self.supervisor: Optional[SimulationSupervisor] = None
        self.reconstructor: Optional[BackfillReconstructor] = None
        self.encoder: Optional[RemoteWriteEncoder] = None

    def build_metrics(self):
        self.metrics = TrafficMetrics(self.collector_registry)
        return self

    def build_registry(self):
        if self.metrics is None:
            self.build_metrics()

        defaults = self.cfg.defaults
        rates = RoadRates(
            entry_rate=defaults.entry_rate,
            exit_rate=defaults.exit_rate,
            capacity=defaults.capacity,
            min_delay_ms=defaults.min_delay_ms,
        )
        self.registry = RoadRegistry(self.metrics)
        for name in self.cfg.roads:
            self.registry.register(name, rates)
        return self

    def build_controller(self):
        self.controller = RateController(self.registry, self.metrics)
        return self

    def build_simulator(self):
        sim = self.cfg.simulator
        self.supervisor = SimulationSupervisor(
            self.registry,
            self.metrics,
            entry_workers=sim.entry_workers,
            exit_workers=sim.exit_workers,
            seed=sim.seed,
        )
        return self

    def build_backfill(self):
        bf = self.cfg.backfill
        self.reconstructor = BackfillReconstructor(
            self.registry,
            rng=random.Random(bf.seed),
            head_margin_minutes=bf.head_margin_minutes,
            window_minutes=bf.window_minutes,
            step_minutes=bf.step_minutes,
        )
        self.encoder = RemoteWriteEncoder()
        return self

    def build_service(self):
        if self.registry is None:
            self.build_registry()
        if self.controller is None:
            self.build_controller()
        if self.supervisor is None:
            self.build_simulator()
        if self.reconstructor is None:
            self.build_backfill()

        return TrafficExporterService(
            registry=self.registry,
            metrics=self.metrics,
            controller=self.controller,
            supervisor=self.supervisor,
            reconstructor=self.reconstructor,
            encoder=self.encoder,
        )

    def get_components(self) -> Dict[str, Any]:
        return {
            'metrics': self.metrics,
            'registry': self.registry,
            'controller': self.controller,
            'supervisor': self.supervisor,
            'reconstructor': self.reconstructor,
            'encoder': self.encoder,
        }
