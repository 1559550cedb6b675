import pytest
from datetime import datetime, timezone
from omegaconf import OmegaConf
from prometheus_client import CollectorRegistry
from src.common.config.models import ExporterConfig
from src.common.metrics import TrafficMetrics
from src.traffic.application.registry import RoadRegistry
from src.traffic.domain.entities import RoadRates


class FixedRandom:
    """
    Deterministic stand-in for random.Random.
    uniform() returns the midpoint, choice() the first element.
    """
    def uniform(self, a, b):
        return (a + b) / 2.0

    def random(self):
        return 0.5

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def fixed_random():
    return FixedRandom()

@pytest.fixture
def default_rates():
    return RoadRates(entry_rate=1, exit_rate=1, capacity=100, min_delay_ms=500)

@pytest.fixture
def metrics():
    return TrafficMetrics(CollectorRegistry())

@pytest.fixture
def registry(metrics, default_rates):
    registry = RoadRegistry(metrics)
    registry.register("road-1", default_rates)
    registry.register("Ayalon", default_rates)
    return registry

@pytest.fixture
def exporter_config():
    cfg = OmegaConf.structured(ExporterConfig)
    cfg.roads = ["road-1", "Ayalon"]
    cfg.simulator.seed = 7
    cfg.backfill.seed = 42
    return cfg

@pytest.fixture
def noon():
    return datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
