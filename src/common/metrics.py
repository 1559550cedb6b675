from typing import Optional
from prometheus_client import CollectorRegistry, Counter, Gauge
from ..traffic.domain.entities import Cohort, TrafficPattern

class TrafficMetrics:
    """Prometheus instruments updated by the live simulation"""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.car_counter = Counter(
            'road_traffic_total',
            'Total number of cars passing on the road.',
            ['road', 'color', 'maker'],
            registry=self.registry,
        )
        self.cars_on_road = Gauge(
            'cars_on_road',
            'Number of cars currently on the road.',
            ['road'],
            registry=self.registry,
        )
        self.traffic_pattern = Gauge(
            'traffic_pattern',
            'Current traffic pattern (1=night, 2=normal, 3=rush_hour)',
            ['road'],
            registry=self.registry,
        )

    def record_entry(self, road: str, cohort: Cohort):
        self.car_counter.labels(road, cohort.color, cohort.maker).inc()

    def set_occupancy(self, road: str, value: float):
        self.cars_on_road.labels(road).set(value)

    def set_pattern(self, road: str, pattern: TrafficPattern):
        self.traffic_pattern.labels(road).set(pattern.value)

    def get_value(self, name: str, **labels) -> Optional[float]:
        """Reads the current value of a sample, mostly for status and tests."""
        return self.registry.get_sample_value(name, labels)
