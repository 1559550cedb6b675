"""
Domain protocols for the road traffic module.
"""
from typing import Protocol, Sequence
from .entities import Cohort, SamplePoint, TrafficPattern

class RandomSource(Protocol):
    """
    Pluggable source of randomness. random.Random satisfies it.
    """
    def uniform(self, a: float, b: float) -> float:
        ...

    def random(self) -> float:
        ...

    def choice(self, seq: Sequence):
        ...

class TrafficInstruments(Protocol):
    """
    Externally observable instruments updated by the simulation.
    """
    def record_entry(self, road: str, cohort: Cohort):
        ...

    def set_occupancy(self, road: str, value: float):
        ...

    def set_pattern(self, road: str, pattern: TrafficPattern):
        ...

class SampleEncoder(Protocol):
    """
    Serializes reconstructed samples into a transmissible payload.
    """
    def encode(self, samples: Sequence[SamplePoint]) -> bytes:
        ...
