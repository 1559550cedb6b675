from .road import RoadStatus, HealthStatus

__all__ = [
    "RoadStatus",
    "HealthStatus",
]
