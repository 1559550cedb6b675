class TrafficError(Exception):
    """Base exception for all traffic exporter errors."""
    pass

class RoadNotFoundError(TrafficError):
    """Raised when a command references a road that is not registered."""

    def __init__(self, road: str):
        super().__init__(f"Road {road} not found")
        self.road = road

class EncodingError(TrafficError):
    """Raised when a backfill payload cannot be serialized or compressed."""
    pass

class ConfigurationError(TrafficError):
    """Raised when configuration is invalid."""
    pass
