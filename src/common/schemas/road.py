from pydantic import BaseModel, Field

class RoadStatus(BaseModel):
    """
    Snapshot of a simulated road.
    """
    name: str = Field(..., description="Unique road name")
    occupancy: float = Field(..., ge=0.0, description="Cars currently on the road")
    pattern: str = Field(..., description="Active traffic pattern (night, normal, rush_hour)")
    pattern_code: int = Field(..., ge=1, le=3, description="Pattern code as reported on the gauge")
    entry_rate: int = Field(..., ge=1, description="Relative entry rate")
    exit_rate: int = Field(..., ge=1, description="Relative exit rate")
    capacity: int = Field(..., ge=1, description="Soft ceiling for occupancy")
    min_delay_ms: int = Field(..., ge=0, description="Minimum delay between simulation events")

class HealthStatus(BaseModel):
    """
    Liveness report of the exporter.
    """
    status: str = Field("ok", description="Always 'ok' when the process answers")
    simulator_running: bool = Field(..., description="Whether the live simulator workers are active")
    roads: int = Field(..., ge=0, description="Number of registered roads")
