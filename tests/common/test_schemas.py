import pytest
from pydantic import ValidationError
from src.common.schemas import RoadStatus, HealthStatus

def road_status(**overrides):
    data = dict(
        name="road-1", occupancy=12.5, pattern="normal", pattern_code=2,
        entry_rate=3, exit_rate=4, capacity=100, min_delay_ms=1000,
    )
    data.update(overrides)
    return RoadStatus(**data)

def test_road_status_valid():
    status = road_status()
    assert status.pattern_code == 2
    assert status.model_dump()["occupancy"] == 12.5

def test_road_status_negative_occupancy():
    with pytest.raises(ValidationError):
        road_status(occupancy=-1)

def test_road_status_invalid_pattern_code():
    with pytest.raises(ValidationError):
        road_status(pattern_code=4)

def test_road_status_zero_rate():
    with pytest.raises(ValidationError):
        road_status(entry_rate=0)

def test_health_status():
    health = HealthStatus(simulator_running=False, roads=5)
    assert health.status == "ok"
