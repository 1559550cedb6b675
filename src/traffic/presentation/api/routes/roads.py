"""
Endpoints for road patterns, status and metrics exposition.
"""
from typing import List
from fastapi import FastAPI, Depends, Query
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from ..dependencies import get_service
from ....application.services.exporter import TrafficExporterService
from .....common.exceptions import RoadNotFoundError
from .....common.schemas import RoadStatus, HealthStatus

app = FastAPI()

@app.get("/set_rate", response_class=PlainTextResponse)
def set_rate(
    road: str = Query("", description="Road name"),
    rate: str = Query("", description="Pattern: rush_hour, night or anything else for normal"),
    service: TrafficExporterService = Depends(get_service),
):
    """
    Applies a traffic pattern to a road.
    Anything other than rush_hour or night is treated as normal.
    """
    try:
        service.set_pattern(road, rate)
    except RoadNotFoundError as e:
        return PlainTextResponse(str(e), status_code=404)
    return f"Traffic pattern for road {road} set to {rate}"

@app.get("/roads", response_model=List[RoadStatus])
def list_roads(service: TrafficExporterService = Depends(get_service)):
    """Status of all roads."""
    return service.get_status()

@app.get("/health", response_model=HealthStatus)
def health(service: TrafficExporterService = Depends(get_service)):
    return HealthStatus(simulator_running=service.is_running, roads=len(service.registry))

@app.get("/metrics")
def metrics(service: TrafficExporterService = Depends(get_service)):
    return Response(generate_latest(service.metrics.registry), media_type=CONTENT_TYPE_LATEST)
