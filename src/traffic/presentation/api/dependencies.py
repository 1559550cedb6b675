"""
Shared service singleton for the API routes.
"""
from typing import Optional
from fastapi import HTTPException
from ...application.services.exporter import TrafficExporterService

_service: Optional[TrafficExporterService] = None
_autostart: bool = True

def init_service(service: TrafficExporterService, autostart: bool = True):
    """Registers the service. With autostart the simulation runs with the server."""
    global _service, _autostart
    _service = service
    _autostart = autostart

def get_service() -> TrafficExporterService:
    if _service is None:
        raise HTTPException(status_code=503, detail="Traffic service not initialized")
    return _service

def reset_service():
    global _service, _autostart
    _service = None
    _autostart = True
