"""
Endpoint serving a reconstructed history as a remote-write payload.
"""
from fastapi import FastAPI, Depends
from fastapi.responses import PlainTextResponse, Response
from ..dependencies import get_service
from ....application.services.exporter import TrafficExporterService
from .....common.exceptions import EncodingError

app = FastAPI()

@app.get("/backfill")
def backfill(service: TrafficExporterService = Depends(get_service)):
    """
    Returns snappy-compressed protobuf covering the last hour, ending a
    minute before now so it never overlaps the live head block.
    """
    try:
        payload = service.backfill_payload()
    except EncodingError as e:
        return PlainTextResponse(str(e), status_code=500)
    return Response(content=payload, media_type="application/x-protobuf")
