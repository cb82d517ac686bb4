# omwx/api/routes_runways.py
"""
Runway geometry API routes.
"""

from typing import List, Dict, Any

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..logging import get_api_logger
from ..reports.models import normalize_station, ReportValidationError
from ..packets.builder import StationPacketBuilder, get_station_builder

router = APIRouter(prefix="/runways", tags=["runways"])

logger = get_api_logger()


class RunwaysResponse(BaseModel):
    """Runway ends known for a station (empty when unknown)."""
    icao: str
    runways: List[Dict[str, Any]]


@router.get("/{icao}", response_model=RunwaysResponse)
async def get_runways(
    icao: str,
    builder: StationPacketBuilder = Depends(get_station_builder),
) -> RunwaysResponse:
    """
    Get runway ends used for the crosswind advisory.

    Raises:
        HTTPException 400: If the station identifier is invalid
    """
    try:
        station = normalize_station(icao)
    except ReportValidationError as e:
        logger.warning("runways_rejected", icao=icao, error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return RunwaysResponse(
        icao=station,
        runways=[end.to_dict() for end in builder.runways.resolve(station)],
    )
