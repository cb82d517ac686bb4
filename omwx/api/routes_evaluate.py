# omwx/api/routes_evaluate.py
"""
Evaluation API routes.

Endpoints for evaluating METAR/TAF text into station assessments.
"""

from typing import List, Dict, Any, Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field

from ..logging import get_api_logger
from ..reports.models import RawReport, ReportValidationError
from ..packets.builder import StationPacketBuilder, get_station_builder

router = APIRouter(prefix="/evaluate", tags=["evaluation"])

logger = get_api_logger()

MAX_BATCH_STATIONS = 500


class EvaluateRequest(BaseModel):
    """METAR and/or TAF for one station."""
    icao: str
    metar: Optional[str] = None
    taf: Optional[str] = None


class BatchEvaluateRequest(BaseModel):
    """Request to evaluate multiple stations."""
    stations: List[EvaluateRequest] = Field(..., max_length=MAX_BATCH_STATIONS)


class BatchEvaluateResponse(BaseModel):
    """Response from batch evaluation."""
    count: int
    results: List[Dict[str, Any]]


def _reports(request: EvaluateRequest):
    """Build RawReports from a request; blank text counts as not supplied."""
    metar = RawReport.metar(request.icao, request.metar) if request.metar and request.metar.strip() else None
    taf = RawReport.taf(request.icao, request.taf) if request.taf and request.taf.strip() else None
    return metar, taf


@router.post("")
async def evaluate(
    request: EvaluateRequest,
    builder: StationPacketBuilder = Depends(get_station_builder),
) -> Dict[str, Any]:
    """
    Evaluate one station.

    Args:
        request: Station identifier with optional METAR and TAF text

    Returns:
        Station assessment record

    Raises:
        HTTPException 400: If the station identifier or reports are invalid
    """
    try:
        metar, taf = _reports(request)
        assessment = builder.build(metar, taf, icao=request.icao)
    except ReportValidationError as e:
        logger.warning("evaluate_rejected", icao=request.icao, error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return assessment.to_dict()


@router.post("/batch", response_model=BatchEvaluateResponse)
async def evaluate_batch(
    request: BatchEvaluateRequest,
    builder: StationPacketBuilder = Depends(get_station_builder),
) -> BatchEvaluateResponse:
    """
    Evaluate many stations in parallel.

    The whole batch is rejected if any station is invalid.

    Raises:
        HTTPException 400: If any station identifier or report is invalid
    """
    try:
        pairs = []
        for station in request.stations:
            metar, taf = _reports(station)
            if metar is None and taf is None:
                raise ReportValidationError(f"No METAR or TAF supplied for {station.icao}")
            pairs.append((metar, taf))
        results = builder.build_many(pairs)
    except ReportValidationError as e:
        logger.warning("batch_rejected", stations=len(request.stations), error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return BatchEvaluateResponse(
        count=len(results),
        results=[r.to_dict() for r in results],
    )
