import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from ..schemas import EmissionEstimate, EstimateRequest
from ..services.emissions import EmissionsError, EmissionsService
from ..services.submission import user_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["tools"])


def get_emissions_service(request: Request) -> EmissionsService:
    return request.app.state.emissions


@router.post("/estimate", response_model=EmissionEstimate)
async def estimate(
    payload: EstimateRequest,
    service: EmissionsService = Depends(get_emissions_service),
) -> EmissionEstimate:
    try:
        return await service.estimate(payload.distance_km, payload.mode)
    except EmissionsError as exc:
        logger.error("Estimate failed: %r", exc)
        raise HTTPException(status_code=502, detail=user_message(exc))
    except Exception as exc:
        logger.exception("Estimate request failed: %s", exc)
        raise HTTPException(status_code=502, detail=user_message(exc))
