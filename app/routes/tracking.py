from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from app.dependencies.services import get_vehicle_service
from app.exceptions import VehicleServiceError
from app.schemas.tracking import TrackingDataRequest
from app.services.vehicle_service import VehicleService
from app.utils.body import decode_body, request_body
from app.utils.responses import success_response

router = APIRouter(prefix="/api/v1/tracking", tags=["Tracking"])


@router.post("")
def publish_tracking_data(request: Request, service: VehicleService = Depends(get_vehicle_service)):
    """Publish one telemetry message onto the tracking queue."""
    body = request_body(request)
    if body is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="invalid request")

    req = decode_body(body, TrackingDataRequest)
    try:
        service.publish_tracking_data(req)
    except (VehicleServiceError, ValidationError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return success_response(None, "successfully published tracking data")
