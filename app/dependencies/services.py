from fastapi import HTTPException, Request, status
from app.services.vehicle_service import VehicleService


def get_vehicle_service(request: Request) -> VehicleService:
    """Return the VehicleService wired into the application at startup."""
    service = getattr(request.app.state, "vehicle_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Vehicle service is not ready",
        )
    return service
