from fastapi import APIRouter, Depends, HTTPException, Request, status
from pymongo.errors import PyMongoError
from app.dependencies.services import get_vehicle_service
from app.exceptions import InvalidRequestError, VehicleNotFoundError, VehicleServiceError
from app.schemas.vehicle import VehicleRequest
from app.services.vehicle_service import VehicleService
from app.utils.body import decode_body, request_body
from app.utils.responses import success_response
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/vehicles", tags=["Vehicles"])


@router.post("")
def create_vehicle(request: Request, service: VehicleService = Depends(get_vehicle_service)):
    req = decode_body(request_body(request), VehicleRequest)
    try:
        vehicle = service.create_vehicle(req)
    except (VehicleServiceError, PyMongoError) as e:
        logger.warning(f"Failed to create vehicle: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return success_response(vehicle, "successfully created vehicle")


@router.get("")
def find_vehicles(request: Request, service: VehicleService = Depends(get_vehicle_service)):
    """
    List vehicles. Query parameters: page, limit, sort_by, sort_order,
    _id, vehicle_name, vehicle_model, license_number, vehicle_status, mileage.
    """
    try:
        vehicles = service.find_vehicles(request.query_params)
    except (VehicleServiceError, PyMongoError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not vehicles:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="not found")

    return success_response(vehicles, "successfully fetched vehicles")


@router.get("/")
def get_vehicle_without_id(service: VehicleService = Depends(get_vehicle_service)):
    return _get_vehicle("", service)


@router.get("/{vehicle_id}")
def get_vehicle(vehicle_id: str, service: VehicleService = Depends(get_vehicle_service)):
    return _get_vehicle(vehicle_id, service)


@router.get("/{vehicle_id}/{rest:path}")
def get_vehicle_nested(vehicle_id: str, rest: str,
                       service: VehicleService = Depends(get_vehicle_service)):
    # segments after the id are ignored
    return _get_vehicle(vehicle_id, service)


def _get_vehicle(vehicle_id: str, service: VehicleService):
    try:
        vehicle = service.get_vehicle_by_id(vehicle_id)
    except (VehicleNotFoundError, InvalidRequestError) as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PyMongoError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return success_response(
        vehicle, f"successfully fetched vehicle with ID: {vehicle_id}")
