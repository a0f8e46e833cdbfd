from typing import List, Mapping, Sequence, Union
from pydantic import ValidationError
import json
import logging

from app.exceptions import InvalidFilterError
from app.repositories.tracking_repo import RabbitMqTrackingRepository
from app.repositories.vehicle_repo import MongoVehicleRepository
from app.schemas.tracking import TrackingDataRequest
from app.schemas.vehicle import Vehicle, VehicleFilter, VehicleRequest, VehicleStatus

logger = logging.getLogger(__name__)

QUERY_KEYS = (
    "page", "limit", "sort_by", "sort_order", "_id",
    "vehicle_name", "vehicle_model", "license_number", "vehicle_status", "mileage",
)
INTEGER_PARAMS = ("page", "limit")
FLOAT_PARAMS = ("mileage",)


def _first(value: Union[str, Sequence[str]]) -> str:
    if isinstance(value, str):
        return value
    return value[0] if value else ""


def _query_items(query):
    # Starlette's QueryParams is a multi-dict: keys() plus getlist()
    if hasattr(query, "getlist"):
        return [(key, query.getlist(key)) for key in query.keys()]
    return list(query.items())


def query_to_filter(query: Mapping[str, Sequence[str]]) -> VehicleFilter:
    """
    Turn URL query parameters into a VehicleFilter.

    Only the first value of each key is used. page/limit become ints and
    mileage a float; every other key stays a string. The result is dumped
    to JSON and parsed by VehicleFilter. Keys outside QUERY_KEYS are ignored,
    including the model's own field names.
    """
    data = {}
    for key, values in _query_items(query):
        if key not in QUERY_KEYS:
            continue
        value = _first(values)
        try:
            if key in INTEGER_PARAMS:
                data[key] = int(value)
                continue
            if key in FLOAT_PARAMS:
                data[key] = float(value)
                continue
        except ValueError:
            raise InvalidFilterError(
                f"invalid value for query parameter {key!r}: {value!r}")
        data[key] = value

    try:
        return VehicleFilter.model_validate_json(json.dumps(data))
    except ValidationError as e:
        raise InvalidFilterError(str(e))


class VehicleService:
    def __init__(
        self,
        vehicle_repo: MongoVehicleRepository,
        tracking_repo: RabbitMqTrackingRepository,
    ):
        self.vehicle_repo = vehicle_repo
        self.tracking_repo = tracking_repo

    def create_vehicle(self, req: VehicleRequest) -> Vehicle:
        vehicle = Vehicle(
            vehicle_name=req.vehicle_name,
            vehicle_model=req.vehicle_model,
            license_number=req.license_number,
            vehicle_status=VehicleStatus.parse(req.vehicle_status),
            mileage=req.mileage,
        )
        self.vehicle_repo.create_vehicle(vehicle)
        logger.info(
            f"Created vehicle {vehicle.id} ({vehicle.license_number})")
        return vehicle

    def tracking_vehicle(self, vehicle_id: str, mileage: float, status) -> None:
        self.vehicle_repo.tracking_vehicle(vehicle_id, mileage, status)

    def find_vehicles(self, query: Mapping[str, Sequence[str]]) -> List[Vehicle]:
        return self.vehicle_repo.find_vehicles(query_to_filter(query))

    def get_vehicle_by_id(self, vehicle_id: str) -> Vehicle:
        return self.vehicle_repo.find_vehicle_by_id(vehicle_id)

    def publish_tracking_data(self, req: TrackingDataRequest) -> None:
        # Re-validate: callers may hand over a model built without validation
        req = TrackingDataRequest.model_validate(req.model_dump())
        self.tracking_repo.publish_tracking_data(
            req.model_dump_json().encode("utf-8"))
