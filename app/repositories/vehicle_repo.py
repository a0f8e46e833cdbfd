from datetime import datetime, timezone
from typing import List, Optional
from bson import ObjectId
from pydantic import ValidationError
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError
import pymongo
import logging
import re

from app.database import VEHICLE_COLLECTION
from app.exceptions import (
    DuplicateLicenseError,
    InvalidObjectIdError,
    InvalidRequestError,
    VehicleNotFoundError,
)
from app.models.vehicle import vehicle_class, vehicle_document
from app.schemas.vehicle import Vehicle, VehicleFilter, VehicleStatus

logger = logging.getLogger(__name__)

INDEX_TIMEOUT_SECONDS = 5

# Non-unique indexes backing the sort and filter fields of VehicleFilter
SECONDARY_INDEXES = ("vehicle_name", "vehicle_model",
                     "vehicle_status", "mileage", "created_at")


def _object_id(vehicle_id: str) -> ObjectId:
    if not isinstance(vehicle_id, str) or not ObjectId.is_valid(vehicle_id):
        raise InvalidObjectIdError(vehicle_id)
    return ObjectId(vehicle_id)


def _prefix(value: str) -> dict:
    return {"$regex": f"^{re.escape(value)}", "$options": "i"}


def _to_vehicle(document: dict) -> Vehicle:
    """Decode a stored document, rejecting ones with an unknown status."""
    VehicleStatus.parse(document.get("vehicle_status"))
    try:
        return Vehicle.model_validate(vehicle_class(document))
    except ValidationError as e:
        raise InvalidRequestError(
            f"stored vehicle {document.get('_id')} is invalid: {e}")


class MongoVehicleRepository:
    """Vehicle store backed by the ``vehicles`` collection."""

    def __init__(self, db: Database):
        self.collection = db[VEHICLE_COLLECTION]
        with pymongo.timeout(INDEX_TIMEOUT_SECONDS):
            self.collection.create_index(
                [("license_number", ASCENDING)], unique=True)
            for field in SECONDARY_INDEXES:
                self.collection.create_index([(field, ASCENDING)])
        logger.info(f"Indexes ready on collection {self.collection.name}")

    def create_vehicle(self, vehicle: Vehicle) -> Vehicle:
        """Insert ``vehicle`` and fill in its id and timestamps in place."""
        vehicle.vehicle_status = VehicleStatus.parse(vehicle.vehicle_status)
        vehicle.build()
        try:
            result = self.collection.insert_one(vehicle_document(vehicle))
        except DuplicateKeyError:
            logger.warning(
                f"Rejected duplicate license number {vehicle.license_number}")
            raise DuplicateLicenseError(vehicle.license_number)
        vehicle.id = str(result.inserted_id)
        return vehicle

    def tracking_vehicle(self, vehicle_id: str, mileage: float, status) -> None:
        object_id = _object_id(vehicle_id)
        status = VehicleStatus.parse(status)
        if mileage is None or mileage < 0:
            raise InvalidRequestError(f"invalid mileage: {mileage!r}")

        # Mileage is replaced, not incremented
        result = self.collection.update_one(
            {"_id": object_id},
            {"$set": {
                "mileage": float(mileage),
                "vehicle_status": status.value,
                "updated_at": datetime.now(timezone.utc),
            }}
        )
        if result.matched_count == 0:
            raise VehicleNotFoundError(vehicle_id)

    def find_vehicles(self, vehicle_filter: Optional[VehicleFilter] = None) -> List[Vehicle]:
        query = {}

        if vehicle_filter is not None:
            vehicle_filter.build()
            if vehicle_filter.object_id is not None:
                query["_id"] = vehicle_filter.object_id
            if vehicle_filter.vehicle_name:
                query["vehicle_name"] = _prefix(vehicle_filter.vehicle_name)
            if vehicle_filter.vehicle_model:
                query["vehicle_model"] = _prefix(vehicle_filter.vehicle_model)
            if vehicle_filter.license_number:
                query["license_number"] = _prefix(
                    vehicle_filter.license_number)
            if vehicle_filter.vehicle_status:
                query["vehicle_status"] = vehicle_filter.vehicle_status
            if vehicle_filter.mileage:
                query["mileage"] = {"$gte": vehicle_filter.mileage}

            direction = DESCENDING if vehicle_filter.descending else ASCENDING
            sort = [(vehicle_filter.sort_field, direction)]
            if vehicle_filter.sort_field != "_id":
                # _id breaks ties so consecutive pages never overlap
                sort.append(("_id", direction))
            cursor = self.collection.find(query).sort(sort).skip(
                vehicle_filter.skip).limit(vehicle_filter.page_size)
        else:
            cursor = self.collection.find(query)

        return [_to_vehicle(document) for document in cursor]

    def find_vehicle_by_id(self, vehicle_id: str) -> Vehicle:
        document = self.collection.find_one({"_id": _object_id(vehicle_id)})
        if not document:
            raise VehicleNotFoundError(vehicle_id)
        return _to_vehicle(document)
