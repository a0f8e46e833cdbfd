from pydantic import BaseModel, Field, field_validator
from bson import ObjectId
from typing import Any, Optional
from app.schemas.vehicle import VehicleStatus


class TrackingDataRequest(BaseModel):
    """Telemetry for one vehicle, as published to and consumed from the broker."""
    vehicle_id: str
    mileage: float = Field(..., ge=0)
    vehicle_status: VehicleStatus
    # Auxiliary telemetry, passed through untouched
    fuel_condition: Optional[Any] = None
    location: Optional[Any] = None

    @field_validator("vehicle_id")
    @classmethod
    def vehicle_id_must_be_object_id(cls, value: str) -> str:
        if not ObjectId.is_valid(value):
            raise ValueError("vehicle_id must be a 24 character hex string")
        return value
