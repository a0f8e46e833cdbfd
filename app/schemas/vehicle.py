from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from bson import ObjectId
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from app.exceptions import InvalidFilterError, InvalidVehicleStatusError

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# skip is sent to MongoDB as a signed 64-bit integer
MAX_PAGE = (2 ** 63 - 1) // MAX_PAGE_SIZE
DEFAULT_SORT_FIELD = "created_at"

# Enum for vehicle status


class VehicleStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    repair = "repair"
    sold = "sold"
    rented = "rented"

    @classmethod
    def parse(cls, value) -> "VehicleStatus":
        """Return the matching status or raise InvalidVehicleStatusError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidVehicleStatusError(value)


class VehicleRequest(BaseModel):
    vehicle_name: str = Field(..., min_length=1)
    vehicle_model: str = Field(..., min_length=1)
    vehicle_status: VehicleStatus
    mileage: float = Field(..., ge=0)
    license_number: str = Field(..., min_length=1)


class Vehicle(BaseModel):
    id: Optional[str] = None
    vehicle_name: str
    vehicle_model: str
    license_number: str
    vehicle_status: VehicleStatus
    mileage: float = Field(0, ge=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def build(self) -> "Vehicle":
        """Stamp creation and update times before the first insert."""
        now = datetime.now(timezone.utc)
        self.created_at = now
        self.updated_at = now
        return self


class VehicleFilter(BaseModel):
    """
    Query over the vehicle collection.

    Field aliases are the query-string keys accepted by GET /api/v1/vehicles.
    Call build() before use: it fills in defaults, clamps the page size and
    validates the status and id predicates.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    page: int = 0
    page_size: int = Field(0, alias="limit")
    sort_field: str = Field("", alias="sort_by")
    sort_order: str = ""
    id: str = Field("", alias="_id")
    vehicle_name: str = ""
    vehicle_model: str = ""
    license_number: str = ""
    vehicle_status: str = ""
    mileage: float = 0

    _object_id: Optional[ObjectId] = PrivateAttr(default=None)

    @property
    def object_id(self) -> Optional[ObjectId]:
        return self._object_id

    @property
    def descending(self) -> bool:
        return self.sort_order == "desc"

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    def build(self) -> "VehicleFilter":
        if self.page <= 0:
            self.page = DEFAULT_PAGE
        if self.page_size <= 0:
            self.page_size = DEFAULT_PAGE_SIZE
        if self.page_size > MAX_PAGE_SIZE:
            self.page_size = MAX_PAGE_SIZE
        if self.page > MAX_PAGE:
            raise InvalidFilterError(f"page out of range: {self.page}")
        if not self.sort_field:
            self.sort_field = DEFAULT_SORT_FIELD
        if not self.sort_order:
            self.sort_order = "asc"
        if self.vehicle_status:
            try:
                VehicleStatus.parse(self.vehicle_status)
            except InvalidVehicleStatusError as e:
                raise InvalidFilterError(str(e))
        if self.id:
            if not ObjectId.is_valid(self.id):
                raise InvalidFilterError(f"invalid vehicle id: {self.id!r}")
            self._object_id = ObjectId(self.id)
        return self
