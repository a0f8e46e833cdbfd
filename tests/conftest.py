from unittest.mock import MagicMock

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.repositories.tracking_repo import RabbitMqTrackingRepository
from app.repositories.vehicle_repo import MongoVehicleRepository
from app.schemas.vehicle import Vehicle, VehicleStatus
from app.services.vehicle_service import VehicleService


def make_vehicle(index: int = 0, **overrides) -> Vehicle:
    fields = {
        "vehicle_name": f"Vehicle {index}",
        "vehicle_model": f"Model {index}",
        "license_number": f"License {index}",
        "vehicle_status": VehicleStatus.active,
        "mileage": 100.0 * index,
    }
    fields.update(overrides)
    return Vehicle(**fields)


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient()["vehicles"]


@pytest.fixture
def vehicle_repo(mongo_db):
    return MongoVehicleRepository(mongo_db)


@pytest.fixture
def tracking_repo():
    return MagicMock(spec=RabbitMqTrackingRepository)


@pytest.fixture
def vehicle_service(vehicle_repo, tracking_repo):
    return VehicleService(vehicle_repo, tracking_repo)


@pytest.fixture
def client(vehicle_service):
    return TestClient(create_app(vehicle_service))
