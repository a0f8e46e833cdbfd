"""Exceptions raised by the vehicle store, the publisher and the service."""


class VehicleServiceError(Exception):
    """Base exception for the vehicle tracking service."""


class InvalidRequestError(VehicleServiceError):
    """Input failed validation (missing field, bad value, malformed body)."""


class InvalidVehicleStatusError(InvalidRequestError):
    """Vehicle status is not one of the known values."""

    def __init__(self, status) -> None:
        self.status = status
        super().__init__(f"invalid vehicle status: {status!r}")


class InvalidObjectIdError(InvalidRequestError):
    """Identifier is not a valid 24 character ObjectId hex string."""

    def __init__(self, value) -> None:
        self.value = value
        super().__init__(f"invalid vehicle id: {value!r}")


class InvalidFilterError(InvalidRequestError):
    """Query parameters could not be turned into a vehicle filter."""


class VehicleNotFoundError(VehicleServiceError):
    """No vehicle matched the given id."""

    def __init__(self, vehicle_id: str) -> None:
        self.vehicle_id = vehicle_id
        super().__init__(f"vehicle not found: {vehicle_id}")


class DuplicateLicenseError(VehicleServiceError):
    """Another vehicle already uses this license number."""

    def __init__(self, license_number: str) -> None:
        self.license_number = license_number
        super().__init__(
            f"vehicle with license number {license_number!r} already exists")


class TrackingPublishError(VehicleServiceError):
    """The broker rejected or could not receive a tracking message."""


class ConfigError(VehicleServiceError):
    """Invalid or missing configuration."""
