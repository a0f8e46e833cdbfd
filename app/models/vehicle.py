from app.schemas.vehicle import Vehicle


def vehicle_class(vehicle) -> dict:
    return {
        "id": str(vehicle["_id"]),
        "vehicle_name": vehicle.get("vehicle_name"),
        "vehicle_model": vehicle.get("vehicle_model"),
        "license_number": vehicle.get("license_number"),
        "vehicle_status": vehicle.get("vehicle_status"),
        "mileage": vehicle.get("mileage", 0),
        "created_at": vehicle.get("created_at"),
        "updated_at": vehicle.get("updated_at"),
    }


def vehicle_document(vehicle: Vehicle) -> dict:
    # _id is left out so MongoDB assigns it on insert
    return {
        "vehicle_name": vehicle.vehicle_name,
        "vehicle_model": vehicle.vehicle_model,
        "license_number": vehicle.license_number,
        "vehicle_status": vehicle.vehicle_status.value,
        "mileage": float(vehicle.mileage),
        "created_at": vehicle.created_at,
        "updated_at": vehicle.updated_at,
    }
