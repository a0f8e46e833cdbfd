from typing import Optional, Sequence
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.middleware.request_body import request_body_middleware
from app.routes import tracking, vehicle
from app.services.vehicle_service import VehicleService
from app.utils.responses import error_response


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


def create_app(
    vehicle_service: Optional[VehicleService] = None,
    cors_origins: Sequence[str] = ("*",),
) -> FastAPI:
    app = FastAPI(title="Vehicle Tracking Service")
    app.state.vehicle_service = vehicle_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_body_middleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(vehicle.router)
    app.include_router(tracking.router)

    @app.get("/health")
    def health_check():
        """Liveness probe"""
        return {
            "status": "healthy",
            "message": "Vehicle tracking service is running",
            "vehicle_service": "ready" if app.state.vehicle_service else "not ready",
        }

    return app
