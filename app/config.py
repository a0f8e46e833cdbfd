from dataclasses import dataclass
from dotenv import load_dotenv
from typing import Optional, Tuple
from app.exceptions import ConfigError
import os

REQUIRED_VARIABLES = (
    "HOST",
    "PORT",
    "DATABASE_URL",
    "RABBITMQ_URL",
    "TRACKING_QUEUE",
    "VEHICLE_QUEUE",
    "SIGNATURE_KEY",
    "AUTH_SVC",
)


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    database_url: str
    rabbitmq_url: str
    tracking_queue: str
    vehicle_queue: str
    signature_key: str
    auth_svc: str
    log_level: str = "INFO"
    consumer_workers: int = 10
    cors_origins: Tuple[str, ...] = ("*",)


def _int_variable(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def load_settings(env_file: Optional[str] = ".env") -> Settings:
    """
    Load settings from the environment (and a .env file when present).

    Every variable in REQUIRED_VARIABLES must be set and non-empty, otherwise
    ConfigError is raised listing all of the missing names at once.
    """
    if env_file:
        load_dotenv(env_file)

    missing = [name for name in REQUIRED_VARIABLES if not os.getenv(name)]
    if missing:
        raise ConfigError(
            f"Missing required environment variables: {', '.join(missing)}")

    workers = _int_variable(
        "CONSUMER_WORKERS", os.getenv("CONSUMER_WORKERS", "10"))
    if workers < 1:
        raise ConfigError("CONSUMER_WORKERS must be at least 1")

    origins = tuple(
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    )

    return Settings(
        host=os.getenv("HOST"),
        port=_int_variable("PORT", os.getenv("PORT")),
        database_url=os.getenv("DATABASE_URL"),
        rabbitmq_url=os.getenv("RABBITMQ_URL"),
        tracking_queue=os.getenv("TRACKING_QUEUE"),
        vehicle_queue=os.getenv("VEHICLE_QUEUE"),
        signature_key=os.getenv("SIGNATURE_KEY"),
        auth_svc=os.getenv("AUTH_SVC"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        consumer_workers=workers,
        cors_origins=origins or ("*",),
    )
