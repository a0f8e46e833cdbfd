from pymongo import MongoClient
from pymongo.database import Database
import logging

logger = logging.getLogger(__name__)

DATABASE_NAME = "vehicles"
VEHICLE_COLLECTION = "vehicles"


def connect(database_url: str) -> MongoClient:
    """Open a MongoDB client and make sure the server answers a ping."""
    client = MongoClient(database_url)
    try:
        client.admin.command("ping")
    except Exception:
        client.close()
        raise
    logger.info("✅ MongoDB connected")
    return client


def get_database(client: MongoClient) -> Database:
    return client[DATABASE_NAME]
