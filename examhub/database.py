import logging
import os

from fastapi import Request
from pymongo import MongoClient

from .storage.base import Storage
from .storage.memory import MemStorage
from .storage.mongo import MongoStorage


logger = logging.getLogger(__name__)

# "memory" keeps everything in-process; "mongo" persists to MONGO_URL.
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "examhub")

_client: MongoClient | None = None


def get_mongo_client() -> MongoClient:
    global _client
    if _client is None:
        _client = MongoClient(MONGO_URL, tz_aware=True)
    return _client


def build_storage(backend: str | None = None) -> Storage:
    backend = (backend or STORAGE_BACKEND).lower()
    if backend == "memory":
        logger.info("Using in-memory storage")
        return MemStorage()
    if backend == "mongo":
        logger.info("Using MongoDB storage (%s)", MONGO_DB_NAME)
        return MongoStorage(get_mongo_client()[MONGO_DB_NAME])
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")


def get_storage(request: Request) -> Storage:
    return request.app.state.storage
