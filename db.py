# db.py
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from core.config import MONGO_URL, MONGO_DB_NAME
from core.logger import get_logger

logger = get_logger(__name__)


class Database:
    """
    Explicit storage handle. Opened once at startup, closed at shutdown and
    handed to request handlers through `get_database`.

    A ready-made client can be injected (tests pass an in-memory one); the
    handle only closes clients it created itself.
    """

    def __init__(self, url: str = MONGO_URL, name: str = MONGO_DB_NAME, client=None):
        self.url = url
        self.name = name
        self.client = client
        self._owns_client = client is None

    def connect(self) -> None:
        if self.client is None:
            logger.info(f"Connecting to MongoDB database '{self.name}'")
            self.client = AsyncIOMotorClient(self.url)
            self._owns_client = True

    def close(self) -> None:
        if self.client is not None and self._owns_client:
            logger.info("Closing MongoDB connection")
            self.client.close()
            self.client = None

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self.client is None:
            raise RuntimeError("Database is not connected")
        return self.client[self.name]

    @property
    def products(self):
        return self.db.products

    @property
    def users(self):
        return self.db.users

    @property
    def carts(self):
        return self.db.carts

    async def ensure_indexes(self) -> None:
        await self.products.create_index([("category", ASCENDING)])
        await self.products.create_index([("price", ASCENDING)])
        await self.products.create_index([("created_at", DESCENDING)])
        await self.users.create_index([("email", ASCENDING)], unique=True)

    async def ping(self) -> bool:
        await self.db.command("ping")
        return True


def get_database(request: Request) -> Database:
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database handle missing from application state")
    return database
