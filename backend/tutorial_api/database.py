"""
Tutorial API - Database Client Management
=========================================

What:  MongoDatabase wraps the Motor client, the database handle and the
       `tutorials` collection, with an explicit connect/close lifecycle.
How:   The lifespan in main.py constructs one MongoDatabase, calls connect(),
       stores it on `app.state.database`, and closes it on shutdown. Route
       handlers reach it through the `get_database` dependency.

Connection Strategy:
    connect() issues a `ping` before the server accepts traffic. Motor
    connects lazily, so without the ping a bad MONGO_URL would only surface
    on the first request. A failed ping raises DatabaseConnectionError and
    startup is aborted. Pooling is left to the driver defaults.

    The client is tz_aware so stored datetimes read back as UTC-aware,
    matching what the service wrote.
"""

import logging
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from tutorial_api.config import DEFAULT_DATABASE, Settings
from tutorial_api.exceptions import DatabaseConnectionError
from tutorial_api.models.tutorial import COLLECTION_NAME

logger = logging.getLogger(__name__)


class MongoDatabase:
    """
    Owns the MongoDB connection for the lifetime of the application.

    Attributes exposed after connect():
        db:         the database named in the connection URL
        tutorials:  the `tutorials` collection
    """

    def __init__(
        self,
        url: str,
        server_selection_timeout_ms: int = 5000,
    ):
        self._url = url
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoDatabase":
        return cls(
            url=settings.mongo_url,
            server_selection_timeout_ms=settings.mongo_server_selection_timeout_ms,
        )

    async def connect(self) -> None:
        """
        Open the client, verify the server answers, and ensure indexes.

        Raises:
            DatabaseConnectionError: the server could not be reached or the
                URL was rejected by the driver.
        """
        try:
            self._client = AsyncIOMotorClient(
                self._url,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                tz_aware=True,
            )
            self._db = self._client.get_default_database(DEFAULT_DATABASE)
            await self._client.admin.command("ping")
            await self.tutorials.create_index(
                [("published", ASCENDING)],
                name="idx_tutorials_published",
            )
        except (PyMongoError, ValueError) as e:
            await self.close()
            raise DatabaseConnectionError(
                context={"error": str(e), "error_type": type(e).__name__},
            ) from e

        logger.info("Connected to the database! (database=%s)", self._db.name)

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._db

    @property
    def tutorials(self) -> AsyncIOMotorCollection:
        return self.db[COLLECTION_NAME]

    async def ping(self) -> bool:
        """Lightweight liveness probe used by the health check."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
        return True

    async def close(self) -> None:
        """Close the client and release pooled connections."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("Database connection closed")


# ── Dependency ────────────────────────────────────────────────────────────
def get_database(request: Request) -> MongoDatabase:
    """
    FastAPI dependency returning the MongoDatabase opened by the lifespan.

    Example usage in a route:
        @router.get("/health")
        async def health(database: MongoDatabase = Depends(get_database)):
            ...
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized")
    return database
