"""
Tutorial API - Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the test suite.
How:   No MongoDB is needed. Service tests get a MagicMock standing in for
       the Motor collection; route tests get an app from create_app() whose
       dependencies are overridden with mocks, driven through HTTPX.

Fixtures:
    ├── mock_collection:  Motor collection double (AsyncMock CRUD methods)
    ├── sample_doc:       a raw `tutorials` document as Motor returns it
    ├── mock_service:     TutorialService double for route tests
    ├── mock_database:    MongoDatabase double for the health route
    └── test_client:      HTTPX AsyncClient over ASGITransport
"""

import os

# Settings are read at import time; point them at test values first.
os.environ["MONGO_URL"] = "mongodb://localhost:27017/tutorials_test"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from tutorial_api.config import Settings
from tutorial_api.database import MongoDatabase, get_database
from tutorial_api.main import create_app
from tutorial_api.schemas.tutorial import Tutorial
from tutorial_api.services.tutorial_service import TutorialService, get_tutorial_service


@pytest.fixture
def mock_collection():
    """
    Motor collection double.

    `find()` is synchronous in Motor and returns a cursor; `sort()` chains on
    the cursor and `to_list()` is awaited. Tests set the documents with:
        mock_collection.find.return_value.sort.return_value.to_list.return_value = [...]
    """
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.delete_many = AsyncMock()

    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])
    collection.find.return_value = cursor
    return collection


@pytest.fixture
def sample_doc():
    now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    return {
        "_id": ObjectId(),
        "title": "Learn FastAPI",
        "description": "Routing and dependencies",
        "published": False,
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def sample_tutorial(sample_doc):
    return Tutorial(
        id=str(sample_doc["_id"]),
        title=sample_doc["title"],
        description=sample_doc["description"],
        published=sample_doc["published"],
        created_at=sample_doc["created_at"],
        updated_at=sample_doc["updated_at"],
    )


@pytest.fixture
def mock_service():
    service = MagicMock(spec=TutorialService)
    service.create = AsyncMock()
    service.find_all = AsyncMock(return_value=[])
    service.find_all_published = AsyncMock(return_value=[])
    service.find_by_id = AsyncMock()
    service.update = AsyncMock(return_value=True)
    service.delete_by_id = AsyncMock(return_value=None)
    service.delete_all = AsyncMock(return_value=0)
    return service


@pytest.fixture
def mock_database():
    database = MagicMock(spec=MongoDatabase)
    database.ping = AsyncMock(return_value=True)
    return database


@pytest_asyncio.fixture
async def test_client(mock_service, mock_database):
    """
    HTTPX AsyncClient talking to a fresh app.

    ASGITransport does not run the lifespan, so no database connection is
    attempted; handlers receive mock_service and mock_database instead.
    """
    app = create_app(Settings())
    app.dependency_overrides[get_tutorial_service] = lambda: mock_service
    app.dependency_overrides[get_database] = lambda: mock_database

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
