"""
Courseware Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── memory_store:    In-process ResourceStore (no database)
    ├── course_service:  ResourceService(COURSE, memory_store)
    ├── test_settings:   Settings pointing at a per-test SQLite file
    ├── database:        Database for test_settings with tables created
    ├── app:             FastAPI app built on that database
    └── test_client:     HTTPX AsyncClient routed straight into the app
"""

import asyncio
import os
import uuid
from typing import Any, Dict, List, Optional

# Override settings for testing BEFORE any courseware imports, so the
# module-level app in courseware.main never needs a PostgreSQL driver
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./courseware_test.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from courseware.config import Settings
from courseware.database import Database
from courseware.schemas.course import COURSE
from courseware.services.resource_service import ResourceService
from courseware.services.storage import ResourceStore


class InMemoryStore(ResourceStore):
    """
    Dict-backed ResourceStore for service-level tests.

    Ids are UUID strings assigned on insert; a malformed id raises ValueError
    just like the SQL store. Each call yields to the event loop once so
    concurrent callers actually interleave.
    """

    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.calls: List[str] = []

    async def find_all(self) -> List[Dict[str, Any]]:
        self.calls.append("find_all")
        await asyncio.sleep(0)
        return [dict(doc) for doc in self.documents.values()]

    async def find_by_id(self, resource_id: str) -> Optional[Dict[str, Any]]:
        self.calls.append("find_by_id")
        key = str(uuid.UUID(str(resource_id)))
        await asyncio.sleep(0)
        doc = self.documents.get(key)
        return dict(doc) if doc is not None else None

    async def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append("insert")
        await asyncio.sleep(0)
        doc = dict(values)
        doc["id"] = str(uuid.uuid4())
        self.documents[doc["id"]] = doc
        return dict(doc)


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def course_service(memory_store) -> ResourceService:
    return ResourceService(COURSE, memory_store)


@pytest.fixture
def sample_course_payload() -> Dict[str, Any]:
    """A fully populated create payload, in wire (camelCase) form."""
    return {
        "title": "Intro to Systems",
        "description": [
            {
                "about": "Processes, memory and files",
                "learning": ["scheduling", "virtual memory"],
                "materials": ["slides", "labs"],
            }
        ],
        "duration": 12.5,
        "rating": 4.5,
        "level": "Beginner",
        "instructor": [{"user": "u-42", "title": "Lecturer"}],
        "language": "English",
        "lastUpdated": "2024-01-15T12:00:00Z",
        "courseType": "self-paced",
        "enrolled": 1200,
        "certificate": [{"isLocked": True}],
    }


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'courseware.db'}",
        log_level="WARNING",
        api_prefix="/api",
        api_base_url="http://test",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """A Database on a fresh SQLite file with the schema created."""
    db = Database(test_settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def app(test_settings, database):
    from courseware.main import create_app

    return create_app(settings=test_settings, database=database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient configured to talk to the FastAPI app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
