"""
Pytest configuration for backend tests.

Every test gets a fresh in-memory MongoDB (mongomock-motor) wired into the app
through a dependency override, so no running database is needed.
"""
import os
import uuid

# cheap hashes for tests; must be set before config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

import httpx
import pytest
from httpx import ASGITransport
from mongomock_motor import AsyncMongoMockClient

import main
from database import get_db, init_db
from services.gateway import AssignmentGateway, UserGateway
from services.passwords import hash_password


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db():
    return AsyncMongoMockClient()[f"tuition_test_{uuid.uuid4().hex}"]


@pytest.fixture
async def seeded_db(db):
    await init_db(db)
    return db


@pytest.fixture
def users(seeded_db):
    return UserGateway(seeded_db)


@pytest.fixture
def assignments(seeded_db):
    return AssignmentGateway(seeded_db)


@pytest.fixture
async def student(users):
    return await users.insert({
        "id": "stu-1",
        "name": "Asha Student",
        "email": "asha@example.com",
        "password": hash_password("asha-pass"),
        "role": "STUDENT",
        "class": "Grade 10",
    })


@pytest.fixture
async def client(seeded_db):
    main.app.dependency_overrides[get_db] = lambda: seeded_db
    async with httpx.AsyncClient(transport=ASGITransport(app=main.app), base_url="http://test") as c:
        yield c
    main.app.dependency_overrides.clear()
