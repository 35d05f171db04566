import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from core.security import create_access_token, get_password_hash
from db import Database
from main import create_app

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def database():
    return Database(name="storefront_test", client=AsyncMongoMockClient())


@pytest.fixture
def client(database):
    with TestClient(create_app(database)) as c:
        yield c


@pytest.fixture
def make_product(database):
    """Insert a product document directly; later calls get later created_at."""
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        doc = {
            "_id": str(uuid.uuid4()),
            "name": f"Product {counter['n']}",
            "description": "A perfectly ordinary product",
            "price": 10.0,
            "category": "Electronics",
            "image": "",
            "stock": 10,
            "rating": 4.0,
            "created_at": BASE_TIME + timedelta(minutes=counter["n"]),
        }
        doc.update(fields)
        asyncio.run(database.products.insert_one(doc))
        return doc

    return _make


@pytest.fixture
def make_user(database):
    """Insert a user and return (user_doc, auth headers)."""

    def _make(email="shopper@mail.com", role="user", password="secret123"):
        doc = {
            "_id": str(uuid.uuid4()),
            "email": email,
            "name": email.split("@")[0],
            "password": get_password_hash(password),
            "role": role,
            "created_at": BASE_TIME,
        }
        asyncio.run(database.users.insert_one(doc))
        token = create_access_token({"sub": doc["_id"]})
        return doc, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def user_headers(make_user):
    return make_user()[1]


@pytest.fixture
def admin_headers(make_user):
    return make_user(email="admin@mail.com", role="admin")[1]
