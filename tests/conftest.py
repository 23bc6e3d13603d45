import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import PyMongoError

from app.db.session import get_db
from app.main import app
from app.services.auth import create_access_token


@pytest.fixture
def db():
    return AsyncMongoMockClient()["resellhub_test"]


@pytest.fixture
def client(db):
    # Not used as a context manager: the lifespan would connect to a real MongoDB
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(uid, *roles):
    return {"authtoken": create_access_token(uid, roles)}


def run(coro):
    return asyncio.run(coro)


class FailingCollection:
    """Delegates to a real collection except for one method, which raises."""

    def __init__(self, collection, method):
        self._collection = collection
        self._method = method

    def __getattr__(self, name):
        if name == self._method:
            async def fail(*args, **kwargs):
                raise PyMongoError(f"{name} unavailable")
            return fail
        return getattr(self._collection, name)


class FlakyDatabase:
    def __init__(self, db, collection, method):
        self._db = db
        self._collection = collection
        self._method = method

    def __getattr__(self, name):
        collection = getattr(self._db, name)
        if name == self._collection:
            return FailingCollection(collection, self._method)
        return collection
