"""Shared fixtures: an in-memory SQLite store and a client bound to it."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from patient_api.config import Settings
from patient_api.factory import create_app
from patient_api.models.store import DocumentStore


@pytest.fixture
def store():
    store = DocumentStore.from_url(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    store.create_all()
    yield store
    store.dispose()


@pytest.fixture
def client(store):
    app = create_app(Settings(), store=store)
    return TestClient(app)
