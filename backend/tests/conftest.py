"""
Shared fixtures: a fresh contact store per test, wired into the app via dependency overrides.

Run from the repository root:
   pytest -v
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.contact_store import ContactStore, get_contact_store


@pytest.fixture
def store() -> ContactStore:
    return ContactStore()


@pytest.fixture
def ada_and_lovelace(store: ContactStore) -> ContactStore:
    """Store holding [{id: "1", first: "Ada"}, {id: "2", last: "Lovelace"}] in that order."""
    store.seed([{"id": "1", "first": "Ada"}, {"id": "2", "last": "Lovelace"}])
    return store


@pytest.fixture
def api(store: ContactStore):
    app.dependency_overrides[get_contact_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_contact_store, None)
