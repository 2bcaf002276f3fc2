"""Shared fixtures: an isolated SQLite store per test wired into the app."""
import pytest
from fastapi.testclient import TestClient
from expense_tracker.main import app
from expense_tracker.storage.database import TransactionStore, get_db

OWNER = "user_alice"
OTHER_OWNER = "user_bob"


def auth_headers(owner_id: str = OWNER) -> dict:
    return {"X-User-Id": owner_id}


@pytest.fixture
def store(tmp_path):
    """Fresh transaction store backed by a temporary database file."""
    return TransactionStore(str(tmp_path / "transactions.db"))


@pytest.fixture
def client(store):
    """Test client whose requests hit the temporary store."""
    app.dependency_overrides[get_db] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
