import pytest
from fastapi.testclient import TestClient

from app.config.settings import Settings
from app.database.memory_store import InMemoryStore
from app.main import create_app

TEST_PASSWORD = "Right1pw"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        storage_backend="memory",
        bcrypt_rounds=4,
        jwt_secret="test-secret",
        rate_limit="1000/minute",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def store(app):
    store = InMemoryStore(app.state.settings)
    app.state.store = store
    return store


@pytest.fixture
def client(app, store):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def signup(client):
    """Sign up an account through the API and return its identity id."""
    def _signup(email, password=TEST_PASSWORD):
        response = client.post("/auth/signup", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["token"]
    return _signup


@pytest.fixture
def make_profile(store):
    """Insert an identity plus profile directly into the store."""
    def _make_profile(email, **fields):
        identity = store.create_identity(email, TEST_PASSWORD)
        data = {"first_name": email.split("@")[0], "last_name": "", "email": email}
        data.update(fields)
        profile_id = store.create_profile(identity.id, data)
        return identity.id, profile_id
    return _make_profile
