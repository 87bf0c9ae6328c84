from unittest.mock import MagicMock

import jwt
import pytest
from postgrest.exceptions import APIError

from app.config.settings import Settings
from app.core.exceptions import ConfigurationError, ConflictError, UpstreamError
from app.database.store import Credential, Identity
from app.database import supabase_store
from app.database.supabase_store import SupabaseStore
from app.modules.auth.service import AuthService


def _api_error(code):
    return APIError({"message": "backend said no", "code": code, "details": None, "hint": None})


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def store(client):
    settings = Settings(_env_file=None, supabase_url="https://x.supabase.co",
                        supabase_service_role_key="service", supabase_jwt_secret="jwt-secret")
    store = SupabaseStore(settings)
    store._client = client
    return store


def test_credential_unique_violation_is_conflict(store, client):
    client.table.return_value.insert.return_value.execute.side_effect = _api_error("23505")

    with pytest.raises(ConflictError):
        store.create_credential(Credential(email="a@example.com", password_hash="h", user_id="u1"))


def test_profile_unique_violation_is_conflict(store, client):
    client.table.return_value.insert.return_value.execute.side_effect = _api_error("23505")

    with pytest.raises(ConflictError) as excinfo:
        store.create_profile("u1", {"first_name": "a", "last_name": ""})

    assert excinfo.value.message == "Profile already exists"


def test_other_backend_errors_are_upstream(store, client):
    client.table.return_value.insert.return_value.execute.side_effect = _api_error("42501")

    with pytest.raises(UpstreamError):
        store.create_project({"title": "X"})


def test_duplicate_auth_user_is_conflict(store, client):
    client.auth.admin.create_user.side_effect = Exception("A user with this email address has already been registered")

    with pytest.raises(ConflictError):
        store.create_identity("a@example.com", "Right1pw")


def test_identity_lookup_pages_through_users(store, client):
    first_page = [MagicMock(id=f"u{i}", email=f"user{i}@example.com") for i in range(1000)]
    second_page = [MagicMock(id="target", email="Ada@Example.com")]
    client.auth.admin.list_users.side_effect = [first_page, second_page]

    identity = store.get_identity_by_email("ada@example.com")

    assert identity == Identity(id="target", email="Ada@Example.com")
    assert client.auth.admin.list_users.call_count == 2


def test_identity_lookup_miss(store, client):
    client.auth.admin.list_users.return_value = []

    assert store.get_identity_by_email("ada@example.com") is None


def test_malformed_project_id_is_not_found(store, client):
    client.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.side_effect = \
        _api_error("22P02")

    assert store.get_project("not-a-uuid") is None


def test_rows_are_validated_into_records(store, client):
    client.table.return_value.select.return_value.order.return_value.execute.return_value = MagicMock(data=[
        {"id": "x1", "owner_profile_id": "p1", "title": "Engine", "tags": None, "created_at": "2024-01-15T00:00:00+00:00"},
    ])

    [project] = store.list_projects()

    assert project.owner_profile_id == "p1"
    assert project.tags == []
    assert project.created_at.year == 2024


def test_token_is_a_supabase_session_jwt(store):
    token = store.issue_token(Identity(id="u1", email="a@example.com"))

    claims = jwt.decode(token, "jwt-secret", algorithms=["HS256"], audience="authenticated")
    assert claims["sub"] == "u1"
    assert claims["role"] == "authenticated"


def test_missing_jwt_secret_fails_before_any_write(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(supabase_store, "create_client", lambda url, key: client)
    settings = Settings(_env_file=None, supabase_url="https://x.supabase.co",
                        supabase_service_role_key="service", supabase_jwt_secret=None, bcrypt_rounds=4)

    with pytest.raises(ConfigurationError) as excinfo:
        AuthService(SupabaseStore(settings), settings).signup("ada@example.com", "Right1pw")

    assert excinfo.value.message == "Missing configuration: SUPABASE_JWT_SECRET"
    client.auth.admin.create_user.assert_not_called()
    client.table.assert_not_called()


def test_delete_identity_removes_rows_and_auth_user(store, client):
    store.delete_identity("u1")

    deleted_tables = [c.args[0] for c in client.table.call_args_list]
    assert deleted_tables == ["profiles", "credentials"]
    client.table.return_value.delete.return_value.eq.assert_called_with("user_id", "u1")
    client.auth.admin.delete_user.assert_called_once_with("u1")
