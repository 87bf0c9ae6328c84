import pytest


@pytest.fixture
def identity(store):
    return store.create_identity("ada@example.com", "Right1pw")


def test_create_profile(client, store, identity):
    response = client.post("/profile", json={
        "userId": identity.id,
        "firstName": "Ada",
        "lastName": "Lovelace",
        "bio": "Analytical engines",
        "skills": ["math", "poetry"],
    })

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Profile created successfully"

    profile = store.get_profile_by_id(body["profileId"])
    assert profile.user_id == identity.id
    assert (profile.first_name, profile.last_name) == ("Ada", "Lovelace")
    assert profile.skills == ["math", "poetry"]
    assert profile.created_at is not None


def test_create_profile_twice_conflicts(client, identity):
    payload = {"userId": identity.id, "firstName": "Ada", "lastName": "Lovelace"}
    client.post("/profile", json=payload)

    response = client.post("/profile", json=payload)

    assert response.status_code == 409
    assert response.json() == {"error": "Profile already exists"}


def test_create_profile_requires_user_id(client):
    response = client.post("/profile", json={"firstName": "Ada", "lastName": "Lovelace"})

    assert response.status_code == 401
    assert response.json() == {"error": "User ID required"}


@pytest.mark.parametrize("fields, field_name", [
    ({"lastName": "Lovelace"}, "firstName"),
    ({"firstName": "", "lastName": "Lovelace"}, "firstName"),
    ({"firstName": "A" * 51, "lastName": "Lovelace"}, "firstName"),
    ({"firstName": "Ada", "lastName": "Lovelace", "bio": "x" * 501}, "bio"),
    ({"firstName": "Ada", "lastName": "Lovelace", "location": "x" * 101}, "location"),
    ({"firstName": "Ada", "lastName": "Lovelace", "github": "x" * 101}, "github"),
])
def test_create_profile_validates_fields(client, store, identity, fields, field_name):
    response = client.post("/profile", json={"userId": identity.id, **fields})

    assert response.status_code == 400
    assert response.json()["error"].startswith(f"{field_name}:")
    assert store.profiles == {}


def test_create_profile_accepts_empty_social_handles(client, identity):
    response = client.post("/profile", json={
        "userId": identity.id, "firstName": "Ada", "lastName": "Lovelace", "github": "", "linkedin": "",
    })

    assert response.status_code == 200


def test_update_is_sparse(client, store, make_profile):
    user_id, profile_id = make_profile("smith@example.com", first_name="Jane", last_name="Doe", bio="Old bio")

    response = client.put("/profile", json={"userId": user_id, "firstName": "", "lastName": "Smith", "bio": None})

    assert response.status_code == 200
    assert response.json() == {"success": True}
    profile = store.get_profile_by_id(profile_id)
    assert profile.first_name == "Jane"
    assert profile.last_name == "Smith"
    assert profile.bio == "Old bio"


def test_update_with_only_empty_fields_changes_nothing(client, store, make_profile):
    user_id, profile_id = make_profile("jane@example.com", first_name="Jane", last_name="Doe")

    response = client.put("/profile", json={"userId": user_id, "firstName": "", "location": ""})

    assert response.status_code == 200
    profile = store.get_profile_by_id(profile_id)
    assert (profile.first_name, profile.last_name, profile.location) == ("Jane", "Doe", None)


def test_update_missing_profile_is_not_found(client, identity):
    response = client.put("/profile", json={"userId": identity.id, "firstName": "Ada"})

    assert response.status_code == 404
    assert response.json() == {"error": "Profile not found"}


def test_update_requires_user_id(client):
    response = client.put("/profile", json={"firstName": "Ada"})

    assert response.status_code == 401


def test_update_still_enforces_length_limits(client, make_profile):
    user_id, _ = make_profile("jane@example.com")

    response = client.put("/profile", json={"userId": user_id, "bio": "x" * 501})

    assert response.status_code == 400
    assert response.json()["error"].startswith("bio:")


def test_get_profile_by_id(client, make_profile):
    user_id, profile_id = make_profile("jane@example.com", first_name="Jane", skills=["go"])

    response = client.get(f"/profile/{profile_id}")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == profile_id
    assert body["userId"] == user_id
    assert body["firstName"] == "Jane"
    assert body["skills"] == ["go"]


def test_get_unknown_profile(client):
    response = client.get("/profile/does-not-exist")

    assert response.status_code == 404
