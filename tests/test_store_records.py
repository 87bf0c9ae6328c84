from datetime import datetime, timezone

from app.database.store import Credential, ProfileRecord, ProjectRecord, coerce_timestamp


class _FirestoreTimestamp:
    def to_datetime(self):
        return datetime(2024, 1, 15, tzinfo=timezone.utc)


def test_coerce_timestamp_accepts_known_shapes():
    expected = datetime(2024, 1, 15, tzinfo=timezone.utc)

    assert coerce_timestamp(expected) == expected
    assert coerce_timestamp(datetime(2024, 1, 15)) == expected
    assert coerce_timestamp("2024-01-15T00:00:00Z") == expected
    assert coerce_timestamp(expected.timestamp()) == expected
    assert coerce_timestamp(expected.timestamp() * 1000) == expected
    assert coerce_timestamp(_FirestoreTimestamp()) == expected


def test_coerce_timestamp_defaults_to_now():
    before = datetime.now(timezone.utc)
    for value in (None, "", "garbage", {"seconds": 1}, True, float("inf")):
        assert coerce_timestamp(value) >= before


def test_records_accept_camel_case_documents():
    profile = ProfileRecord.model_validate({
        "id": "p1", "userId": "u1", "firstName": "Ada", "lastName": "Lovelace", "skills": "math",
    })
    assert profile.user_id == "u1"
    assert profile.first_name == "Ada"
    assert profile.skills == []

    project = ProjectRecord.model_validate({
        "id": "x1", "ownerProfileId": "p1", "title": None, "currentMembers": "3", "maxMembers": "lots",
    })
    assert project.owner_profile_id == "p1"
    assert project.title == ""
    assert project.current_members == 3
    assert project.max_members is None
    assert project.created_at.tzinfo is not None


def test_credential_reads_legacy_password_field():
    credential = Credential.from_document({"email": "a@example.com", "password": "$2b$hash", "userId": "u1"})

    assert credential.password_hash == "$2b$hash"
    assert credential.model_dump(by_alias=True) == {
        "email": "a@example.com", "passwordHash": "$2b$hash", "userId": "u1",
    }
