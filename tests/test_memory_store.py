import threading

import pytest

from app.database.memory_store import InMemoryStore


@pytest.fixture
def memory(settings):
    return InMemoryStore(settings)


def test_reads_are_safe_while_writers_add_rows(memory):
    for i in range(2000):
        identity = memory.create_identity(f"seed{i}@example.com", "Right1pw")
        memory.create_profile(identity.id, {"first_name": f"seed{i}", "last_name": ""})
        memory.create_project({"title": f"Project {i}"})

    stop = threading.Event()

    def writer():
        i = 0
        while not stop.is_set():
            identity = memory.create_identity(f"new{i}@example.com", "Right1pw")
            memory.create_profile(identity.id, {"first_name": f"new{i}", "last_name": ""})
            memory.create_project({"title": f"New {i}"})
            i += 1

    thread = threading.Thread(target=writer)
    thread.start()
    try:
        for _ in range(50):
            assert memory.get_identity_by_email("missing@example.com") is None
            assert memory.get_profile("missing-user") is None
            assert len(memory.list_profiles(100)) == 100
            assert memory.list_projects()
    finally:
        stop.set()
        thread.join()


def test_delete_identity_removes_signup_records(memory):
    identity = memory.create_identity("ada@example.com", "Right1pw")
    memory.create_profile(identity.id, {"first_name": "ada", "last_name": ""})
    other = memory.create_identity("grace@example.com", "Right1pw")
    memory.create_profile(other.id, {"first_name": "grace", "last_name": ""})

    memory.delete_identity(identity.id)

    assert memory.get_identity_by_email("ada@example.com") is None
    assert memory.get_profile(identity.id) is None
    assert memory.get_profile(other.id).first_name == "grace"
    assert memory.create_identity("ada@example.com", "Right1pw").email == "ada@example.com"
