"""
Persistence tests: JSON-file storage and app state snapshots.

Run with: pytest tests/test_storage.py -v
"""
import json
from datetime import timedelta, timezone

import pytest

from question_bank import get_static_questions
from state import CandidateStatus, MessageType, new_candidate, new_message, utc_now
from storage import (
    STORAGE_KEY,
    LocalStorage,
    clear_storage,
    deserialize_candidate,
    load_from_storage,
    save_to_storage,
    serialize_candidate,
)
from store import CandidateStore, initial_app_state


def populated_candidate():
    candidate = new_candidate("Jane Doe", "jane@example.com", "(555) 123-4567", "resume text", "cv.pdf")
    questions = get_static_questions()
    candidate["questions"] = questions
    candidate["status"] = CandidateStatus.IN_PROGRESS.value
    candidate["interview_start_time"] = utc_now()
    candidate["time_remaining"] = 12
    candidate["current_question_index"] = 1
    candidate["chat_history"] = [
        new_message(MessageType.BOT, "Question 1 of 6"),
        new_message(MessageType.USER, "My answer"),
    ]
    candidate["interview_answers"] = [{
        "question_id": questions[0]["id"],
        "question": questions[0]["question"],
        "answer": "My answer",
        "time_used": 8,
        "score": 40,
        "feedback": "A short answer.",
        "timestamp": utc_now(),
    }]
    return candidate


def test_local_storage_get_set_remove(tmp_path):
    storage = LocalStorage(tmp_path / "nested" / "store.json")
    assert storage.get_item("missing") is None

    storage.set_item("a", "1")
    storage.set_item("b", "2")
    assert storage.get_item("a") == "1"

    storage.remove_item("a")
    assert storage.get_item("a") is None
    assert storage.get_item("b") == "2"


def test_candidate_round_trip_preserves_every_field():
    candidate = populated_candidate()
    data = json.loads(json.dumps(serialize_candidate(candidate)))
    assert deserialize_candidate(data) == candidate


def test_dates_compare_equal_by_instant():
    candidate = populated_candidate()
    data = serialize_candidate(candidate)
    # Same instant written with a different offset
    shifted = candidate["created_at"].astimezone(timezone(timedelta(hours=5)))
    data["created_at"] = shifted.isoformat()
    assert deserialize_candidate(data)["created_at"] == candidate["created_at"]


def test_app_state_round_trip(storage):
    state = initial_app_state()
    candidate = populated_candidate()
    state["candidates"] = [candidate]
    state["current_candidate_id"] = candidate["id"]
    state["current_tab"] = "interviewer"

    assert save_to_storage(state, storage) is True
    assert load_from_storage(storage) == state


def test_snapshot_is_versioned(storage):
    save_to_storage(initial_app_state(), storage)
    snapshot = json.loads(storage.get_item(STORAGE_KEY))
    assert snapshot["version"] == 1
    assert set(snapshot) == {"version", "current_tab", "candidates", "current_candidate_id"}


def test_nothing_saved_loads_as_none(storage):
    assert load_from_storage(storage) is None


def test_version_mismatch_loads_as_none(storage):
    storage.set_item(STORAGE_KEY, json.dumps({"version": 2, "candidates": []}))
    assert load_from_storage(storage) is None


def test_corrupt_snapshot_loads_as_none(storage, caplog):
    storage.set_item(STORAGE_KEY, "{not json")
    assert load_from_storage(storage) is None
    assert "Error loading from storage" in caplog.text


@pytest.mark.parametrize("raw", [
    "[1, 2]",
    '"just a string"',
    "42",
    "null",
    json.dumps({"version": 1, "candidates": [1, 2]}),
    json.dumps({"version": 1, "candidates": {"id": "x"}}),
    json.dumps({"version": 1, "candidates": [{"id": "x", "chat_history": [5]}]}),
])
def test_wrong_shape_snapshot_loads_as_none(storage, raw):
    storage.set_item(STORAGE_KEY, raw)
    assert load_from_storage(storage) is None


def test_wrong_shape_snapshot_gives_empty_store(storage):
    storage.set_item(STORAGE_KEY, "[1, 2]")
    store = CandidateStore.load(storage)
    assert store.candidates == []


def test_corrupt_file_loads_as_none(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("garbage")
    assert load_from_storage(LocalStorage(path)) is None


def test_write_failure_is_reported_not_raised(tmp_path):
    # A directory where the file should be makes every write fail
    path = tmp_path / "storage.json"
    path.mkdir()
    assert save_to_storage(initial_app_state(), LocalStorage(path)) is False


def test_clear_storage(storage):
    save_to_storage(initial_app_state(), storage)
    clear_storage(storage)
    assert storage.get_item(STORAGE_KEY) is None


def test_old_records_without_questions_load():
    data = serialize_candidate(new_candidate("A B"))
    del data["questions"]
    assert deserialize_candidate(data)["questions"] == []
