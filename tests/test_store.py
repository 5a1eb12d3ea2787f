"""
Candidate store tests: reducers, queries and persistence.

Run with: pytest tests/test_store.py -v
"""
import pytest

from errors import CandidateNotFoundError
from state import CandidateStatus, Tab, new_candidate
from storage import LocalStorage
from store import (
    CandidateStore,
    add_candidate,
    find_incomplete_candidate,
    initial_app_state,
    remove_candidate,
    select_candidate,
    set_tab,
    update_candidate,
)


def test_new_candidate_missing_fields_in_contact_order():
    assert new_candidate()["missing_fields"] == ["name", "email", "phone"]
    assert new_candidate(name="Jane Doe")["missing_fields"] == ["email", "phone"]
    assert new_candidate(email="j@x.io")["missing_fields"] == ["name", "phone"]


def test_new_candidate_defaults():
    candidate = new_candidate("Jane Doe", "j@x.io", "555")
    assert candidate["status"] == CandidateStatus.PENDING.value
    assert candidate["chat_history"] == []
    assert candidate["interview_answers"] == []
    assert candidate["current_question_index"] == 0
    assert candidate["final_score"] is None


def test_reducers_do_not_mutate_input():
    state = initial_app_state()
    candidate = new_candidate("Jane Doe")

    added = add_candidate(state, candidate)
    assert state["candidates"] == []
    assert added["current_candidate_id"] == candidate["id"]

    renamed = {**candidate, "name": "Janet Doe"}
    updated = update_candidate(added, renamed)
    assert added["candidates"][0]["name"] == "Jane Doe"
    assert updated["candidates"][0]["name"] == "Janet Doe"
    assert updated["candidates"][0]["updated_at"] >= candidate["updated_at"]


def test_update_unknown_candidate_raises():
    with pytest.raises(CandidateNotFoundError):
        update_candidate(initial_app_state(), new_candidate())


def test_select_and_remove():
    first, second = new_candidate("A One"), new_candidate("B Two")
    state = add_candidate(add_candidate(initial_app_state(), first), second)

    state = select_candidate(state, first["id"])
    assert state["current_candidate_id"] == first["id"]

    # Removing another candidate keeps the selection
    kept = remove_candidate(state, second["id"])
    assert kept["current_candidate_id"] == first["id"]

    cleared = remove_candidate(state, first["id"])
    assert cleared["current_candidate_id"] is None
    assert [c["id"] for c in cleared["candidates"]] == [second["id"]]

    assert select_candidate(state, None)["current_candidate_id"] is None
    with pytest.raises(CandidateNotFoundError):
        select_candidate(state, "nope")


def test_set_tab():
    state = set_tab(initial_app_state(), Tab.INTERVIEWER)
    assert state["current_tab"] == "interviewer"
    with pytest.raises(ValueError):
        set_tab(state, "elsewhere")


def test_find_incomplete_candidate():
    pending = new_candidate("A One")
    paused = {**new_candidate("B Two"), "status": CandidateStatus.PAUSED.value}
    state = add_candidate(add_candidate(initial_app_state(), pending), paused)
    assert find_incomplete_candidate(state)["id"] == paused["id"]

    done = {**paused, "status": CandidateStatus.COMPLETED.value}
    assert find_incomplete_candidate(update_candidate(state, done)) is None


def test_store_returns_copies():
    store = CandidateStore()
    candidate = store.add(new_candidate("Jane Doe"))

    candidate["name"] = "Changed"
    candidate["chat_history"].append("junk")
    stored = store.get(candidate["id"])
    assert stored["name"] == "Jane Doe"
    assert stored["chat_history"] == []


def test_store_persists_every_change(storage):
    store = CandidateStore(storage)
    candidate = store.add(new_candidate("Jane Doe"))
    store.set_tab(Tab.INTERVIEWER)

    reloaded = CandidateStore.load(LocalStorage(storage.path))
    assert reloaded.current_candidate_id == candidate["id"]
    assert reloaded.current_tab == "interviewer"
    assert reloaded.get(candidate["id"]) == candidate

    store.remove(candidate["id"])
    assert CandidateStore.load(storage).candidates == []


def test_store_loads_empty_without_saved_state(storage):
    store = CandidateStore.load(storage)
    assert store.candidates == []
    assert store.current_tab == "interviewee"
    assert store.current_candidate() is None
    assert store.incomplete_candidate() is None
