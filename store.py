"""
Candidate Record Store.

All mutations of the candidate list go through the pure reducer functions
below, each returning a new AppState. CandidateStore is the single writer:
it applies a reducer, keeps the result and mirrors a full snapshot to
storage. Readers get copies, never the store's own records.
"""
import copy
import logging
from typing import List, Optional

from errors import CandidateNotFoundError
from state import AppState, Candidate, CandidateStatus, Tab, utc_now
from storage import LocalStorage, load_from_storage, save_to_storage

logger = logging.getLogger(__name__)


# =============================================================================
# Reducers
# =============================================================================

def initial_app_state() -> AppState:
    return AppState(
        current_tab=Tab.INTERVIEWEE.value,
        candidates=[],
        current_candidate_id=None,
    )


def add_candidate(state: AppState, candidate: Candidate) -> AppState:
    """Append a candidate and make it the current one."""
    return {
        **state,
        "candidates": state["candidates"] + [candidate],
        "current_candidate_id": candidate["id"],
    }


def update_candidate(state: AppState, candidate: Candidate) -> AppState:
    """Replace the stored record with the same id."""
    if find_candidate(state, candidate["id"]) is None:
        raise CandidateNotFoundError(candidate["id"])

    updated = {**candidate, "updated_at": utc_now()}
    return {
        **state,
        "candidates": [
            updated if c["id"] == candidate["id"] else c
            for c in state["candidates"]
        ],
    }


def select_candidate(state: AppState, candidate_id: Optional[str]) -> AppState:
    if candidate_id is not None and find_candidate(state, candidate_id) is None:
        raise CandidateNotFoundError(candidate_id)
    return {**state, "current_candidate_id": candidate_id}


def remove_candidate(state: AppState, candidate_id: str) -> AppState:
    """Discard a candidate, clearing the selection if it pointed at it."""
    if find_candidate(state, candidate_id) is None:
        raise CandidateNotFoundError(candidate_id)

    current = state.get("current_candidate_id")
    return {
        **state,
        "candidates": [c for c in state["candidates"] if c["id"] != candidate_id],
        "current_candidate_id": None if current == candidate_id else current,
    }


def set_tab(state: AppState, tab: Tab) -> AppState:
    return {**state, "current_tab": Tab(tab).value}


# =============================================================================
# Queries
# =============================================================================

def find_candidate(state: AppState, candidate_id: Optional[str]) -> Optional[Candidate]:
    if candidate_id is None:
        return None
    for candidate in state["candidates"]:
        if candidate["id"] == candidate_id:
            return candidate
    return None


def find_incomplete_candidate(state: AppState) -> Optional[Candidate]:
    """First candidate whose interview was started but not finished."""
    for candidate in state["candidates"]:
        if candidate["status"] in (CandidateStatus.IN_PROGRESS.value, CandidateStatus.PAUSED.value):
            return candidate
    return None


# =============================================================================
# Store
# =============================================================================

class CandidateStore:
    """
    Owns the application state and persists it after every change.

    Pass storage=None for a purely in-memory store.
    """

    def __init__(self, storage: Optional[LocalStorage] = None, state: Optional[AppState] = None):
        self.storage = storage
        self._state = state if state is not None else initial_app_state()

    @classmethod
    def load(cls, storage: LocalStorage) -> "CandidateStore":
        """Create a store from saved state, starting empty if none is usable."""
        saved = load_from_storage(storage)
        if saved is not None:
            logger.info(f"Loaded {len(saved['candidates'])} candidates from storage")
        return cls(storage, saved)

    # -- reads ---------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return copy.deepcopy(self._state)

    @property
    def candidates(self) -> List[Candidate]:
        return copy.deepcopy(self._state["candidates"])

    @property
    def current_candidate_id(self) -> Optional[str]:
        return self._state.get("current_candidate_id")

    @property
    def current_tab(self) -> str:
        return self._state["current_tab"]

    def get(self, candidate_id: str) -> Candidate:
        candidate = find_candidate(self._state, candidate_id)
        if candidate is None:
            raise CandidateNotFoundError(candidate_id)
        return copy.deepcopy(candidate)

    def current_candidate(self) -> Optional[Candidate]:
        candidate = find_candidate(self._state, self.current_candidate_id)
        return copy.deepcopy(candidate) if candidate else None

    def incomplete_candidate(self) -> Optional[Candidate]:
        candidate = find_incomplete_candidate(self._state)
        return copy.deepcopy(candidate) if candidate else None

    # -- writes --------------------------------------------------------------

    def _apply(self, new_state: AppState) -> None:
        self._state = new_state
        if self.storage is not None:
            save_to_storage(self._state, self.storage)

    def add(self, candidate: Candidate) -> Candidate:
        self._apply(add_candidate(self._state, copy.deepcopy(candidate)))
        return self.get(candidate["id"])

    def update(self, candidate: Candidate) -> Candidate:
        self._apply(update_candidate(self._state, copy.deepcopy(candidate)))
        return self.get(candidate["id"])

    def select(self, candidate_id: Optional[str]) -> None:
        self._apply(select_candidate(self._state, candidate_id))

    def remove(self, candidate_id: str) -> None:
        self._apply(remove_candidate(self._state, candidate_id))

    def set_tab(self, tab: Tab) -> None:
        self._apply(set_tab(self._state, tab))
