"""
Persistent storage for the Interview Assistant.

LocalStorage is a small JSON-file key/value store with the same semantics
as browser local storage: string values under string keys, and every write
overwrites the whole file. The application state lives under a single key
as a versioned JSON snapshot with datetimes written as ISO-8601 strings.

Storage failures never propagate. They are logged and a failed read is
treated as "no saved state".
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from state import AppState, Candidate

logger = logging.getLogger(__name__)

STORAGE_KEY = "interview_assistant_data"
STORAGE_VERSION = 1

_CANDIDATE_DATE_FIELDS = ("created_at", "updated_at", "interview_start_time", "interview_end_time")


class LocalStorage:
    """JSON-file backed key/value store."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not hold an object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


# =============================================================================
# Serialization
# =============================================================================

def _dump_date(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _load_date(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def serialize_candidate(candidate: Candidate) -> Dict[str, Any]:
    """Convert a candidate to JSON-safe data."""
    data = dict(candidate)
    for field in _CANDIDATE_DATE_FIELDS:
        data[field] = _dump_date(candidate.get(field))
    data["chat_history"] = [
        {**msg, "timestamp": _dump_date(msg["timestamp"])}
        for msg in candidate["chat_history"]
    ]
    data["interview_answers"] = [
        {**ans, "timestamp": _dump_date(ans["timestamp"])}
        for ans in candidate["interview_answers"]
    ]
    return data


def deserialize_candidate(data: Dict[str, Any]) -> Candidate:
    """Rebuild a candidate from stored data, parsing ISO strings back to datetimes."""
    candidate = dict(data)
    for field in _CANDIDATE_DATE_FIELDS:
        candidate[field] = _load_date(data.get(field))
    candidate["chat_history"] = [
        {**msg, "timestamp": _load_date(msg["timestamp"])}
        for msg in data.get("chat_history", [])
    ]
    candidate["interview_answers"] = [
        {**ans, "timestamp": _load_date(ans["timestamp"])}
        for ans in data.get("interview_answers", [])
    ]
    candidate.setdefault("questions", [])
    return candidate


def serialize_app_state(state: AppState) -> str:
    return json.dumps({
        "version": STORAGE_VERSION,
        "current_tab": state["current_tab"],
        "candidates": [serialize_candidate(c) for c in state["candidates"]],
        "current_candidate_id": state.get("current_candidate_id"),
    })


def deserialize_app_state(raw: str) -> Optional[AppState]:
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        logger.warning(f"Ignoring saved state that is not an object: {type(parsed).__name__}")
        return None
    candidates = parsed.get("candidates", [])
    if not isinstance(candidates, list) or not all(isinstance(c, dict) for c in candidates):
        logger.warning("Ignoring saved state with malformed candidate records")
        return None

    version = parsed.get("version")
    if version != STORAGE_VERSION:
        logger.warning(f"Ignoring saved state with unsupported version {version!r}")
        return None

    return AppState(
        current_tab=parsed.get("current_tab", "interviewee"),
        candidates=[deserialize_candidate(c) for c in candidates],
        current_candidate_id=parsed.get("current_candidate_id"),
    )


# =============================================================================
# Public API
# =============================================================================

def save_to_storage(state: AppState, storage: LocalStorage) -> bool:
    """Write a full snapshot of the app state. Returns False on failure."""
    try:
        storage.set_item(STORAGE_KEY, serialize_app_state(state))
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Error saving to storage: {e}")
        return False


def load_from_storage(storage: LocalStorage) -> Optional[AppState]:
    """Load the saved app state, or None when nothing usable is stored."""
    try:
        raw = storage.get_item(STORAGE_KEY)
        if not raw:
            return None
        return deserialize_app_state(raw)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error(f"Error loading from storage: {e}")
        return None


def clear_storage(storage: LocalStorage) -> None:
    try:
        storage.remove_item(STORAGE_KEY)
    except (OSError, ValueError) as e:
        logger.error(f"Error clearing storage: {e}")
