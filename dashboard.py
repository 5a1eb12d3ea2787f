"""
Dashboard helpers - read-only views over the candidate list.
"""
import json
from typing import Dict, List, Optional

from scoring import calculate_score
from state import Candidate, CandidateStatus
from storage import serialize_candidate

SORT_OPTIONS = ("date", "name", "score")
STATUS_FILTERS = ("all",) + tuple(s.value for s in CandidateStatus)


def filter_candidates(
    candidates: List[Candidate],
    search_term: str = "",
    status: str = "all",
) -> List[Candidate]:
    """Case-insensitive name/email search plus an optional status filter."""
    term = search_term.strip().lower()
    return [
        c for c in candidates
        if (not term or term in c["name"].lower() or term in c["email"].lower())
        and (status == "all" or c["status"] == status)
    ]


def candidate_score(candidate: Candidate) -> Optional[int]:
    """Final score, or the heuristic score for a completed candidate without one."""
    if candidate.get("final_score") is not None:
        return candidate["final_score"]
    if candidate["status"] == CandidateStatus.COMPLETED.value:
        return calculate_score(candidate["interview_answers"], candidate["questions"])["overall_score"]
    return None


def sort_candidates(candidates: List[Candidate], sort_by: str = "date") -> List[Candidate]:
    if sort_by == "name":
        return sorted(candidates, key=lambda c: c["name"].lower())
    if sort_by == "score":
        return sorted(candidates, key=lambda c: candidate_score(c) or 0, reverse=True)
    if sort_by == "date":
        return sorted(candidates, key=lambda c: c["created_at"], reverse=True)
    raise ValueError(f"Unknown sort option: {sort_by!r}")


def get_stats(candidates: List[Candidate]) -> Dict[str, int]:
    return {
        "total": len(candidates),
        "completed": sum(1 for c in candidates if c["status"] == CandidateStatus.COMPLETED.value),
        "in_progress": sum(1 for c in candidates if c["status"] == CandidateStatus.IN_PROGRESS.value),
        "pending": sum(1 for c in candidates if c["status"] == CandidateStatus.PENDING.value),
    }


def interview_duration_minutes(candidate: Candidate) -> Optional[int]:
    start = candidate.get("interview_start_time")
    end = candidate.get("interview_end_time")
    if not start or not end:
        return None
    return round((end - start).total_seconds() / 60)


def scoring_details_for(candidate: Candidate):
    """Stored scoring details, computed on the fly for older completed records."""
    if candidate["status"] != CandidateStatus.COMPLETED.value:
        return None
    return candidate.get("scoring_details") or calculate_score(
        candidate["interview_answers"], candidate["questions"]
    )


def export_candidate_report(candidate: Candidate) -> str:
    """JSON export of one candidate's record and scoring, minus the raw resume text."""
    data = serialize_candidate(candidate)
    data.pop("resume_text", None)
    data["scoring_details"] = scoring_details_for(candidate)
    data["final_score"] = candidate_score(candidate)
    data["interview_duration_minutes"] = interview_duration_minutes(candidate)
    return json.dumps(data, indent=2)
