"""
Reviewer dashboard helper tests.

Run with: pytest tests/test_dashboard.py -v
"""
import json
from datetime import timedelta

import pytest

from dashboard import (
    candidate_score,
    export_candidate_report,
    filter_candidates,
    get_stats,
    interview_duration_minutes,
    scoring_details_for,
    sort_candidates,
)
from question_bank import get_static_questions
from state import CandidateStatus, new_candidate, utc_now


@pytest.fixture
def candidates():
    now = utc_now()
    alice = new_candidate("Alice Smith", "alice@acme.io", "1")
    alice.update(status=CandidateStatus.COMPLETED.value, final_score=82, created_at=now - timedelta(days=2))

    bob = new_candidate("bob jones", "bob@widgets.com", "2")
    bob.update(status=CandidateStatus.IN_PROGRESS.value, created_at=now - timedelta(days=1))

    carol = new_candidate("Carol White", "carol@acme.io", "3")
    carol.update(created_at=now)

    dave = new_candidate("Dave Brown", "dave@example.com", "4")
    dave.update(status=CandidateStatus.COMPLETED.value, final_score=64, created_at=now - timedelta(days=3))
    return [alice, bob, carol, dave]


def names(candidates):
    return [c["name"] for c in candidates]


def test_search_matches_name_or_email_case_insensitively(candidates):
    assert names(filter_candidates(candidates, "ACME")) == ["Alice Smith", "Carol White"]
    assert names(filter_candidates(candidates, "  Jones ")) == ["bob jones"]
    assert filter_candidates(candidates, "zzz") == []


def test_status_filter(candidates):
    assert names(filter_candidates(candidates, status="completed")) == ["Alice Smith", "Dave Brown"]
    assert names(filter_candidates(candidates, "acme", "pending")) == ["Carol White"]
    assert len(filter_candidates(candidates)) == 4


def test_sort_by_date_newest_first(candidates):
    assert names(sort_candidates(candidates, "date")) == ["Carol White", "bob jones", "Alice Smith", "Dave Brown"]


def test_sort_by_name(candidates):
    assert names(sort_candidates(candidates, "name")) == ["Alice Smith", "bob jones", "Carol White", "Dave Brown"]


def test_sort_by_score_highest_first(candidates):
    assert names(sort_candidates(candidates, "score"))[:2] == ["Alice Smith", "Dave Brown"]


def test_sort_rejects_unknown_option(candidates):
    with pytest.raises(ValueError):
        sort_candidates(candidates, "age")


def test_stats(candidates):
    assert get_stats(candidates) == {"total": 4, "completed": 2, "in_progress": 1, "pending": 1}
    assert get_stats([]) == {"total": 0, "completed": 0, "in_progress": 0, "pending": 0}


def test_candidate_score_computes_missing_final_score():
    questions = get_static_questions()
    candidate = new_candidate("Old Record", "o@x.io", "5")
    candidate.update(status=CandidateStatus.COMPLETED.value, questions=questions)
    candidate["interview_answers"] = [{
        "question_id": q["id"], "question": q["question"], "answer": "",
        "time_used": 5, "score": 20, "feedback": "", "timestamp": utc_now(),
    } for q in questions]

    assert candidate_score(candidate) == 20
    assert scoring_details_for(candidate)["recommendation"] == "Strong No Hire"
    assert candidate_score(new_candidate("New One")) is None
    assert scoring_details_for(new_candidate("New One")) is None


def test_interview_duration(candidates):
    candidate = candidates[0]
    assert interview_duration_minutes(candidate) is None
    start = utc_now()
    candidate.update(interview_start_time=start, interview_end_time=start + timedelta(minutes=12, seconds=20))
    assert interview_duration_minutes(candidate) == 12


def test_export_omits_resume_text(candidates):
    candidate = candidates[0]
    candidate["resume_text"] = "private resume"

    report = json.loads(export_candidate_report(candidate))

    assert "resume_text" not in report
    assert report["name"] == "Alice Smith"
    assert report["final_score"] == 82
    assert report["created_at"] == candidate["created_at"].isoformat()
