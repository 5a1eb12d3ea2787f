"""
Interview API routes.
Wraps the InterviewRunner and candidate store for a browser frontend.
"""
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel, Field

from agents.evaluator import Evaluator, create_evaluator
from config import STORAGE_PATH
from dashboard import (
    candidate_score,
    export_candidate_report,
    filter_candidates,
    get_stats,
    sort_candidates,
)
from graph import InterviewRunner, derive_step
from state import Candidate
from storage import LocalStorage
from store import CandidateStore

router = APIRouter(prefix="/api", tags=["interview"])

# One runner per candidate; each holds that candidate's timer state
runners: Dict[str, InterviewRunner] = {}


@lru_cache
def get_store() -> CandidateStore:
    return CandidateStore.load(LocalStorage(STORAGE_PATH))


@lru_cache
def get_evaluator() -> Evaluator:
    return create_evaluator()


def get_runner(
    candidate_id: str,
    store: CandidateStore = Depends(get_store),
    evaluator: Evaluator = Depends(get_evaluator),
) -> InterviewRunner:
    store.get(candidate_id)  # 404 for unknown ids
    if candidate_id not in runners:
        runners[candidate_id] = InterviewRunner(store, evaluator, candidate_id)
    return runners[candidate_id]


# =============================================================================
# Schemas
# =============================================================================

class MessageRequest(BaseModel):
    message: str


class TickRequest(BaseModel):
    seconds: int = Field(default=1, ge=0)


class ChatMessageView(BaseModel):
    id: str
    type: str
    content: str
    timestamp: datetime


class QuestionView(BaseModel):
    id: str
    question: str
    difficulty: str
    time_limit: int
    category: str


class AnswerView(BaseModel):
    question_id: str
    question: str
    answer: str
    time_used: int
    score: int
    feedback: str
    timestamp: datetime


class ScoringDetailsView(BaseModel):
    overall_score: int
    technical_score: int
    communication_score: int
    problem_solving_score: int
    strengths: List[str]
    improvements: List[str]
    recommendation: str


class CandidateSummary(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    status: str
    created_at: datetime
    score: Optional[int]


class CandidateView(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    status: str
    step: str
    missing_fields: List[str]
    chat_history: List[ChatMessageView]
    interview_answers: List[AnswerView]
    current_question_index: int
    question_count: int
    current_question: Optional[QuestionView]
    time_remaining: Optional[int]
    timer_active: bool
    interview_start_time: Optional[datetime]
    interview_end_time: Optional[datetime]
    final_score: Optional[int]
    scoring_details: Optional[ScoringDetailsView]
    error: Optional[str] = None


def _summary(candidate: Candidate) -> CandidateSummary:
    return CandidateSummary(
        id=candidate["id"],
        name=candidate["name"],
        email=candidate["email"],
        phone=candidate["phone"],
        status=candidate["status"],
        created_at=candidate["created_at"],
        score=candidate_score(candidate),
    )


def _view(candidate: Candidate, runner: Optional[InterviewRunner] = None) -> CandidateView:
    step = runner.step if runner else derive_step(candidate)
    current_question = runner.current_question() if runner else None

    return CandidateView(
        id=candidate["id"],
        name=candidate["name"],
        email=candidate["email"],
        phone=candidate["phone"],
        status=candidate["status"],
        step=step.value,
        missing_fields=candidate["missing_fields"],
        chat_history=candidate["chat_history"],
        interview_answers=candidate["interview_answers"],
        current_question_index=candidate["current_question_index"],
        question_count=len(candidate["questions"]),
        current_question=QuestionView(**{
            key: current_question[key] for key in QuestionView.model_fields
        }) if current_question else None,
        time_remaining=candidate["time_remaining"],
        timer_active=runner.timer_active if runner else False,
        interview_start_time=candidate["interview_start_time"],
        interview_end_time=candidate["interview_end_time"],
        final_score=candidate["final_score"],
        scoring_details=candidate["scoring_details"],
        error=runner.last_error if runner else None,
    )


def _view_and_release(candidate: Candidate, runner: InterviewRunner) -> CandidateView:
    """Build the view, then drop the runner of a finished interview."""
    view = _view(candidate, runner)
    if runner.is_complete():
        runners.pop(candidate["id"], None)
    return view


# =============================================================================
# Routes
# =============================================================================

@router.get("/candidates", response_model=List[CandidateSummary])
async def list_candidates(
    search: str = "",
    status: str = "all",
    sort_by: str = Query("date", pattern="^(date|name|score)$"),
    store: CandidateStore = Depends(get_store),
):
    """List candidates for the interviewer dashboard."""
    candidates = sort_candidates(filter_candidates(store.candidates, search, status), sort_by)
    return [_summary(c) for c in candidates]


@router.get("/stats")
async def candidate_stats(store: CandidateStore = Depends(get_store)) -> Dict[str, int]:
    return get_stats(store.candidates)


@router.post("/candidates", response_model=CandidateView, status_code=201)
async def upload_resume(
    file: UploadFile = File(...),
    store: CandidateStore = Depends(get_store),
    evaluator: Evaluator = Depends(get_evaluator),
):
    """Upload a resume and create a candidate."""
    file_bytes = await file.read()
    runner = InterviewRunner(store, evaluator)
    candidate = runner.upload_resume(file_bytes, file.filename or "")
    runners[candidate["id"]] = runner
    return _view(candidate, runner)


@router.get("/candidates/{candidate_id}", response_model=CandidateView)
async def get_candidate(runner: InterviewRunner = Depends(get_runner)):
    return _view_and_release(runner.candidate, runner)


@router.post("/candidates/{candidate_id}/messages", response_model=CandidateView)
async def send_message(request: MessageRequest, runner: InterviewRunner = Depends(get_runner)):
    """Send a chat message: a missing contact detail or an answer."""
    candidate = runner.submit_message(request.message)
    return _view_and_release(candidate, runner)


@router.post("/candidates/{candidate_id}/start", response_model=CandidateView)
async def start_interview(runner: InterviewRunner = Depends(get_runner)):
    candidate = runner.start_interview()
    return _view(candidate, runner)


@router.post("/candidates/{candidate_id}/tick", response_model=CandidateView)
async def tick(request: TickRequest, runner: InterviewRunner = Depends(get_runner)):
    """Advance the question countdown by the seconds elapsed on the client."""
    candidate = runner.tick(request.seconds)
    return _view_and_release(candidate, runner)


@router.post("/candidates/{candidate_id}/pause", response_model=CandidateView)
async def pause_interview(runner: InterviewRunner = Depends(get_runner)):
    return _view(runner.pause_interview(), runner)


@router.post("/candidates/{candidate_id}/resume", response_model=CandidateView)
async def resume_interview(runner: InterviewRunner = Depends(get_runner)):
    return _view(runner.resume_interview(), runner)


@router.delete("/candidates/{candidate_id}")
async def reset_candidate(candidate_id: str, runner: InterviewRunner = Depends(get_runner)) -> Dict[str, Any]:
    """Discard the candidate and start over."""
    runner.reset()
    runners.pop(candidate_id, None)
    return {"status": "deleted", "candidate_id": candidate_id}


@router.get("/candidates/{candidate_id}/export")
async def export_candidate(candidate_id: str, store: CandidateStore = Depends(get_store)):
    report = export_candidate_report(store.get(candidate_id))
    return Response(
        content=report,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="candidate-{candidate_id}.json"'},
    )
