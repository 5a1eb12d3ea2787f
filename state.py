"""
State definitions for the Interview Assistant.
"""
from typing import TypedDict, List, Optional
from datetime import datetime, timezone
from enum import Enum
import uuid


class CandidateStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    PAUSED = "paused"
    COMPLETED = "completed"


class MessageType(str, Enum):
    USER = "user"
    BOT = "bot"
    SYSTEM = "system"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Recommendation(str, Enum):
    STRONG_HIRE = "Strong Hire"
    HIRE = "Hire"
    NO_HIRE = "No Hire"
    STRONG_NO_HIRE = "Strong No Hire"


class Tab(str, Enum):
    INTERVIEWEE = "interviewee"
    INTERVIEWER = "interviewer"


# Contact fields in the order they are requested
CONTACT_FIELDS = ["name", "email", "phone"]


class ChatMessage(TypedDict):
    id: str
    type: str  # MessageType value
    content: str
    timestamp: datetime


class InterviewQuestion(TypedDict, total=False):
    id: str
    question: str
    difficulty: str  # Difficulty value
    time_limit: int  # seconds
    category: str
    expected_keywords: List[str]  # static bank
    expected_points: List[str]  # generated questions


class InterviewAnswer(TypedDict):
    question_id: str
    question: str  # snapshot of the question text
    answer: str
    time_used: int  # seconds
    score: int  # 0-100
    feedback: str
    timestamp: datetime


class AnswerEvaluation(TypedDict):
    score: int
    feedback: str
    strengths: List[str]
    improvements: List[str]


class ScoringDetails(TypedDict):
    overall_score: int
    technical_score: int
    communication_score: int
    problem_solving_score: int
    strengths: List[str]
    improvements: List[str]
    recommendation: str  # Recommendation value


class Candidate(TypedDict):
    # Identity and contact
    id: str
    name: str
    email: str
    phone: str

    # Resume
    resume_text: str
    resume_file_name: Optional[str]

    # Progress
    status: str  # CandidateStatus value
    created_at: datetime
    updated_at: datetime
    missing_fields: List[str]

    # Conversation and interview
    chat_history: List[ChatMessage]
    questions: List[InterviewQuestion]
    interview_answers: List[InterviewAnswer]
    current_question_index: int
    time_remaining: Optional[int]
    interview_start_time: Optional[datetime]
    interview_end_time: Optional[datetime]

    # Scoring (populated once the interview is completed)
    final_score: Optional[int]
    scoring_details: Optional[ScoringDetails]


class AppState(TypedDict):
    current_tab: str  # Tab value
    candidates: List[Candidate]
    current_candidate_id: Optional[str]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_message(message_type: MessageType, content: str) -> ChatMessage:
    """Create a chat message stamped with the current time."""
    return ChatMessage(
        id=uuid.uuid4().hex,
        type=MessageType(message_type).value,
        content=content,
        timestamp=utc_now(),
    )


def new_candidate(
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    resume_text: str = "",
    resume_file_name: Optional[str] = None,
) -> Candidate:
    """
    Create a fresh pending candidate.

    Every contact field that is empty is added to missing_fields, always in
    the order name, email, phone.
    """
    contact = {"name": name or "", "email": email or "", "phone": phone or ""}
    now = utc_now()

    return Candidate(
        id=uuid.uuid4().hex,
        name=contact["name"],
        email=contact["email"],
        phone=contact["phone"],
        resume_text=resume_text,
        resume_file_name=resume_file_name,
        status=CandidateStatus.PENDING.value,
        created_at=now,
        updated_at=now,
        missing_fields=[field for field in CONTACT_FIELDS if not contact[field]],
        chat_history=[],
        questions=[],
        interview_answers=[],
        current_question_index=0,
        time_remaining=None,
        interview_start_time=None,
        interview_end_time=None,
        final_score=None,
        scoring_details=None,
    )
