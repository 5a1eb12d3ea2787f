"""
Interview progression for the Interview Assistant.

Flow:
1. UPLOAD - resume is parsed and a candidate created
2. INFO_COLLECTION - missing contact fields are asked for one at a time
3. LOADING_QUESTIONS - question set is requested from the evaluator
4. INTERVIEW - one timed question at a time, each answer scored on submit
5. COMPLETED - final report attached

reset() discards the candidate and returns to UPLOAD from any step.
"""
from enum import Enum
import logging
from typing import List, Optional, Tuple

from agents.evaluator import Evaluator
from config import DEFAULT_TOPIC, QUESTION_COUNT
from errors import EvaluatorError, InvalidTransitionError, QuestionGenerationError
from resume_parser import extract_topics, parse_resume
from scoring import TIME_EXPIRED_ANSWER
from state import (
    Candidate,
    CandidateStatus,
    InterviewAnswer,
    InterviewQuestion,
    MessageType,
    new_candidate,
    new_message,
    utc_now,
)
from store import CandidateStore

logger = logging.getLogger(__name__)

READY_MESSAGE = (
    "Perfect! We have all the information we need. Let's begin the interview. "
    "Click 'Start Interview' when you're ready."
)
TIME_UP_MESSAGE = "Time's up! Moving to the next question."
TIME_EXPIRED_FEEDBACK = "Time expired without providing an answer."
NEXT_QUESTION_MESSAGE = "Let's move to the next question."
CLOSING_MESSAGE = (
    "Thank you for completing the interview! Your responses have been evaluated and recorded."
)


class Step(str, Enum):
    UPLOAD = "upload"
    INFO_COLLECTION = "info-collection"
    LOADING_QUESTIONS = "loading-questions"
    INTERVIEW = "interview"
    COMPLETED = "completed"


def derive_step(candidate: Optional[Candidate]) -> Step:
    """The interview step a stored candidate record is in."""
    if candidate is None:
        return Step.UPLOAD

    status = CandidateStatus(candidate["status"])
    if status == CandidateStatus.COMPLETED:
        return Step.COMPLETED
    if status in (CandidateStatus.IN_PROGRESS, CandidateStatus.PAUSED):
        if candidate["questions"]:
            return Step.INTERVIEW
        return Step.INFO_COLLECTION
    if status == CandidateStatus.PENDING:
        return Step.INFO_COLLECTION
    raise ValueError(f"Unhandled candidate status: {status}")


def format_question_message(index: int, questions: List[InterviewQuestion]) -> str:
    return f"Question {index + 1} of {len(questions)}:\n\n{questions[index]['question']}"


class InterviewRunner:
    """
    Drives one candidate through the interview.

    The runner never holds a mutable copy of the candidate between calls:
    each operation reads the record from the store, builds the updated
    record and hands it back to the store.
    """

    def __init__(
        self,
        store: CandidateStore,
        evaluator: Evaluator,
        candidate_id: Optional[str] = None,
        question_count: int = QUESTION_COUNT,
    ):
        self.store = store
        self.evaluator = evaluator
        self.candidate_id = candidate_id
        self.question_count = question_count
        self.timer_active = False
        self.last_error: Optional[str] = None
        self._loading = False
        # (question index, clock reading) the last whole second was counted from
        self._clock_anchor: Optional[Tuple[int, float]] = None

        # A resumed in-progress interview picks its countdown back up
        if self.step == Step.INTERVIEW and self.candidate["status"] == CandidateStatus.IN_PROGRESS.value:
            self.timer_active = True

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def candidate(self) -> Optional[Candidate]:
        if self.candidate_id is None:
            return None
        return self.store.get(self.candidate_id)

    @property
    def step(self) -> Step:
        if self._loading:
            return Step.LOADING_QUESTIONS
        return derive_step(self.candidate)

    def is_complete(self) -> bool:
        return self.step == Step.COMPLETED

    def current_question(self) -> Optional[InterviewQuestion]:
        candidate = self.candidate
        if candidate is None or self.step != Step.INTERVIEW:
            return None
        return candidate["questions"][candidate["current_question_index"]]

    def get_messages(self):
        candidate = self.candidate
        return candidate["chat_history"] if candidate else []

    def _require(self, action: str, *steps: Step) -> Step:
        step = self.step
        if step not in steps:
            raise InvalidTransitionError(action, step.value)
        return step

    def _save(self, candidate: Candidate) -> Candidate:
        return self.store.update(candidate)

    # -------------------------------------------------------------------------
    # UPLOAD
    # -------------------------------------------------------------------------

    def upload_resume(self, file_bytes: bytes, file_name: str) -> Candidate:
        """Parse a resume and create the candidate. Errors leave no trace in the store."""
        self._require("upload a resume", Step.UPLOAD)

        parsed = parse_resume(file_bytes, file_name)
        candidate = new_candidate(
            name=parsed["name"],
            email=parsed["email"],
            phone=parsed["phone"],
            resume_text=parsed["text"],
            resume_file_name=file_name,
        )
        if candidate["missing_fields"]:
            prompt = f"Please provide your {candidate['missing_fields'][0]}."
        else:
            prompt = READY_MESSAGE
        candidate["chat_history"].append(new_message(MessageType.BOT, prompt))

        self.candidate_id = candidate["id"]
        self.last_error = None
        logger.info(f"Created candidate {candidate['id']} missing {candidate['missing_fields']}")
        return self.store.add(candidate)

    # -------------------------------------------------------------------------
    # Chat input
    # -------------------------------------------------------------------------

    def submit_message(self, text: str) -> Candidate:
        """Route a chat message to whatever the current step expects."""
        step = self.step

        if step == Step.INFO_COLLECTION:
            if not self.candidate["missing_fields"]:
                raise InvalidTransitionError("send a message before the interview starts", step.value)
            return self._collect_field(text)
        if step == Step.INTERVIEW:
            return self.submit_answer(text)
        if step in (Step.UPLOAD, Step.LOADING_QUESTIONS, Step.COMPLETED):
            raise InvalidTransitionError("send a message", step.value)
        raise ValueError(f"Unhandled step: {step}")

    def _collect_field(self, text: str) -> Candidate:
        candidate = self.candidate
        value = text.strip()
        field = candidate["missing_fields"][0]

        # A blank reply leaves the field missing and asks again
        if not value:
            candidate["chat_history"].append(
                new_message(MessageType.BOT, f"Please provide your {field}.")
            )
            return self._save(candidate)

        candidate[field] = value
        candidate["missing_fields"] = candidate["missing_fields"][1:]
        candidate["chat_history"].append(new_message(MessageType.USER, text))

        if candidate["missing_fields"]:
            reply = f"Thank you! Now, please provide your {candidate['missing_fields'][0]}."
        else:
            reply = READY_MESSAGE
            candidate["status"] = CandidateStatus.PENDING.value
        candidate["chat_history"].append(new_message(MessageType.BOT, reply))

        return self._save(candidate)

    # -------------------------------------------------------------------------
    # LOADING_QUESTIONS
    # -------------------------------------------------------------------------

    def start_interview(self) -> Candidate:
        """
        Request the question set and open the first question.

        On failure the candidate stays in INFO_COLLECTION, last_error is set
        and QuestionGenerationError is raised. There is no automatic retry.
        """
        self._require("start the interview", Step.INFO_COLLECTION)
        candidate = self.candidate
        if candidate["missing_fields"]:
            raise InvalidTransitionError("start the interview with missing contact details", Step.INFO_COLLECTION.value)

        topics = extract_topics(candidate["resume_text"])
        topic = ", ".join(topics) if topics else DEFAULT_TOPIC
        logger.info(f"Requesting {self.question_count} questions on: {topic}")

        self._loading = True
        self.last_error = None
        try:
            questions = self.evaluator.generate_questions(topic, self.question_count)
        except QuestionGenerationError as e:
            self.last_error = e.message
            logger.error(f"Question generation failed for {candidate['id']}: {e.details}")
            raise
        except EvaluatorError as e:
            error = QuestionGenerationError(details={"reason": e.message})
            self.last_error = error.message
            logger.error(f"Question generation failed for {candidate['id']}: {e.message}")
            raise error from e
        finally:
            self._loading = False

        if not questions:
            self.last_error = QuestionGenerationError().message
            raise QuestionGenerationError(details={"reason": "Evaluator returned no questions"})

        candidate["questions"] = questions
        candidate["status"] = CandidateStatus.IN_PROGRESS.value
        candidate["interview_start_time"] = utc_now()
        candidate["current_question_index"] = 0
        candidate["time_remaining"] = questions[0]["time_limit"]

        source = "tailored based on your resume" if self.evaluator.generates_questions else "for this role"
        welcome = (
            f"Welcome to your technical interview, {candidate['name']}! "
            f"I've prepared {len(questions)} questions {source}. "
            f"Each question has a time limit. Let's start with question 1:\n\n"
            f"{questions[0]['question']}"
        )
        candidate["chat_history"].append(new_message(MessageType.BOT, welcome))

        saved = self._save(candidate)
        self.timer_active = True
        return saved

    # -------------------------------------------------------------------------
    # INTERVIEW
    # -------------------------------------------------------------------------

    def submit_answer(self, text: str) -> Candidate:
        """Score the answer to the current question and move on."""
        self._require("submit an answer", Step.INTERVIEW)
        candidate = self.candidate
        if candidate["status"] == CandidateStatus.PAUSED.value:
            raise InvalidTransitionError("submit an answer while paused", Step.INTERVIEW.value)

        question = candidate["questions"][candidate["current_question_index"]]
        time_limit = question["time_limit"]
        time_remaining = candidate["time_remaining"]
        if time_remaining is None:
            time_remaining = time_limit
        time_used = time_limit - time_remaining

        # Countdown stays paused while the answer is scored
        self.timer_active = False
        candidate["chat_history"].append(new_message(MessageType.USER, text))

        try:
            evaluation = self.evaluator.evaluate_answer(question, text, time_used)
        except Exception:
            # Nothing was recorded, so the question stays open
            self.timer_active = True
            raise

        answer = InterviewAnswer(
            question_id=question["id"],
            question=question["question"],
            answer=text,
            time_used=time_used,
            score=max(0, min(100, int(evaluation["score"]))),
            feedback=evaluation["feedback"],
            timestamp=utc_now(),
        )
        return self._record_answer(candidate, answer, NEXT_QUESTION_MESSAGE, MessageType.BOT)

    def tick(self, seconds: int = 1) -> Candidate:
        """Advance the countdown. Does nothing unless the timer is running."""
        candidate = self.candidate
        if not self.timer_active or self.step != Step.INTERVIEW:
            return candidate

        remaining = candidate["time_remaining"]
        if remaining is None:
            remaining = self.current_question()["time_limit"]
        candidate["time_remaining"] = max(0, remaining - seconds)

        if candidate["time_remaining"] == 0:
            return self._expire_question(candidate)
        return self._save(candidate)

    def tick_clock(self, now: float) -> Candidate:
        """
        Advance the countdown by the whole seconds elapsed on a monotonic clock.

        The first reading for a question (or after a pause) only sets the
        anchor. Fractions of a second carry over to the next reading, so
        calling this more or less often than once a second keeps real time.
        """
        candidate = self.candidate
        if not self.timer_active or self.step != Step.INTERVIEW:
            self._clock_anchor = None
            return candidate

        index = candidate["current_question_index"]
        if self._clock_anchor is None or self._clock_anchor[0] != index:
            self._clock_anchor = (index, now)
            return candidate

        elapsed = int(now - self._clock_anchor[1])
        if elapsed < 1:
            return candidate
        self._clock_anchor = (index, self._clock_anchor[1] + elapsed)
        return self.tick(elapsed)

    def handle_time_up(self) -> Candidate:
        """Expire the current question immediately."""
        self._require("expire a question", Step.INTERVIEW)
        candidate = self.candidate
        candidate["time_remaining"] = 0
        return self._expire_question(candidate)

    def _expire_question(self, candidate: Candidate) -> Candidate:
        self.timer_active = False
        question = candidate["questions"][candidate["current_question_index"]]
        logger.info(f"Time expired on question {question['id']} for {candidate['id']}")

        answer = InterviewAnswer(
            question_id=question["id"],
            question=question["question"],
            answer=TIME_EXPIRED_ANSWER,
            time_used=question["time_limit"],
            score=0,
            feedback=TIME_EXPIRED_FEEDBACK,
            timestamp=utc_now(),
        )
        return self._record_answer(candidate, answer, TIME_UP_MESSAGE, MessageType.SYSTEM)

    def _record_answer(
        self,
        candidate: Candidate,
        answer: InterviewAnswer,
        transition_message: str,
        transition_type: MessageType,
    ) -> Candidate:
        """Append the answer, advance the index, then complete or open the next question."""
        candidate["interview_answers"].append(answer)
        candidate["current_question_index"] += 1
        questions = candidate["questions"]

        if candidate["current_question_index"] >= len(questions):
            return self._complete(candidate, transition_type)

        next_index = candidate["current_question_index"]
        candidate["chat_history"].append(new_message(transition_type, transition_message))
        candidate["chat_history"].append(
            new_message(MessageType.BOT, format_question_message(next_index, questions))
        )
        candidate["time_remaining"] = questions[next_index]["time_limit"]

        saved = self._save(candidate)
        self.timer_active = True
        return saved

    def _complete(self, candidate: Candidate, transition_type: MessageType) -> Candidate:
        if transition_type == MessageType.SYSTEM:
            candidate["chat_history"].append(new_message(MessageType.SYSTEM, TIME_UP_MESSAGE))
        candidate["chat_history"].append(new_message(MessageType.BOT, CLOSING_MESSAGE))
        candidate["status"] = CandidateStatus.COMPLETED.value
        candidate["interview_end_time"] = utc_now()
        candidate["time_remaining"] = None
        self.timer_active = False

        self._attach_score(candidate)
        logger.info(f"Interview completed for {candidate['id']} with score {candidate['final_score']}")
        return self._save(candidate)

    def _attach_score(self, candidate: Candidate) -> None:
        # Scoring runs once per completed candidate
        if candidate.get("scoring_details") is not None:
            return
        details = self.evaluator.generate_report(
            candidate["name"] or "Candidate",
            candidate["interview_answers"],
            candidate["questions"],
        )
        candidate["scoring_details"] = details
        candidate["final_score"] = details["overall_score"]

    # -------------------------------------------------------------------------
    # Pause / resume / reset
    # -------------------------------------------------------------------------

    def pause_interview(self) -> Candidate:
        self._require("pause the interview", Step.INTERVIEW)
        candidate = self.candidate
        candidate["status"] = CandidateStatus.PAUSED.value
        self.timer_active = False
        self._clock_anchor = None
        return self._save(candidate)

    def resume_interview(self) -> Candidate:
        self._require("resume the interview", Step.INTERVIEW)
        candidate = self.candidate
        candidate["status"] = CandidateStatus.IN_PROGRESS.value
        saved = self._save(candidate)
        self.timer_active = True
        return saved

    def reset(self) -> None:
        """Discard the candidate and go back to UPLOAD."""
        if self.candidate_id is not None:
            logger.info(f"Discarding candidate {self.candidate_id}")
            self.store.remove(self.candidate_id)
        self.candidate_id = None
        self.timer_active = False
        self.last_error = None
        self._loading = False
