"""
LLM Evaluator - question generation and scoring through the hosted model.

Responses are expected as JSON embedded in the model output. Anything that
cannot be parsed or validated raises EvaluatorError; falling back to local
scoring is FallbackEvaluator's job, not this class's.
"""
import json
import math
import logging
import re
import uuid
from typing import Any, List, Optional

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import SystemMessage, HumanMessage
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from agents.evaluator import Evaluator
from config import LLM_MAX_TOKENS, LLM_MODEL, LLM_TEMPERATURE
from errors import EvaluatorError, QuestionGenerationError
from prompts import (
    EVALUATOR_SYSTEM_PROMPT,
    get_answer_evaluation_prompt,
    get_final_report_prompt,
    get_question_generation_prompt,
)
from question_bank import assign_time_limits, expected_terms
from state import (
    AnswerEvaluation,
    Difficulty,
    InterviewAnswer,
    InterviewQuestion,
    Recommendation,
    ScoringDetails,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Response schemas
# =============================================================================

class GeneratedQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(min_length=1)
    difficulty: Difficulty
    category: str = "General"
    expected_points: List[str] = Field(default_factory=list, alias="expectedPoints")

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


class AnswerEvaluationResponse(BaseModel):
    score: float = Field(allow_inf_nan=False)
    feedback: str
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)


class FinalReportResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    overall_score: float = Field(alias="overallScore", allow_inf_nan=False)
    technical_score: float = Field(alias="technicalScore", allow_inf_nan=False)
    communication_score: float = Field(alias="communicationScore", allow_inf_nan=False)
    problem_solving_score: float = Field(alias="problemSolvingScore", allow_inf_nan=False)
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    recommendation: Recommendation


def _clamp_score(score: float) -> int:
    if not math.isfinite(score):
        raise EvaluatorError(f"Non-numeric score in model response: {score}")
    return max(0, min(100, int(round(score))))


def extract_json(response_text: str, array: bool = False) -> Any:
    """Pull the JSON array/object out of a model response."""
    text = response_text
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]

    pattern = r"\[[\s\S]*\]" if array else r"\{[\s\S]*\}"
    match = re.search(pattern, text)
    if not match:
        kind = "array" if array else "object"
        raise EvaluatorError(f"No JSON {kind} found in model response")

    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise EvaluatorError(f"Malformed JSON in model response: {e}") from e


class LLMEvaluator(Evaluator):
    """Evaluator backed by a chat model (Claude via langchain-anthropic by default)."""

    name = "ai"
    generates_questions = True

    def __init__(self, llm: Optional[Any] = None):
        self.llm = llm or ChatAnthropic(
            model=LLM_MODEL,
            temperature=LLM_TEMPERATURE,
            max_tokens=LLM_MAX_TOKENS,
        )
        self.total_tokens = 0

    def _invoke(self, prompt: str) -> str:
        messages = [
            SystemMessage(content=EVALUATOR_SYSTEM_PROMPT),
            HumanMessage(content=prompt),
        ]
        try:
            response = self.llm.invoke(messages)
        except Exception as e:
            raise EvaluatorError(f"Evaluator request failed: {e}") from e

        # Track token usage
        metadata = getattr(response, "response_metadata", None) or {}
        usage = metadata.get("usage", {})
        self.total_tokens += usage.get("input_tokens", 0) + usage.get("output_tokens", 0)

        content = response.content
        if isinstance(content, list):
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        logger.debug(f"Raw evaluator response: {content}")
        return content

    def generate_questions(self, topic: str, count: int = 6) -> List[InterviewQuestion]:
        try:
            text = self._invoke(get_question_generation_prompt(topic, count))
            data = extract_json(text, array=True)
            parsed = [GeneratedQuestion.model_validate(item) for item in data[:count]]
        except EvaluatorError as e:
            raise QuestionGenerationError(details={"reason": e.message}) from e
        except (ValidationError, TypeError) as e:
            raise QuestionGenerationError(details={"reason": str(e)}) from e

        if not parsed:
            raise QuestionGenerationError(details={"reason": "Model returned no questions"})

        batch = uuid.uuid4().hex[:8]
        questions = [
            InterviewQuestion(
                id=f"ai-q-{batch}-{i}",
                question=q.question,
                difficulty=q.difficulty.value,
                time_limit=0,
                category=q.category,
                expected_points=q.expected_points,
            )
            for i, q in enumerate(parsed)
        ]
        logger.info(f"Generated {len(questions)} questions for topic: {topic}")
        return assign_time_limits(questions)

    def evaluate_answer(
        self,
        question: InterviewQuestion,
        answer: str,
        time_used: int,
    ) -> AnswerEvaluation:
        prompt = get_answer_evaluation_prompt(
            question["question"],
            answer,
            expected_terms(question),
            time_used,
            question["time_limit"],
        )
        data = extract_json(self._invoke(prompt))
        try:
            evaluation = AnswerEvaluationResponse.model_validate(data)
        except ValidationError as e:
            raise EvaluatorError(f"Invalid evaluation response: {e}") from e

        return AnswerEvaluation(
            score=_clamp_score(evaluation.score),
            feedback=evaluation.feedback,
            strengths=evaluation.strengths,
            improvements=evaluation.improvements,
        )

    def generate_report(
        self,
        candidate_name: str,
        answers: List[InterviewAnswer],
        questions: List[InterviewQuestion],
    ) -> ScoringDetails:
        data = extract_json(self._invoke(get_final_report_prompt(candidate_name, answers)))
        try:
            report = FinalReportResponse.model_validate(data)
        except ValidationError as e:
            raise EvaluatorError(f"Invalid report response: {e}") from e

        return ScoringDetails(
            overall_score=_clamp_score(report.overall_score),
            technical_score=_clamp_score(report.technical_score),
            communication_score=_clamp_score(report.communication_score),
            problem_solving_score=_clamp_score(report.problem_solving_score),
            strengths=report.strengths,
            improvements=report.improvements,
            recommendation=report.recommendation.value,
        )
