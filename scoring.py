"""
Heuristic scoring.

Deterministic, local scoring used by the static interview and as the
fallback whenever the hosted evaluator fails. Per-answer scores come from
answer length plus a keyword bonus; the final report combines technical,
communication and problem-solving sub-scores.
"""
import re
from typing import Dict, List, Optional

from state import (
    AnswerEvaluation,
    InterviewAnswer,
    InterviewQuestion,
    Recommendation,
    ScoringDetails,
)

# Length bands: (exclusive upper bound on characters, score)
LENGTH_BANDS = [(10, 20), (50, 40), (200, 70)]
LONG_ANSWER_SCORE = 85
MAX_KEYWORD_BONUS = 15

TECHNICAL_CATEGORIES = {
    "JavaScript Fundamentals",
    "React Basics",
    "React Performance",
    "JavaScript Advanced",
}
PROBLEM_SOLVING_CATEGORIES = {"System Design", "Algorithms"}

FILLER_WORDS = ["um", "uh", "er", "erm", "hmm", "you know", "basically", "literally"]
_FILLER_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(w) for w in FILLER_WORDS) + r")\b",
    re.IGNORECASE,
)
_SENTENCE_SPLIT = re.compile(r"[.!?]+")

TIME_EXPIRED_ANSWER = "(No answer provided - time expired)"


def _clamp(score: float) -> int:
    return max(0, min(100, int(round(score))))


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# =============================================================================
# Per-answer
# =============================================================================

def length_score(answer: str) -> int:
    length = len(answer.strip())
    for upper_bound, score in LENGTH_BANDS:
        if length < upper_bound:
            return score
    return LONG_ANSWER_SCORE


def matched_keywords(answer: str, keywords: List[str]) -> List[str]:
    lowered = answer.lower()
    return [kw for kw in keywords if kw and kw.lower() in lowered]


def score_answer(answer: str, expected_keywords: Optional[List[str]] = None) -> AnswerEvaluation:
    """Score a single answer by length band plus a keyword-coverage bonus."""
    keywords = expected_keywords or []
    base = length_score(answer)
    matched = matched_keywords(answer, keywords)

    bonus = 0
    if keywords:
        bonus = round(MAX_KEYWORD_BONUS * len(matched) / len(keywords))

    score = _clamp(base + bonus)

    if base <= 20:
        feedback = "The answer is too brief to show your understanding. Explain your reasoning."
    elif base <= 40:
        feedback = "A short answer. Add detail and an example to show more depth."
    elif base <= 70:
        feedback = "A reasonable answer with some supporting detail."
    else:
        feedback = "A detailed, well-developed answer."

    strengths = []
    improvements = []
    if keywords:
        feedback += f" Covered {len(matched)} of {len(keywords)} key concepts."
        if matched:
            strengths.append(f"Mentioned {', '.join(matched)}")
        missed = [kw for kw in keywords if kw not in matched]
        if missed:
            improvements.append(f"Consider discussing {', '.join(missed)}")
    if base >= 70:
        strengths.append("Gave a thorough explanation")
    else:
        improvements.append("Provide more detailed explanations")

    return AnswerEvaluation(
        score=score,
        feedback=feedback,
        strengths=strengths,
        improvements=improvements,
    )


def communication_score(answer: str) -> int:
    """Reward clear structure: length, sentences, capitalization, punctuation, no filler."""
    stripped = answer.strip()
    score = 0

    if 20 <= len(stripped.split()) <= 150:
        score += 30

    sentences = [s for s in _SENTENCE_SPLIT.split(stripped) if s.strip()]
    if len(sentences) > 1:
        score += 20

    if stripped and stripped[0].isupper():
        score += 15
    if stripped and stripped[-1] in ".!?":
        score += 15

    if not _FILLER_PATTERN.search(stripped):
        score += 20

    return min(score, 100)


# =============================================================================
# Aggregate
# =============================================================================

def recommendation_for(overall_score: int) -> str:
    if overall_score >= 85:
        return Recommendation.STRONG_HIRE.value
    if overall_score >= 70:
        return Recommendation.HIRE.value
    if overall_score >= 50:
        return Recommendation.NO_HIRE.value
    return Recommendation.STRONG_NO_HIRE.value


def simple_recommendation(overall_score: int) -> str:
    """Two-level recommendation used when the hosted report is unavailable."""
    return Recommendation.HIRE.value if overall_score >= 70 else Recommendation.NO_HIRE.value


def _categories_by_question(questions: List[InterviewQuestion]) -> Dict[str, str]:
    return {q["id"]: q.get("category", "") for q in questions}


def calculate_sub_scores(
    answers: List[InterviewAnswer],
    questions: List[InterviewQuestion],
) -> Dict[str, int]:
    """Technical, communication, problem-solving and overall scores."""
    if not answers:
        return {
            "technical_score": 0,
            "communication_score": 0,
            "problem_solving_score": 0,
            "overall_score": 0,
        }

    categories = _categories_by_question(questions)
    all_scores = [a["score"] for a in answers]

    technical = [a["score"] for a in answers if categories.get(a["question_id"]) in TECHNICAL_CATEGORIES]
    problem_solving = [
        a["score"] for a in answers
        if categories.get(a["question_id"]) in PROBLEM_SOLVING_CATEGORIES
    ]

    technical_score = _clamp(_mean(technical or all_scores))
    communication = _clamp(_mean([communication_score(a["answer"]) for a in answers]))
    problem_solving_score = _clamp(_mean(problem_solving or all_scores))
    overall = _clamp(_mean([technical_score, communication, problem_solving_score]))

    return {
        "technical_score": technical_score,
        "communication_score": communication,
        "problem_solving_score": problem_solving_score,
        "overall_score": overall,
    }


def _summarize(sub_scores: Dict[str, int], answers: List[InterviewAnswer]) -> tuple:
    strengths = []
    improvements = []

    if sub_scores["technical_score"] >= 70:
        strengths.append("Solid technical knowledge")
    else:
        improvements.append("Deepen technical fundamentals")

    if sub_scores["communication_score"] >= 70:
        strengths.append("Clear, well-structured communication")
    else:
        improvements.append("Answer in complete, well-structured sentences")

    if sub_scores["problem_solving_score"] >= 70:
        strengths.append("Strong problem-solving approach")
    else:
        improvements.append("Practice system design and algorithm problems")

    expired = sum(1 for a in answers if a["answer"] == TIME_EXPIRED_ANSWER)
    if answers and expired == 0:
        strengths.append("Answered every question within the time limit")
    elif expired:
        improvements.append("Manage time so every question gets an answer")

    if not strengths:
        strengths.append("Completed the interview")

    return strengths, improvements


def calculate_score(
    answers: List[InterviewAnswer],
    questions: List[InterviewQuestion],
) -> ScoringDetails:
    """Full heuristic report for a completed interview."""
    sub_scores = calculate_sub_scores(answers, questions)
    strengths, improvements = _summarize(sub_scores, answers)

    return ScoringDetails(
        overall_score=sub_scores["overall_score"],
        technical_score=sub_scores["technical_score"],
        communication_score=sub_scores["communication_score"],
        problem_solving_score=sub_scores["problem_solving_score"],
        strengths=strengths,
        improvements=improvements,
        recommendation=recommendation_for(sub_scores["overall_score"]),
    )
