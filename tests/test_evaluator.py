"""
Evaluator tests: LLM response parsing and the heuristic fallback.

The chat model is replaced with FakeLLM, so no network access is needed.

Run with: pytest tests/test_evaluator.py -v
"""
import json

import pytest

from agents.evaluator import FALLBACK_FEEDBACK, FallbackEvaluator, create_evaluator
from agents.heuristic import HeuristicEvaluator
from agents.llm_evaluator import LLMEvaluator, extract_json
from conftest import FakeLLM
from errors import EvaluatorError, QuestionGenerationError
from prompts import get_question_generation_prompt
from question_bank import GENERATED_TIME_LIMITS, get_static_questions
from scoring import calculate_sub_scores, score_answer
from state import utc_now

GENERATED = [
    {"question": f"Question {i}?", "difficulty": level, "category": "React", "expectedPoints": ["hooks", "state"]}
    for i, level in enumerate(["easy", "Easy", "medium", "Medium", "HARD", "Hard"], 1)
]

REPORT = {
    "overallScore": 78,
    "technicalScore": 80,
    "communicationScore": 75,
    "problemSolvingScore": 79,
    "strengths": ["Clear explanations"],
    "improvements": ["More depth on system design"],
    "recommendation": "Hire",
}


def make_answers(questions, score=60):
    return [{
        "question_id": q["id"],
        "question": q["question"],
        "answer": "An answer with some detail in it.",
        "time_used": 10,
        "score": score,
        "feedback": "",
        "timestamp": utc_now(),
    } for q in questions]


# =============================================================================
# JSON extraction
# =============================================================================

def test_extract_json_from_code_fence():
    text = 'Here you go:\n```json\n{"score": 80, "feedback": "Good"}\n```\nThanks'
    assert extract_json(text) == {"score": 80, "feedback": "Good"}


def test_extract_json_from_prose():
    assert extract_json('Sure! [{"a": 1}, {"a": 2}] hope that helps', array=True) == [{"a": 1}, {"a": 2}]


def test_extract_json_failures():
    with pytest.raises(EvaluatorError):
        extract_json("no json at all")
    with pytest.raises(EvaluatorError):
        extract_json("{broken: json}")


# =============================================================================
# LLMEvaluator
# =============================================================================

def test_generate_questions_assigns_ids_and_time_limits():
    llm = FakeLLM([json.dumps(GENERATED)])
    evaluator = LLMEvaluator(llm=llm)

    questions = evaluator.generate_questions("React, TypeScript")

    assert [q["time_limit"] for q in questions] == GENERATED_TIME_LIMITS
    assert [q["difficulty"] for q in questions] == ["Easy", "Easy", "Medium", "Medium", "Hard", "Hard"]
    assert questions[0]["expected_points"] == ["hooks", "state"]
    assert len({q["id"] for q in questions}) == 6
    assert all(q["id"].startswith("ai-q-") for q in questions)
    assert "React, TypeScript" in llm.calls[0][1].content
    assert evaluator.total_tokens == 15


def test_question_prompt_names_only_the_topic():
    prompt = get_question_generation_prompt("React, TypeScript")

    assert "Keep every question within React, TypeScript" in prompt
    assert "listed above" not in prompt
    assert prompt.count("React, TypeScript") == 2


def test_generate_questions_failures_raise_question_generation_error():
    bad_responses = [
        "I can't help with that.",
        json.dumps([{"question": "Q?", "difficulty": "Impossible"}]),
        "[]",
        RuntimeError("connection reset"),
    ]
    for response in bad_responses:
        evaluator = LLMEvaluator(llm=FakeLLM([response]))
        with pytest.raises(QuestionGenerationError):
            evaluator.generate_questions("Python")


def test_evaluate_answer_clamps_score():
    llm = FakeLLM([
        '{"score": 140, "feedback": "Excellent", "strengths": ["Depth"], "improvements": []}',
        '{"score": -5, "feedback": "Off topic"}',
    ])
    evaluator = LLMEvaluator(llm=llm)
    question = {**get_static_questions(1)[0], "expected_points": ["scope"]}

    high = evaluator.evaluate_answer(question, "answer", 12)
    low = evaluator.evaluate_answer(question, "answer", 12)

    assert high == {"score": 100, "feedback": "Excellent", "strengths": ["Depth"], "improvements": []}
    assert low["score"] == 0
    assert low["strengths"] == []


def test_evaluate_answer_rejects_incomplete_response():
    evaluator = LLMEvaluator(llm=FakeLLM(['{"feedback": "no score"}']))
    with pytest.raises(EvaluatorError):
        evaluator.evaluate_answer(get_static_questions(1)[0], "answer", 5)


def test_generate_report():
    questions = get_static_questions()
    evaluator = LLMEvaluator(llm=FakeLLM([json.dumps(REPORT)]))

    report = evaluator.generate_report("Jane Doe", make_answers(questions), questions)

    assert report == {
        "overall_score": 78,
        "technical_score": 80,
        "communication_score": 75,
        "problem_solving_score": 79,
        "strengths": ["Clear explanations"],
        "improvements": ["More depth on system design"],
        "recommendation": "Hire",
    }


def test_generate_report_rejects_unknown_recommendation():
    evaluator = LLMEvaluator(llm=FakeLLM([json.dumps({**REPORT, "recommendation": "Maybe"})]))
    with pytest.raises(EvaluatorError):
        evaluator.generate_report("Jane Doe", [], [])


# =============================================================================
# Fallback
# =============================================================================

def test_fallback_uses_heuristic_score_with_fixed_feedback():
    question = get_static_questions(1)[0]
    answer = "Variables declared with let have block scope; var is function scoped and hoisted."
    evaluator = FallbackEvaluator(LLMEvaluator(llm=FakeLLM([RuntimeError("timeout")])))

    evaluation = evaluator.evaluate_answer(question, answer, 10)

    assert evaluation["score"] == score_answer(answer, question["expected_keywords"])["score"]
    assert evaluation["feedback"] == FALLBACK_FEEDBACK
    assert evaluation["strengths"] == ["Answer provided"]
    assert evaluation["improvements"] == ["Evaluation service temporarily unavailable"]


def test_fallback_report_uses_sub_scores_and_simple_recommendation():
    questions = get_static_questions()
    answers = make_answers(questions, score=90)
    evaluator = FallbackEvaluator(LLMEvaluator(llm=FakeLLM(["not json"])))

    report = evaluator.generate_report("Jane Doe", answers, questions)
    sub_scores = calculate_sub_scores(answers, questions)

    assert report["overall_score"] == sub_scores["overall_score"]
    assert report["communication_score"] == sub_scores["communication_score"]
    assert report["strengths"] == ["Completed all questions"]
    assert report["improvements"] == ["Continue developing technical skills"]
    assert report["recommendation"] == ("Hire" if sub_scores["overall_score"] >= 70 else "No Hire")


@pytest.mark.parametrize("raw_score", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_answer_score_falls_back(raw_score):
    question = get_static_questions(1)[0]
    llm = FakeLLM(['{"score": %s, "feedback": "x"}' % raw_score])
    evaluator = FallbackEvaluator(LLMEvaluator(llm=llm))

    evaluation = evaluator.evaluate_answer(question, "An answer.", 5)

    assert evaluation["feedback"] == FALLBACK_FEEDBACK
    assert evaluation["score"] == score_answer("An answer.", question["expected_keywords"])["score"]


@pytest.mark.parametrize("field", ["overallScore", "technicalScore", "communicationScore", "problemSolvingScore"])
def test_non_finite_report_score_falls_back(field):
    questions = get_static_questions()
    answers = make_answers(questions)
    response = json.dumps({**REPORT, field: float("inf")})
    assert "Infinity" in response
    evaluator = FallbackEvaluator(LLMEvaluator(llm=FakeLLM([response])))

    report = evaluator.generate_report("Jane Doe", answers, questions)

    assert report["overall_score"] == calculate_sub_scores(answers, questions)["overall_score"]
    assert report["strengths"] == ["Completed all questions"]


def test_non_finite_score_raises_evaluator_error():
    evaluator = LLMEvaluator(llm=FakeLLM(['{"score": NaN, "feedback": "x"}']))
    with pytest.raises(EvaluatorError):
        evaluator.evaluate_answer(get_static_questions(1)[0], "answer", 5)


def test_nan_report_completes_interview(store, full_resume):
    from graph import InterviewRunner, Step

    questions_json = json.dumps(GENERATED)
    scores = ['{"score": 70, "feedback": "ok"}'] * 6
    report = json.dumps({**REPORT, "overallScore": float("nan")})
    evaluator = FallbackEvaluator(LLMEvaluator(llm=FakeLLM([questions_json] + scores + [report])))
    runner = InterviewRunner(store, evaluator)
    runner.upload_resume(full_resume, "resume.docx")
    runner.start_interview()

    for i in range(6):
        runner.submit_message(f"Answer {i + 1}.")

    assert runner.step == Step.COMPLETED
    assert runner.candidate["scoring_details"]["strengths"] == ["Completed all questions"]


def test_fallback_passes_successful_results_through():
    evaluator = FallbackEvaluator(LLMEvaluator(llm=FakeLLM(['{"score": 88, "feedback": "Nice"}'])))
    assert evaluator.evaluate_answer(get_static_questions(1)[0], "answer", 3)["score"] == 88
    assert evaluator.name == "ai"
    assert evaluator.generates_questions is True


def test_fallback_does_not_cover_question_generation():
    evaluator = FallbackEvaluator(LLMEvaluator(llm=FakeLLM(["garbage"])))
    with pytest.raises(QuestionGenerationError):
        evaluator.generate_questions("Python")


# =============================================================================
# Heuristic and factory
# =============================================================================

def test_heuristic_questions_ignore_topic():
    evaluator = HeuristicEvaluator()
    assert evaluator.generate_questions("Rust") == evaluator.generate_questions("React")
    assert [q["difficulty"] for q in evaluator.generate_questions("x")] == [
        "Easy", "Easy", "Medium", "Medium", "Hard", "Hard",
    ]


def test_static_questions_are_copies():
    questions = get_static_questions()
    questions[0]["question"] = "changed"
    assert get_static_questions()[0]["question"] != "changed"


def test_create_evaluator():
    assert isinstance(create_evaluator("heuristic"), HeuristicEvaluator)
    assert isinstance(create_evaluator("HEURISTIC"), HeuristicEvaluator)
    with pytest.raises(ValueError):
        create_evaluator("magic")
