"""
Heuristic Evaluator - static question bank and local scoring.
"""
from typing import List

from agents.evaluator import Evaluator
from question_bank import expected_terms, get_static_questions
from scoring import calculate_score, score_answer
from state import (
    AnswerEvaluation,
    InterviewAnswer,
    InterviewQuestion,
    ScoringDetails,
)


class HeuristicEvaluator(Evaluator):
    name = "heuristic"
    generates_questions = False

    def generate_questions(self, topic: str, count: int = 6) -> List[InterviewQuestion]:
        # The static bank is the same for every topic
        return get_static_questions(count)

    def evaluate_answer(
        self,
        question: InterviewQuestion,
        answer: str,
        time_used: int,
    ) -> AnswerEvaluation:
        return score_answer(answer, expected_terms(question))

    def generate_report(
        self,
        candidate_name: str,
        answers: List[InterviewAnswer],
        questions: List[InterviewQuestion],
    ) -> ScoringDetails:
        return calculate_score(answers, questions)
