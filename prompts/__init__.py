"""
Prompt templates for the hosted evaluator.
"""
from .question_prompt import get_question_generation_prompt
from .evaluation_prompt import get_answer_evaluation_prompt, EVALUATOR_SYSTEM_PROMPT
from .report_prompt import get_final_report_prompt

__all__ = [
    "get_question_generation_prompt",
    "get_answer_evaluation_prompt",
    "get_final_report_prompt",
    "EVALUATOR_SYSTEM_PROMPT",
]
