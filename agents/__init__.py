"""
Evaluator strategies for the Interview Assistant.
"""
from .evaluator import Evaluator, FallbackEvaluator, create_evaluator
from .heuristic import HeuristicEvaluator
from .llm_evaluator import LLMEvaluator

__all__ = [
    "Evaluator",
    "FallbackEvaluator",
    "HeuristicEvaluator",
    "LLMEvaluator",
    "create_evaluator",
]
