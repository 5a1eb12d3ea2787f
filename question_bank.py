"""
Question bank and time-limit utilities.
"""
import copy
from typing import List

from state import InterviewQuestion

# Time limits for generated questions, by position (Q1..Q6)
GENERATED_TIME_LIMITS = [30, 30, 60, 60, 120, 120]
DEFAULT_TIME_LIMIT = 60

STATIC_QUESTIONS: List[InterviewQuestion] = [
    InterviewQuestion(
        id="easy-1",
        question="What is the difference between let, const, and var in JavaScript?",
        difficulty="Easy",
        time_limit=20,
        category="JavaScript Fundamentals",
        expected_keywords=["scope", "hoisting", "reassignment", "block scope"],
    ),
    InterviewQuestion(
        id="easy-2",
        question="Explain what React props are and how they work.",
        difficulty="Easy",
        time_limit=20,
        category="React Basics",
        expected_keywords=["properties", "parent", "child", "immutable", "data flow"],
    ),
    InterviewQuestion(
        id="medium-1",
        question="How would you optimize the performance of a React application?",
        difficulty="Medium",
        time_limit=60,
        category="React Performance",
        expected_keywords=["memoization", "lazy loading", "code splitting", "virtual DOM"],
    ),
    InterviewQuestion(
        id="medium-2",
        question="Explain the concept of closures in JavaScript and provide an example.",
        difficulty="Medium",
        time_limit=60,
        category="JavaScript Advanced",
        expected_keywords=["lexical scope", "inner function", "outer function", "variable access"],
    ),
    InterviewQuestion(
        id="hard-1",
        question="Design a scalable system architecture for a real-time chat application with millions of users.",
        difficulty="Hard",
        time_limit=120,
        category="System Design",
        expected_keywords=["microservices", "load balancing", "websockets", "database sharding"],
    ),
    InterviewQuestion(
        id="hard-2",
        question="Implement a function to find the longest palindromic substring in a string with optimal time complexity.",
        difficulty="Hard",
        time_limit=120,
        category="Algorithms",
        expected_keywords=["dynamic programming", "expand around center", "time complexity", "space complexity"],
    ),
]


def get_static_questions(count: int = len(STATIC_QUESTIONS)) -> List[InterviewQuestion]:
    """A copy of the first `count` questions of the static bank."""
    return copy.deepcopy(STATIC_QUESTIONS[:count])


def time_limit_for_position(index: int) -> int:
    if 0 <= index < len(GENERATED_TIME_LIMITS):
        return GENERATED_TIME_LIMITS[index]
    return DEFAULT_TIME_LIMIT


def assign_time_limits(questions: List[InterviewQuestion]) -> List[InterviewQuestion]:
    """Set each generated question's time limit from its position."""
    return [
        {**question, "time_limit": time_limit_for_position(i)}
        for i, question in enumerate(questions)
    ]


def expected_terms(question: InterviewQuestion) -> List[str]:
    """Keywords used for heuristic matching: static keywords, else AI key points."""
    return list(question.get("expected_keywords") or question.get("expected_points") or [])
