"""
Answer evaluation prompt - scores one answer against its expected key points.
"""
from typing import List

EVALUATOR_SYSTEM_PROMPT = """You are an experienced technical interviewer evaluating candidate answers.
You are fair but rigorous: reward correct, specific answers and do not give credit for vague ones.
You always respond with the exact JSON structure requested and nothing else."""


def get_answer_evaluation_prompt(
    question: str,
    answer: str,
    expected_points: List[str],
    time_used: int,
    time_limit: int,
) -> str:
    """Build the prompt asking for a 0-100 score, feedback, strengths and improvements."""
    points_text = "\n".join(f"{i}. {point}" for i, point in enumerate(expected_points, 1))
    if not points_text:
        points_text = "(none provided - judge on technical correctness)"

    return f"""Evaluate this technical interview answer:

Question: {question}

Expected Key Points:
{points_text}

Candidate's Answer: {answer}

Time Used: {time_used} seconds out of {time_limit} seconds allowed

Evaluate based on:
1. Technical accuracy and correctness
2. Completeness (covered expected points)
3. Clarity and communication
4. Depth of understanding
5. Time management

Provide:
- Score out of 100
- Detailed feedback (2-3 sentences)
- 2-3 specific strengths
- 2-3 areas for improvement

Format as JSON:
{{
  "score": number (0-100),
  "feedback": "detailed feedback text",
  "strengths": ["strength1", "strength2"],
  "improvements": ["improvement1", "improvement2"]
}}

Only return the JSON object, no additional text."""
