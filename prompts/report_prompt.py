"""
Final report prompt - summarizes a completed interview into a hiring recommendation.
"""
from typing import List

from state import InterviewAnswer


def _format_answers(answers: List[InterviewAnswer]) -> str:
    blocks = []
    for i, a in enumerate(answers, 1):
        blocks.append(
            f"Question {i}: {a['question']}\n"
            f"Answer: {a['answer']}\n"
            f"Score: {a['score']}/100\n"
            f"Feedback: {a['feedback']}"
        )
    return "\n---\n".join(blocks)


def get_final_report_prompt(candidate_name: str, answers: List[InterviewAnswer]) -> str:
    return f"""Generate a comprehensive interview evaluation report for {candidate_name}.

Interview Performance:
{_format_answers(answers)}

Provide:
1. Overall score (0-100)
2. Technical knowledge score (0-100)
3. Communication clarity score (0-100)
4. Problem-solving ability score (0-100)
5. Top 3-4 strengths
6. Top 3-4 areas for improvement
7. Hiring recommendation: "Strong Hire" | "Hire" | "No Hire" | "Strong No Hire"

Format as JSON:
{{
  "overallScore": number,
  "technicalScore": number,
  "communicationScore": number,
  "problemSolvingScore": number,
  "strengths": ["strength1", "strength2", "strength3"],
  "improvements": ["improvement1", "improvement2", "improvement3"],
  "recommendation": "Strong Hire|Hire|No Hire|Strong No Hire"
}}

Only return the JSON object, no additional text."""
