"""
Question generation prompt - builds a technical question set from resume topics.
"""


def get_question_generation_prompt(topic: str, count: int = 6) -> str:
    """
    Build the prompt asking for `count` questions about `topic`.

    Difficulty is split evenly across Easy, Medium and Hard, in that order,
    so positional time limits line up with difficulty.
    """
    per_level = max(1, count // 3)

    return f"""Generate {count} technical interview questions about {topic}.

Requirements:
- {per_level} Easy questions first, then {per_level} Medium questions, then {per_level} Hard questions
- Questions should be specific and answerable in a short paragraph
- Easy questions must be answerable within 30 seconds, Hard ones within 2 minutes
- Mix conceptual and practical questions
- Keep every question within {topic}

For each question, provide:
1. The question text
2. Difficulty level (Easy/Medium/Hard)
3. Specific category (e.g., "React Hooks", "Node.js Performance", "System Design")
4. Expected key points in the answer (3-5 points)

Format your response as a JSON array with this structure:
[
  {{
    "question": "question text",
    "difficulty": "Easy|Medium|Hard",
    "category": "specific category",
    "expectedPoints": ["point1", "point2", "point3"]
  }}
]

Only return the JSON array, no additional text."""
