"""
Shared fixtures for the Interview Assistant tests.

The hosted model is replaced by FakeLLM, which returns canned responses in
order, so every test runs offline and deterministically.
"""
import io
import sys
from pathlib import Path
from typing import List, Union

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from docx import Document

from agents.heuristic import HeuristicEvaluator
from graph import InterviewRunner
from storage import LocalStorage
from store import CandidateStore


class FakeResponse:
    def __init__(self, content: str, usage=None):
        self.content = content
        self.response_metadata = {"usage": usage or {"input_tokens": 10, "output_tokens": 5}}


class FakeLLM:
    """Stands in for ChatAnthropic: returns queued responses, or raises queued exceptions."""

    def __init__(self, responses: List[Union[str, Exception]] = None):
        self.responses = list(responses or [])
        self.calls = []

    def invoke(self, messages):
        self.calls.append(messages)
        if not self.responses:
            raise RuntimeError("FakeLLM has no responses left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return FakeResponse(response)


def make_docx(*lines: str) -> bytes:
    """Build a .docx file with one paragraph per line."""
    doc = Document()
    for line in lines:
        doc.add_paragraph(line)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


FULL_RESUME_LINES = (
    "Jane Doe",
    "jane.doe@example.com",
    "(555) 123-4567",
    "Experience",
    "Senior engineer building React and TypeScript applications on AWS.",
)


@pytest.fixture
def full_resume() -> bytes:
    return make_docx(*FULL_RESUME_LINES)


@pytest.fixture
def blank_resume() -> bytes:
    return make_docx("curriculum vitae", "looking for a role in software")


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage.json")


@pytest.fixture
def store(storage) -> CandidateStore:
    return CandidateStore(storage)


@pytest.fixture
def runner(store) -> InterviewRunner:
    return InterviewRunner(store, HeuristicEvaluator())


@pytest.fixture
def interview(runner, full_resume) -> InterviewRunner:
    """A runner whose candidate has just started the static interview."""
    runner.upload_resume(full_resume, "resume.docx")
    runner.start_interview()
    return runner
