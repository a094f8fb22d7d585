"""
Unit test fixtures. Pure functions only; no DB or HTTP.
"""
from types import SimpleNamespace

import pytest


@pytest.fixture
def question():
    """Lightweight stand-in for a Question row."""
    def _make(qid: int, question_type: str, correct_answer: str, marks: int = 1):
        return SimpleNamespace(id=qid, question_type=question_type, correct_answer=correct_answer, marks=marks)
    return _make
