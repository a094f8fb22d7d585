"""
Answer evaluation for practice sets and tests.

Pure scoring: takes the questions of one set plus the learner's answers and
returns per-question results, totals and the pass/fail verdict. No I/O, so it
is safe to call for previews and for submissions that will never be saved.

Marking rules:
- MCQ: case-insensitive match of the single letter. A wrong non-blank answer
  costs 1/3 (1-mark question) or 2/3 (2-mark question) when the set uses
  negative marking. Blank answers never cost anything.
- MSQ: the chosen letters must equal the correct letters exactly, in any
  order. No partial credit and never negative.
- NAT: both sides are parsed as floats and must be equal. Anything that does
  not parse scores zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Protocol

from portal.models.models import QuestionType
from portal.utils.common import round_marks
from portal.utils.errors import ValidationError

_MSQ_SEPARATORS = set(", ;|/")


class ScorableQuestion(Protocol):
    id: int
    question_type: str
    correct_answer: str
    marks: int


@dataclass
class QuestionResult:
    question_id: int
    question_type: str
    is_correct: bool
    gained_marks: float
    user_answer: Optional[str]
    correct_answer: str


@dataclass
class Evaluation:
    results: list[QuestionResult] = field(default_factory=list)
    total_marks: int = 0
    scored_marks: float = 0.0
    threshold_percentage: float = 50.0
    threshold_marks: float = 0.0
    passed: bool = False


def normalize_answer(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    return str(raw).strip().lower()


def _letters(answer: str) -> set[str]:
    return {ch for ch in answer if not ch.isspace() and ch not in _MSQ_SEPARATORS}


def _parse_number(answer: str) -> Optional[float]:
    try:
        value = float(answer)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def negative_mark(marks: int) -> float:
    return -1 / 3 if marks == 1 else -2 / 3


def score_question(
    question_type: str,
    correct_answer: str,
    marks: int,
    user_answer: str,
    negative_marking: bool = False,
) -> tuple[bool, float]:
    """Score one normalized answer. Returns (is_correct, gained_marks) with gained_marks unrounded."""
    qtype = (question_type or "").upper()
    correct = normalize_answer(correct_answer)

    if qtype == QuestionType.MCQ.value:
        if user_answer and user_answer == correct:
            return True, float(marks)
        if user_answer and negative_marking:
            return False, negative_mark(marks)
        return False, 0.0

    if qtype == QuestionType.MSQ.value:
        chosen = _letters(user_answer)
        if chosen and chosen == _letters(correct):
            return True, float(marks)
        return False, 0.0

    if qtype == QuestionType.NAT.value:
        expected = _parse_number(correct)
        given = _parse_number(user_answer)
        if expected is not None and given is not None and expected == given:
            return True, float(marks)
        return False, 0.0

    raise ValidationError(f"Unsupported question type: {question_type}")


def evaluate_answers(
    questions: Iterable[ScorableQuestion],
    user_answers: Mapping[int, Optional[str]],
    *,
    negative_marking: bool = False,
    threshold_percentage: Optional[float] = None,
) -> Evaluation:
    """
    Evaluate a submission against the full question list of a set.

    Answers for question ids that are not part of the set are ignored; questions
    without an answer are treated as blank. scored_marks may be negative.
    """
    question_list = list(questions)
    if not question_list:
        raise ValidationError("The set has no questions to evaluate")

    threshold = 50.0 if threshold_percentage is None else float(threshold_percentage)
    evaluation = Evaluation(threshold_percentage=threshold)
    raw_total = 0.0

    for q in question_list:
        marks = int(q.marks)
        answer = normalize_answer(user_answers.get(q.id))
        is_correct, gained = score_question(q.question_type, q.correct_answer, marks, answer, negative_marking)

        evaluation.total_marks += marks
        raw_total += gained
        evaluation.results.append(
            QuestionResult(
                question_id=q.id,
                question_type=(q.question_type or "").upper(),
                is_correct=is_correct,
                gained_marks=round_marks(gained),
                user_answer=answer or None,
                correct_answer=q.correct_answer,
            )
        )

    evaluation.scored_marks = round_marks(raw_total)
    evaluation.threshold_marks = round_marks(threshold * evaluation.total_marks / 100)
    evaluation.passed = evaluation.scored_marks >= evaluation.threshold_marks
    return evaluation
