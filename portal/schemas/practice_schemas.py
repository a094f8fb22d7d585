"""
Practice set schemas: question listing, submission, evaluation and history.
"""

from pydantic import BaseModel, Field
from typing import Optional, Union


class QuestionResponse(BaseModel):
    question_id: int
    question_type: str
    question_text: str
    marks: int
    image_url: Optional[str] = None
    # Only populated for MCQ/MSQ.
    option_a: Optional[str] = None
    option_b: Optional[str] = None
    option_c: Optional[str] = None
    option_d: Optional[str] = None


class SetQuestionsResponse(BaseModel):
    set_id: int
    negative_marking: bool
    total_questions: int
    questions: list[QuestionResponse]


class SubmittedAnswer(BaseModel):
    question_id: int
    # A letter ("b"), letters ("acd") or a numeric string; numbers are accepted as-is.
    user_answer: Optional[Union[str, int, float]] = None


class SubmitAttemptRequest(BaseModel):
    user_answers: list[SubmittedAnswer] = Field(default_factory=list)

    def answer_map(self) -> dict[int, str]:
        return {
            a.question_id: "" if a.user_answer is None else str(a.user_answer)
            for a in self.user_answers
        }


class QuestionResultResponse(BaseModel):
    question_id: int
    question_type: str
    is_correct: bool
    gained_marks: float
    user_answer: Optional[str] = None
    correct_answer: str


class EvaluationResponse(BaseModel):
    results: list[QuestionResultResponse]
    total_marks: int
    scored_marks: float
    threshold_percentage: float
    threshold_marks: float
    passed: bool


class SubmitAttemptResponse(BaseModel):
    evaluation: EvaluationResponse
    saved: bool
    message: str
    # Populated only when the attempt was recorded.
    score_increment: Optional[float] = None
    previous_best_score: Optional[float] = None
    current_score: Optional[float] = None
    is_first_attempt: Optional[bool] = None
    level_completed: Optional[bool] = None


class AttemptHistoryItem(BaseModel):
    attempt_id: int
    score: float
    attempt_at: str


class PracticeHistoryResponse(BaseModel):
    set_id: int
    attempts: list[AttemptHistoryItem]
    best_score: float
    total_attempts: int
