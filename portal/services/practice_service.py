"""
Practice set service: question listing, submission and history for one set.

Submission flow: gate -> evaluate -> (learner and passed) record in one
transaction -> response. Everyone else gets the evaluation back unsaved.
"""

from dataclasses import asdict

from sqlalchemy.orm import Session

from portal.config import settings
from portal.models.models import PracticeAttempt, Question, QuestionType
from portal.schemas.practice_schemas import (
    AttemptHistoryItem,
    EvaluationResponse,
    PracticeHistoryResponse,
    QuestionResponse,
    SetQuestionsResponse,
    SubmitAttemptRequest,
    SubmitAttemptResponse,
)
from portal.schemas.user_schemas import Principal
from portal.services.attempt_recorder import AttemptRecorder, RecordOutcome
from portal.services.evaluator import Evaluation, evaluate_answers
from portal.services.lookups import get_practice_set
from portal.services.progression import ProgressionTracker
from portal.utils.common import atomic, iso_format, round_marks
from portal.utils.errors import GatingError, ValidationError
from portal.utils.logger import configure_logging, log_duration

logger = configure_logging()

CHOICE_TYPES = (QuestionType.MCQ.value, QuestionType.MSQ.value)


def to_question_response(q: Question) -> QuestionResponse:
    """Question as shown to the learner: no answer, options only for choice types."""
    out = QuestionResponse(
        question_id=q.id,
        question_type=q.question_type,
        question_text=q.question_text,
        marks=q.marks,
        image_url=q.image_url,
    )
    if (q.question_type or "").upper() in CHOICE_TYPES:
        out.option_a = q.option_a
        out.option_b = q.option_b
        out.option_c = q.option_c
        out.option_d = q.option_d
    return out


def to_evaluation_response(evaluation: Evaluation) -> EvaluationResponse:
    return EvaluationResponse(**asdict(evaluation))


def saved_response(evaluation: Evaluation, outcome: RecordOutcome, message: str) -> SubmitAttemptResponse:
    return SubmitAttemptResponse(
        evaluation=to_evaluation_response(evaluation),
        saved=True,
        message=message,
        score_increment=outcome.score_increment,
        previous_best_score=outcome.previous_best,
        current_score=outcome.current_score,
        is_first_attempt=outcome.is_first_attempt,
        level_completed=outcome.level_completed,
    )


def threshold_for(threshold_percentage) -> float:
    if threshold_percentage is None:
        return settings.default_threshold_percentage
    return float(threshold_percentage)


def require_answers(req: SubmitAttemptRequest) -> dict[int, str]:
    if not req.user_answers:
        raise ValidationError("user_answers array is required and must not be empty")
    return req.answer_map()


class PracticeService:
    def __init__(self, db: Session):
        self.db = db
        self.progression = ProgressionTracker(db)

    def get_set_questions(self, principal: Principal, set_id: int) -> SetQuestionsResponse:
        practice_set = get_practice_set(self.db, set_id)
        self.progression.ensure_can_access(principal, practice_set)
        questions = [to_question_response(q) for q in practice_set.questions]
        return SetQuestionsResponse(
            set_id=practice_set.id,
            negative_marking=bool(practice_set.negative_marking),
            total_questions=len(questions),
            questions=questions,
        )

    def submit_attempt(self, principal: Principal, set_id: int, req: SubmitAttemptRequest) -> SubmitAttemptResponse:
        answers = require_answers(req)
        practice_set = get_practice_set(self.db, set_id)
        self.progression.ensure_can_access(principal, practice_set)

        questions = practice_set.questions
        if not questions:
            raise ValidationError("No questions found for this practice set")

        evaluation = evaluate_answers(
            questions,
            answers,
            negative_marking=bool(practice_set.negative_marking),
            threshold_percentage=threshold_for(practice_set.threshold_percentage),
        )

        if not (principal.is_learner and evaluation.passed):
            message = (
                "Evaluation complete (not saved, only passing student attempts are recorded)"
                if evaluation.passed
                else "Evaluation complete (failed, not saved)"
            )
            return SubmitAttemptResponse(evaluation=to_evaluation_response(evaluation), saved=False, message=message)

        with log_duration(logger, f"record practice attempt learner={principal.user_id} set={set_id}"):
            with atomic(self.db):
                outcome = AttemptRecorder(self.db).record_passing_attempt(principal.user_id, practice_set, evaluation)
        return saved_response(evaluation, outcome, "Practice attempt saved and score updated successfully")

    def get_history(self, principal: Principal, set_id: int) -> PracticeHistoryResponse:
        if not principal.is_learner:
            raise GatingError("Only students can view practice history")
        practice_set = get_practice_set(self.db, set_id)
        self.progression.ensure_can_access(principal, practice_set)

        attempts = (
            self.db.query(PracticeAttempt)
            .filter(PracticeAttempt.student_id == principal.user_id, PracticeAttempt.set_id == set_id)
            .order_by(PracticeAttempt.attempt_at.desc(), PracticeAttempt.id.desc())
            .all()
        )
        best = max((float(a.score) for a in attempts), default=0.0)
        return PracticeHistoryResponse(
            set_id=set_id,
            attempts=[
                AttemptHistoryItem(attempt_id=a.id, score=round_marks(a.score), attempt_at=iso_format(a.attempt_at))
                for a in attempts
            ],
            best_score=round_marks(best),
            total_attempts=len(attempts),
        )
