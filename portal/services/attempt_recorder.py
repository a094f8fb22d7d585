"""
Attempt persistence and best-score accounting.

The recorder never commits: it runs inside the caller's transaction (see
portal.utils.common.atomic) so the attempt row, the cumulative score update
and the level completion fact land together or not at all.

Concurrent submissions by the same learner are serialized by writing to the
learner's Student row before the previous best is read: the UPDATE takes the
row lock on server databases and the writer lock on SQLite. Credits are applied
as SQL expressions, never as a read-modify-write of a loaded attribute.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from portal.models.models import PracticeAttempt, PracticeSet, Student, Test, TestAttempt
from portal.services.evaluator import Evaluation
from portal.services.progression import ProgressionTracker
from portal.utils.common import round_marks, utc_now
from portal.utils.logger import configure_logging

logger = configure_logging()


@dataclass
class RecordOutcome:
    score_increment: float
    previous_best: float
    current_score: float
    is_first_attempt: bool
    level_completed: Optional[bool] = None
    recorded: bool = True


def score_increment(current: float, previous_best: float) -> float:
    """
    Positive improvement over the previous best. The best starts at 0, so a first
    attempt counts in full and a negative best (failed tests) is never credited.
    """
    return round_marks(max(0.0, current - max(previous_best, 0.0)))


class AttemptRecorder:
    def __init__(self, db: Session):
        self.db = db
        self.progression = ProgressionTracker(db)

    def record_passing_attempt(self, learner_id: int, practice_set: PracticeSet, evaluation: Evaluation) -> RecordOutcome:
        """Persist a passing practice attempt and credit any improvement to practice_score."""
        self._lock_student(learner_id)
        previous_best, prior_attempts = self._best_and_count(
            PracticeAttempt, PracticeAttempt.set_id == practice_set.id, learner_id
        )
        current = evaluation.scored_marks
        is_first = prior_attempts == 0
        increment = score_increment(current, previous_best)

        self.db.add(PracticeAttempt(student_id=learner_id, set_id=practice_set.id, score=current, attempt_at=utc_now()))
        if increment > 0:
            self._credit(learner_id, Student.practice_score, increment)
        self.db.flush()

        level_completed = self.progression.mark_level_if_complete(learner_id, practice_set.topic_id, practice_set.level)
        logger.info(
            "practice attempt recorded learner=%s set=%s score=%s previous_best=%s increment=%s",
            learner_id, practice_set.id, current, previous_best, increment,
        )
        return RecordOutcome(
            score_increment=increment,
            previous_best=previous_best,
            current_score=current,
            is_first_attempt=is_first,
            level_completed=level_completed,
        )

    def record_test_attempt(self, learner_id: int, test: Test, evaluation: Evaluation) -> RecordOutcome:
        """Persist a test attempt (pass or fail) and credit any improvement to test_score."""
        self._lock_student(learner_id)
        previous_best, prior_attempts = self._best_and_count(TestAttempt, TestAttempt.test_id == test.id, learner_id)
        current = evaluation.scored_marks
        is_first = prior_attempts == 0
        increment = score_increment(current, previous_best)

        self.db.add(
            TestAttempt(
                student_id=learner_id,
                test_id=test.id,
                score=current,
                passed=evaluation.passed,
                submitted_at=utc_now(),
            )
        )
        if increment > 0:
            self._credit(learner_id, Student.test_score, increment)
        self.db.flush()

        logger.info(
            "test attempt recorded learner=%s test=%s score=%s previous_best=%s increment=%s",
            learner_id, test.id, current, previous_best, increment,
        )
        return RecordOutcome(
            score_increment=increment,
            previous_best=previous_best,
            current_score=current,
            is_first_attempt=is_first,
        )

    def _lock_student(self, learner_id: int) -> None:
        touched = (
            self.db.query(Student)
            .filter(Student.student_id == learner_id)
            .update({Student.practice_score: Student.practice_score}, synchronize_session=False)
        )
        if not touched:
            self.db.add(Student(student_id=learner_id, practice_score=0.0, test_score=0.0))
            self.db.flush()

    def _credit(self, learner_id: int, column, increment: float) -> None:
        self.db.query(Student).filter(Student.student_id == learner_id).update(
            {column: column + increment}, synchronize_session="fetch"
        )

    def _best_and_count(self, model, container_filter, learner_id: int) -> tuple[float, int]:
        best, count = (
            self.db.query(func.max(model.score), func.count(model.id))
            .filter(model.student_id == learner_id, container_filter)
            .one()
        )
        return (round_marks(best) if best is not None else 0.0), int(count or 0)
