"""
Sequential progression through topic levels.

Per (learner, topic, level) the state moves one way only:
LOCKED (level 2 while level 1 is not completed) -> IN_PROGRESS -> COMPLETED.
COMPLETED is backed by a LevelCompletion row, which is never removed, even
when sets are added to the level later.

Inside a level a learner may open every set they have passed plus the first
set (in sequence order) they have not passed yet. Staff roles see everything.
"""

from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from portal.models.models import LevelCompletion, LevelState, PracticeAttempt, PracticeSet
from portal.schemas.user_schemas import Principal
from portal.services.sequencer import VALID_LEVELS, ordered_set_ids
from portal.utils.common import utc_now
from portal.utils.errors import GatingError, NotFoundError, ValidationError
from portal.utils.logger import configure_logging

logger = configure_logging()


@dataclass
class LevelProgress:
    level: int
    set_count: int
    locked: bool
    state: Optional[LevelState] = None
    completed_sets: int = 0
    having_additional: bool = False


@dataclass
class LevelSets:
    topic_id: int
    level: int
    all_sets: list[int] = field(default_factory=list)
    accessible_sets: list[int] = field(default_factory=list)
    completed_sets: list[int] = field(default_factory=list)


def compute_accessible(ordered_ids: list[int], completed: set[int]) -> list[int]:
    """Completed sets plus the earliest incomplete one, kept in sequence order."""
    next_open = next((sid for sid in ordered_ids if sid not in completed), None)
    return [sid for sid in ordered_ids if sid in completed or sid == next_open]


def validate_level(level: int) -> int:
    if level not in VALID_LEVELS:
        raise ValidationError("Level must be 1 or 2")
    return level


class ProgressionTracker:
    def __init__(self, db: Session):
        self.db = db

    # ----- reads -----

    def completed_set_ids(self, learner_id: int, topic_id: int, level: int) -> set[int]:
        rows = (
            self.db.query(PracticeAttempt.set_id)
            .join(PracticeSet, PracticeSet.id == PracticeAttempt.set_id)
            .filter(
                PracticeAttempt.student_id == learner_id,
                PracticeSet.topic_id == topic_id,
                PracticeSet.level == level,
            )
            .distinct()
            .all()
        )
        return {int(r[0]) for r in rows}

    def has_completion(self, learner_id: int, topic_id: int, level: int) -> bool:
        return self._completion(learner_id, topic_id, level) is not None

    def level_state(self, learner_id: int, topic_id: int, level: int) -> LevelState:
        if self.has_completion(learner_id, topic_id, level):
            return LevelState.COMPLETED
        if level == 2 and not self.has_completion(learner_id, topic_id, 1):
            return LevelState.LOCKED
        return LevelState.IN_PROGRESS

    def accessible_set_ids(self, learner_id: int, topic_id: int, level: int) -> list[int]:
        ordered = ordered_set_ids(self.db, topic_id, level)
        return compute_accessible(ordered, self.completed_set_ids(learner_id, topic_id, level))

    def set_counts(self, topic_id: int) -> dict[int, int]:
        rows = (
            self.db.query(PracticeSet.level, func.count(PracticeSet.id))
            .filter(PracticeSet.topic_id == topic_id)
            .group_by(PracticeSet.level)
            .all()
        )
        return {int(level): int(count) for level, count in rows}

    # ----- completion detection -----

    def mark_level_if_complete(self, learner_id: int, topic_id: int, level: int) -> bool:
        """
        Record a LevelCompletion when every set currently in the level has a passing
        attempt. Runs inside the caller's transaction; repeated calls only refresh
        updated_at.
        """
        total = self.set_counts(topic_id).get(level, 0)
        passed = len(self.completed_set_ids(learner_id, topic_id, level))
        if total == 0 or passed != total:
            return False

        now = utc_now()
        completion = self._completion(learner_id, topic_id, level)
        if completion is None:
            self.db.add(
                LevelCompletion(
                    student_id=learner_id,
                    topic_id=topic_id,
                    level=level,
                    completed_at=now,
                    updated_at=now,
                )
            )
            logger.info("level completed learner=%s topic=%s level=%s", learner_id, topic_id, level)
        else:
            completion.updated_at = now
        self.db.flush()
        return True

    # ----- gating -----

    def can_access(self, principal: Principal, practice_set: PracticeSet) -> bool:
        if not principal.is_learner:
            return True
        topic_id, level = practice_set.topic_id, practice_set.level
        if self.level_state(principal.user_id, topic_id, level) == LevelState.LOCKED:
            return False
        return practice_set.id in self.accessible_set_ids(principal.user_id, topic_id, level)

    def ensure_can_access(self, principal: Principal, practice_set: PracticeSet) -> None:
        if self.can_access(principal, practice_set):
            return
        if self.level_state(principal.user_id, practice_set.topic_id, practice_set.level) == LevelState.LOCKED:
            raise GatingError("You must complete Level 1 before accessing Level 2")
        raise GatingError("You are not allowed to access this set yet. Complete previous sets first.")

    def levels_overview(self, principal: Principal, topic_id: int) -> list[LevelProgress]:
        counts = self.set_counts(topic_id)
        if not principal.is_learner:
            return [LevelProgress(level=lvl, set_count=counts.get(lvl, 0), locked=False) for lvl in VALID_LEVELS]

        out: list[LevelProgress] = []
        for lvl in VALID_LEVELS:
            state = self.level_state(principal.user_id, topic_id, lvl)
            completed = 0
            if state != LevelState.LOCKED:
                completed = len(self.completed_set_ids(principal.user_id, topic_id, lvl))
            out.append(
                LevelProgress(
                    level=lvl,
                    set_count=counts.get(lvl, 0),
                    locked=state == LevelState.LOCKED,
                    state=state,
                    completed_sets=completed,
                    having_additional=state == LevelState.COMPLETED and completed < counts.get(lvl, 0),
                )
            )
        return out

    def sets_by_level(self, principal: Principal, topic_id: int, level: int) -> LevelSets:
        validate_level(level)
        ordered = ordered_set_ids(self.db, topic_id, level)
        if not ordered:
            raise NotFoundError(f"No practice sets found for topic {topic_id}, level {level}")

        if not principal.is_learner:
            return LevelSets(topic_id=topic_id, level=level, all_sets=ordered, accessible_sets=list(ordered))

        if self.level_state(principal.user_id, topic_id, level) == LevelState.LOCKED:
            raise GatingError("You must complete Level 1 before accessing Level 2")

        completed = self.completed_set_ids(principal.user_id, topic_id, level)
        return LevelSets(
            topic_id=topic_id,
            level=level,
            all_sets=ordered,
            accessible_sets=compute_accessible(ordered, completed),
            completed_sets=[sid for sid in ordered if sid in completed],
        )

    def _completion(self, learner_id: int, topic_id: int, level: int) -> Optional[LevelCompletion]:
        return (
            self.db.query(LevelCompletion)
            .filter(
                LevelCompletion.student_id == learner_id,
                LevelCompletion.topic_id == topic_id,
                LevelCompletion.level == level,
            )
            .first()
        )
