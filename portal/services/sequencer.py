"""
Ordering of practice sets inside a topic level.

Sets sharing a (topic, level) are ordered by display_order, ties broken by set
id. Both unlocking and completion checks rely on this order; renumbering
display_order is done elsewhere, this module only compares.
"""

from typing import Protocol, TypeVar

from sqlalchemy.orm import Session

from portal.models.models import PracticeSet

VALID_LEVELS = (1, 2)


class Sequenced(Protocol):
    id: int
    display_order: int


S = TypeVar("S", bound=Sequenced)


def sequence_key(practice_set: Sequenced) -> tuple[int, int]:
    return (int(practice_set.display_order), int(practice_set.id))


def sort_sets(sets: list[S]) -> list[S]:
    return sorted(sets, key=sequence_key)


def ordered_sets(db: Session, topic_id: int, level: int) -> list[PracticeSet]:
    """All sets of a topic level in sequence order."""
    sets = (
        db.query(PracticeSet)
        .filter(PracticeSet.topic_id == topic_id, PracticeSet.level == level)
        .all()
    )
    return sort_sets(sets)


def ordered_set_ids(db: Session, topic_id: int, level: int) -> list[int]:
    return [s.id for s in ordered_sets(db, topic_id, level)]
