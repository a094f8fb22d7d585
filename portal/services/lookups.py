"""
Resolve ids from the request path to rows, raising NotFoundError for unknown ids.
"""

from sqlalchemy.orm import Session

from portal.models.models import PracticeSet, Test, Topic
from portal.utils.errors import NotFoundError


def get_topic(db: Session, topic_id: int) -> Topic:
    topic = db.query(Topic).filter(Topic.id == topic_id).first()
    if topic is None:
        raise NotFoundError("Topic not found")
    return topic


def get_practice_set(db: Session, set_id: int) -> PracticeSet:
    practice_set = db.query(PracticeSet).filter(PracticeSet.id == set_id).first()
    if practice_set is None:
        raise NotFoundError("Practice set not found")
    return practice_set


def get_test(db: Session, test_id: int) -> Test:
    test = db.query(Test).filter(Test.id == test_id).first()
    if test is None:
        raise NotFoundError("Test not found")
    return test
