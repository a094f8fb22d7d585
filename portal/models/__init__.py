"""
Portal data models. Single import surface for DB entities.

DB entities (portal.models.models):
- User, Student, Topic, Question
- PracticeSet, PracticeSetQuestion, PracticeAttempt, LevelCompletion
- Test, TestQuestion, TestAttempt

Enums: Role, QuestionType, LevelState
"""

from portal.models.models import (
    Role,
    QuestionType,
    LevelState,
    User,
    Student,
    Topic,
    Question,
    PracticeSet,
    PracticeSetQuestion,
    Test,
    TestQuestion,
    PracticeAttempt,
    TestAttempt,
    LevelCompletion,
)

__all__ = [
    "Role",
    "QuestionType",
    "LevelState",
    "User",
    "Student",
    "Topic",
    "Question",
    "PracticeSet",
    "PracticeSetQuestion",
    "Test",
    "TestQuestion",
    "PracticeAttempt",
    "TestAttempt",
    "LevelCompletion",
]
