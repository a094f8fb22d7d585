from portal.config import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean, Float, UniqueConstraint
from sqlalchemy.orm import relationship
from portal.utils.common import utc_now
from enum import Enum


class Role(str, Enum):
    ADMIN = "Admin"
    DEPT_HEAD = "Dept Head"
    STAFF = "Staff"
    STUDENT = "Student"


class QuestionType(str, Enum):
    MCQ = "MCQ"  # single choice
    MSQ = "MSQ"  # multiple choice
    NAT = "NAT"  # numeric answer


class LevelState(str, Enum):
    LOCKED = "locked"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    role = Column(String, nullable=False, default=Role.STUDENT.value)  # Role value


class Student(Base):
    """Learner profile holding the running practice/test score totals."""
    __tablename__ = "students"
    student_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    practice_score = Column(Float, default=0.0, nullable=False)
    test_score = Column(Float, default=0.0, nullable=False)

    user = relationship("User", backref="student", uselist=False)


class Topic(Base):
    __tablename__ = "topics"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)


class Question(Base):
    __tablename__ = "questions"
    id = Column(Integer, primary_key=True, index=True)
    question_type = Column(String, nullable=False)  # QuestionType value
    question_text = Column(Text, nullable=False)
    option_a = Column(String, nullable=True)
    option_b = Column(String, nullable=True)
    option_c = Column(String, nullable=True)
    option_d = Column(String, nullable=True)
    correct_answer = Column(String, nullable=False)  # "b" | "acd" | "10.5"
    marks = Column(Integer, nullable=False, default=1)
    image_url = Column(String, nullable=True)


class PracticeSet(Base):
    __tablename__ = "practice_sets"
    id = Column(Integer, primary_key=True, index=True)
    topic_id = Column(Integer, ForeignKey("topics.id"), index=True, nullable=False)
    level = Column(Integer, nullable=False)  # 1 | 2
    display_order = Column(Integer, nullable=False)
    threshold_percentage = Column(Float, nullable=True)
    negative_marking = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    topic = relationship("Topic", backref="practice_sets")
    question_links = relationship(
        "PracticeSetQuestion",
        backref="practice_set",
        cascade="all, delete-orphan",
        order_by="PracticeSetQuestion.order_in_set",
    )

    @property
    def questions(self) -> list[Question]:
        return [link.question for link in self.question_links]


class PracticeSetQuestion(Base):
    __tablename__ = "practice_set_questions"
    set_id = Column(Integer, ForeignKey("practice_sets.id"), primary_key=True)
    question_id = Column(Integer, ForeignKey("questions.id"), primary_key=True)
    order_in_set = Column(Integer, nullable=False, default=0)

    question = relationship("Question")


class Test(Base):
    __tablename__ = "tests"
    id = Column(Integer, primary_key=True, index=True)
    test_name = Column(String, nullable=False)
    threshold_percentage = Column(Float, nullable=True)
    negative_marking = Column(Boolean, default=False, nullable=False)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    question_links = relationship(
        "TestQuestion",
        backref="test",
        cascade="all, delete-orphan",
        order_by="TestQuestion.order_in_test",
    )

    @property
    def questions(self) -> list[Question]:
        return [link.question for link in self.question_links]


class TestQuestion(Base):
    __tablename__ = "test_questions"
    test_id = Column(Integer, ForeignKey("tests.id"), primary_key=True)
    question_id = Column(Integer, ForeignKey("questions.id"), primary_key=True)
    order_in_test = Column(Integer, nullable=False, default=0)

    question = relationship("Question")


class PracticeAttempt(Base):
    # Only passing learner submissions are written here, so any row counts as a pass.
    __tablename__ = "practice_attempts"
    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    set_id = Column(Integer, ForeignKey("practice_sets.id"), index=True, nullable=False)
    score = Column(Float, nullable=False)
    attempt_at = Column(DateTime, default=utc_now, nullable=False)


class TestAttempt(Base):
    __tablename__ = "test_attempts"
    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    test_id = Column(Integer, ForeignKey("tests.id"), index=True, nullable=False)
    score = Column(Float, nullable=False)
    passed = Column(Boolean, default=False, nullable=False)
    submitted_at = Column(DateTime, default=utc_now, nullable=False)


class LevelCompletion(Base):
    __tablename__ = "level_completions"
    __table_args__ = (UniqueConstraint("student_id", "topic_id", "level", name="uq_level_completion"),)
    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    topic_id = Column(Integer, ForeignKey("topics.id"), index=True, nullable=False)
    level = Column(Integer, nullable=False)
    completed_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, nullable=False)
