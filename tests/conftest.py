"""
Pytest configuration and shared fixtures for the test suite.
Points the app at an in-memory database and provides seeded rows for unit and integration tests.
"""
import os
import sys
import tempfile
from pathlib import Path

# Must be set before portal.config is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="portal-logs-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# ----- In-memory DB (shared by the test session and the API under test) -----
@pytest.fixture
def in_memory_engine():
    """In-memory SQLite engine; StaticPool keeps one connection so TestClient threads see the same data."""
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )


@pytest.fixture
def session_factory(in_memory_engine):
    from portal.config import Base
    import portal.models  # noqa: F401
    Base.metadata.create_all(in_memory_engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=in_memory_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


# ----- Row factories -----
@pytest.fixture
def make_user(db_session):
    from portal.models.models import Role, User

    counter = {"n": 0}

    def _make(role: Role = Role.STUDENT, email: str | None = None) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            full_name=f"User {counter['n']}",
            role=role.value,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def learner(make_user):
    return make_user()


@pytest.fixture
def staff(make_user):
    from portal.models.models import Role
    return make_user(Role.STAFF)


@pytest.fixture
def topic(db_session):
    from portal.models.models import Topic
    t = Topic(name="Linear Algebra")
    db_session.add(t)
    db_session.commit()
    db_session.refresh(t)
    return t


@pytest.fixture
def make_question(db_session):
    from portal.models.models import Question

    def _make(question_type: str, correct_answer: str, marks: int = 1, text: str = "Question?") -> Question:
        q = Question(
            question_type=question_type,
            question_text=text,
            option_a="A",
            option_b="B",
            option_c="C",
            option_d="D",
            correct_answer=correct_answer,
            marks=marks,
        )
        db_session.add(q)
        db_session.commit()
        db_session.refresh(q)
        return q

    return _make


@pytest.fixture
def make_set(db_session, make_question):
    """Create a practice set; by default it holds one 10-mark NAT question with answer "10"."""
    from portal.models.models import PracticeSet, PracticeSetQuestion

    def _make(topic_id: int, level: int = 1, display_order: int = 1, questions=None,
              threshold_percentage=50.0, negative_marking: bool = False) -> PracticeSet:
        if questions is None:
            questions = [make_question("NAT", "10", marks=10)]
        ps = PracticeSet(
            topic_id=topic_id,
            level=level,
            display_order=display_order,
            threshold_percentage=threshold_percentage,
            negative_marking=negative_marking,
        )
        db_session.add(ps)
        db_session.flush()
        for i, q in enumerate(questions):
            db_session.add(PracticeSetQuestion(set_id=ps.id, question_id=q.id, order_in_set=i))
        db_session.commit()
        db_session.refresh(ps)
        return ps

    return _make


@pytest.fixture
def make_test(db_session, make_question):
    from portal.models.models import Test, TestQuestion

    def _make(questions=None, threshold_percentage=50.0, negative_marking: bool = False,
              start_time=None, end_time=None) -> Test:
        if questions is None:
            questions = [make_question("NAT", "10", marks=10)]
        t = Test(
            test_name="Midterm",
            threshold_percentage=threshold_percentage,
            negative_marking=negative_marking,
            start_time=start_time,
            end_time=end_time,
        )
        db_session.add(t)
        db_session.flush()
        for i, q in enumerate(questions):
            db_session.add(TestQuestion(test_id=t.id, question_id=q.id, order_in_test=i))
        db_session.commit()
        db_session.refresh(t)
        return t

    return _make


@pytest.fixture
def principal_for():
    from portal.models.models import Role
    from portal.schemas.user_schemas import Principal

    def _make(user) -> Principal:
        return Principal(user_id=user.id, role=Role(user.role), email=user.email)

    return _make
