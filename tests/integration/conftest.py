"""
Integration test fixtures. Overrides get_db for API tests with the shared in-memory DB.
"""
import pytest


@pytest.fixture
def override_get_db(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def api_client(override_get_db):
    """FastAPI TestClient with in-memory DB override."""
    from fastapi.testclient import TestClient
    from portal.api import app
    from portal.config import get_db
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer header for a user row."""
    from portal.utils.jwt import create_access_token

    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}

    return _headers


@pytest.fixture
def evaluation_for():
    """Evaluate answers for a set or test row the way the services do."""
    from portal.services.evaluator import evaluate_answers

    def _evaluate(container, answers: dict):
        return evaluate_answers(
            container.questions,
            answers,
            negative_marking=bool(container.negative_marking),
            threshold_percentage=container.threshold_percentage,
        )

    return _evaluate
