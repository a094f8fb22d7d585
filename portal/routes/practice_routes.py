"""
Practice endpoints: topic levels, sets per level, set questions, submission and history.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.config import get_db
from portal.schemas.practice_schemas import (
    PracticeHistoryResponse,
    SetQuestionsResponse,
    SubmitAttemptRequest,
    SubmitAttemptResponse,
)
from portal.schemas.progression_schemas import LevelsByTopicResponse, LevelSummary, SetsByLevelResponse
from portal.schemas.user_schemas import Principal
from portal.services.lookups import get_topic
from portal.services.practice_service import PracticeService
from portal.services.progression import ProgressionTracker
from portal.utils.auth import get_current_user

practice_routes = APIRouter()


@practice_routes.get("/topics/{topic_id}/levels", response_model=LevelsByTopicResponse)
async def get_levels_by_topic(
    topic_id: int,
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> LevelsByTopicResponse:
    """Level 1 and 2 of a topic with set counts and, for learners, lock state."""
    get_topic(db, topic_id)
    levels = ProgressionTracker(db).levels_overview(current_user, topic_id)
    return LevelsByTopicResponse(
        topic_id=topic_id,
        levels=[
            LevelSummary(
                level=lv.level,
                set_count=lv.set_count,
                locked=lv.locked,
                state=lv.state,
                completed_sets=lv.completed_sets,
                having_additional=lv.having_additional,
            )
            for lv in levels
        ],
    )


@practice_routes.get("/topics/{topic_id}/levels/{level}/sets", response_model=SetsByLevelResponse)
async def get_sets_by_level(
    topic_id: int,
    level: int,
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> SetsByLevelResponse:
    get_topic(db, topic_id)
    sets = ProgressionTracker(db).sets_by_level(current_user, topic_id, level)
    return SetsByLevelResponse(
        topic_id=sets.topic_id,
        level=sets.level,
        total_sets=len(sets.all_sets),
        all_sets=sets.all_sets,
        accessible_sets=sets.accessible_sets,
        completed_sets=sets.completed_sets,
    )


@practice_routes.get("/sets/{set_id}/questions", response_model=SetQuestionsResponse)
async def get_set_questions(
    set_id: int,
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> SetQuestionsResponse:
    """Questions of an unlocked set, without answers."""
    return PracticeService(db).get_set_questions(current_user, set_id)


@practice_routes.post("/sets/{set_id}/submit", response_model=SubmitAttemptResponse)
async def submit_practice_attempt(
    set_id: int,
    req: SubmitAttemptRequest,
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> SubmitAttemptResponse:
    """Evaluate a submission. Passing learner attempts are recorded and credited."""
    return PracticeService(db).submit_attempt(current_user, set_id, req)


@practice_routes.get("/sets/{set_id}/history", response_model=PracticeHistoryResponse)
async def get_practice_history(
    set_id: int,
    current_user: Principal = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> PracticeHistoryResponse:
    return PracticeService(db).get_history(current_user, set_id)
