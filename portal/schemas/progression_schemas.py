"""
Level and set progression schemas (topic level listing and per-level set unlocking).
"""

from pydantic import BaseModel
from typing import Optional

from portal.models.models import LevelState


class LevelSummary(BaseModel):
    level: int
    set_count: int
    locked: bool
    state: Optional[LevelState] = None  # None for non-learners
    completed_sets: int = 0
    having_additional: bool = False  # completed earlier, sets were added since


class LevelsByTopicResponse(BaseModel):
    topic_id: int
    levels: list[LevelSummary]


class SetsByLevelResponse(BaseModel):
    topic_id: int
    level: int
    total_sets: int
    all_sets: list[int]
    accessible_sets: list[int]
    completed_sets: list[int]
