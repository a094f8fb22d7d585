"""
Portal schemas package. Import from submodules or from this package.

Example:
    from portal.schemas import SubmitAttemptRequest, SetsByLevelResponse
    from portal.schemas.practice_schemas import EvaluationResponse
"""

from portal.schemas.auth_schemas import AuthTokenPayload
from portal.schemas.user_schemas import Principal
from portal.schemas.practice_schemas import (
    QuestionResponse,
    SetQuestionsResponse,
    SubmittedAnswer,
    SubmitAttemptRequest,
    QuestionResultResponse,
    EvaluationResponse,
    SubmitAttemptResponse,
    AttemptHistoryItem,
    PracticeHistoryResponse,
)
from portal.schemas.progression_schemas import (
    LevelSummary,
    LevelsByTopicResponse,
    SetsByLevelResponse,
)
from portal.schemas.test_schemas import (
    GlobalLeaderboardEntry,
    GlobalLeaderboardResponse,
    LeaderboardEntry,
    TestLeaderboardResponse,
    TestQuestionsResponse,
)

__all__ = [
    # auth
    "AuthTokenPayload",
    "Principal",
    # practice
    "QuestionResponse",
    "SetQuestionsResponse",
    "SubmittedAnswer",
    "SubmitAttemptRequest",
    "QuestionResultResponse",
    "EvaluationResponse",
    "SubmitAttemptResponse",
    "AttemptHistoryItem",
    "PracticeHistoryResponse",
    # progression
    "LevelSummary",
    "LevelsByTopicResponse",
    "SetsByLevelResponse",
    # tests
    "TestQuestionsResponse",
    "LeaderboardEntry",
    "TestLeaderboardResponse",
    "GlobalLeaderboardEntry",
    "GlobalLeaderboardResponse",
]
