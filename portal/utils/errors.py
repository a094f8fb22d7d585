"""
Engine error taxonomy. Each error carries the HTTP status it maps to; the
handlers in portal.api turn them into {"detail": ...} responses.
"""

from fastapi import status


class EngineError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(EngineError):
    """Caller-fixable input problem. Raised before any store mutation."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(EngineError):
    status_code = status.HTTP_404_NOT_FOUND


class GatingError(EngineError):
    """Learner tried to reach a set or level that is not unlocked yet."""
    status_code = status.HTTP_403_FORBIDDEN


class PersistenceError(EngineError):
    """The write transaction failed and was rolled back. Safe to resubmit."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, detail: str = "Could not save the attempt, please try again"):
        super().__init__(detail)
