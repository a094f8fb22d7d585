from pydantic import BaseModel
from typing import Optional

from portal.models.models import Role


class Principal(BaseModel):
    """Authenticated caller as resolved from the access token."""
    user_id: int
    role: Role
    email: Optional[str] = None

    @property
    def is_learner(self) -> bool:
        return self.role == Role.STUDENT
