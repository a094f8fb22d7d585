from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class AuthTokenPayload(BaseModel):
    sub: str  # user id
    role: str
    exp: Optional[datetime] = None
