from typing import List, Optional

from schemas.base import CamelModel, NonEmptyStr


class LoginRequest(CamelModel):
    email: NonEmptyStr
    password: NonEmptyStr


class SessionInfo(CamelModel):
    uid: str
    email: Optional[str] = None
    roles: List[str] = []
