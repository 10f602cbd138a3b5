from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, Request
from jose import jwt
from jose.exceptions import JWTError
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from utils.errors import ServiceError
from utils.permissions import merge_roles

load_dotenv()

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "__session"
SESSION_EXPIRES_IN = timedelta(days=5)
ALGORITHM = "HS256"


@dataclass
class SessionUser:
    """The resolved caller: all the domain services ever see of a session."""
    uid: str
    email: Optional[str]
    roles: List[str] = field(default_factory=list)
    claims: Dict[str, Any] = field(default_factory=dict)

    @property
    def identifier(self) -> str:
        return self.email or "Unknown"


def get_session_secret() -> str:
    secret = os.getenv("SESSION_SECRET")
    if not secret:
        logger.error("SESSION_SECRET is not set.")
        raise ServiceError("SERVER_MISCONFIGURED", "Authentication is not configured correctly.")
    return secret


def session_cookie_secure() -> bool:
    return os.getenv("SESSION_COOKIE_SECURE", "false").lower() in ("1", "true", "yes")


def create_session_token(uid: str, email: Optional[str], roles: List[str], expires_in: timedelta = SESSION_EXPIRES_IN) -> str:
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": uid,
        "email": email,
        "roles": list(roles),
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_in).timestamp()),
    }
    return jwt.encode(payload, get_session_secret(), algorithm=ALGORITHM)


def verify_session_token(token: str) -> Optional[Dict[str, Any]]:
    """Decoded claims, or None when the token is malformed, tampered with or expired."""
    try:
        return jwt.decode(token, get_session_secret(), algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"Failed to verify session token: {e}")
        return None


def _extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token

    # Non-browser clients may send the same token as a bearer credential
    auth_header = request.headers.get("Authorization")
    if auth_header:
        parts = auth_header.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return None


def resolve_session_user(db: Session, token: Optional[str]) -> Optional[SessionUser]:
    if not token:
        return None

    claims = verify_session_token(token)
    if not claims or not claims.get("sub"):
        return None

    user_row = db.get(User, claims["sub"])
    if user_row is not None and not user_row.is_active:
        logger.info(f"Rejected session for disabled user {claims['sub']}")
        return None

    roles = merge_roles(claims.get("roles"), user_row.roles if user_row is not None else None)
    email = claims.get("email") or (user_row.email if user_row is not None else None)
    return SessionUser(uid=claims["sub"], email=email, roles=roles, claims=claims)


def get_session_user(request: Request, db: Session = Depends(get_db)) -> Optional[SessionUser]:
    """
    FastAPI dependency resolving the caller from the `__session` cookie (or a
    bearer header). Returns None when there is no valid session; the
    permission gate decides what that means for the requested action.
    """
    return resolve_session_user(db, _extract_token(request))
