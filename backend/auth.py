import asyncio
import logging
import os
from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from crud import users as crud_users
from database import get_db
from models.users import User
from schemas.users import LoginRequest, SessionInfo
from utils.auth_utils import (
    SESSION_COOKIE_NAME,
    SESSION_EXPIRES_IN,
    SessionUser,
    create_session_token,
    get_session_secret,
    get_session_user,
    session_cookie_secure,
)
from utils.errors import ServiceError
from utils.permissions import merge_roles
from utils.responses import json_success

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("auth")

LOGIN_TIMEOUT_SECONDS = float(os.getenv("LOGIN_TIMEOUT_SECONDS", "10"))

db_dependency = Annotated[Session, Depends(get_db)]
session_dependency = Annotated[Optional[SessionUser], Depends(get_session_user)]


def _check_credentials(bind, email: str, password: str) -> str:
    # May outlive a timed-out request; never touches the request's session
    with Session(bind=bind) as check_db:
        return crud_users.authenticate_user(check_db, email, password).id


@router.post("/login")
async def login(credentials: LoginRequest, db: db_dependency):
    """Check email and password, then set the `__session` cookie."""
    # Fail on a missing signing key before touching the credentials
    get_session_secret()

    try:
        user_id = await asyncio.wait_for(
            run_in_threadpool(_check_credentials, db.get_bind(), credentials.email, credentials.password),
            timeout=LOGIN_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError as e:
        logger.error(f"Login for {credentials.email} timed out after {LOGIN_TIMEOUT_SECONDS}s")
        raise ServiceError("TIMEOUT") from e

    db_user = db.get(User, user_id)
    token = create_session_token(db_user.id, db_user.email, merge_roles(db_user.roles))
    crud_users.record_login(db, db_user)
    logger.info(f"User {db_user.email} logged in")

    response = json_success({"uid": db_user.id, "email": db_user.email})
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=int(SESSION_EXPIRES_IN.total_seconds()),
        httponly=True,
        secure=session_cookie_secure(),
        samesite="lax",
        path="/",
    )
    return response


@router.post("/logout")
def logout(user: session_dependency):
    if user is not None:
        logger.info(f"User {user.identifier} logged out")
    response = json_success({"loggedOut": True})
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
    return response


@router.get("/me")
def me(user: session_dependency):
    if user is None:
        raise ServiceError("UNAUTHENTICATED")
    return json_success(SessionInfo(uid=user.uid, email=user.email, roles=user.roles).model_dump(by_alias=True))
