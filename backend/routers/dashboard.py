from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from utils.auth_utils import SessionUser, get_session_user
from utils.responses import json_success
from crud import dashboard as crud_dashboard

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/activity")
def read_recent_activity(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    return json_success(crud_dashboard.get_recent_activity(db, user))
