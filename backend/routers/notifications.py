from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from utils.auth_utils import SessionUser, get_session_user
from utils.responses import json_success
from crud import notifications as crud_notifications

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("")
def read_notifications(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    return json_success(crud_notifications.get_notifications(db, user))
