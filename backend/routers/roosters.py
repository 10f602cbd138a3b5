from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database import get_db
from schemas.roosters import Rooster, RoosterCreate, RoosterUpdate
from utils.auth_utils import SessionUser, get_session_user
from utils.errors import ServiceError
from utils.permissions import ROOSTER_POLICY, assert_permission
from utils.responses import json_success, serialize, serialize_many
from utils.s3_upload import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE, get_s3_client, upload_rooster_image
from crud import roosters as crud_roosters

router = APIRouter(prefix="/roosters", tags=["Roosters"])
logger = logging.getLogger("roosters")


@router.get("")
def read_roosters(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    roosters = crud_roosters.get_roosters(db, user)
    return json_success(serialize_many(Rooster, roosters))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_rooster(
    rooster: RoosterCreate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_rooster = crud_roosters.create_rooster(db, user, rooster)
    return json_success(serialize(Rooster, db_rooster), status_code=status.HTTP_201_CREATED)


@router.get("/stats")
def read_rooster_stats(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    stats = crud_roosters.get_rooster_stats(db, user)
    return json_success(stats.model_dump(mode="json", by_alias=True))


@router.post("/upload-image")
async def upload_image(
    file: Optional[UploadFile] = File(None),
    user: Optional[SessionUser] = Depends(get_session_user),
    s3_client=Depends(get_s3_client),
):
    """Upload one rooster photo (JPEG, PNG or GIF, at most 10 MB) and return its URL."""
    # Uploading only makes sense for someone allowed to save the rooster afterwards
    assert_permission(user, "create", ROOSTER_POLICY, "rooster images")

    if file is None:
        raise ServiceError("INVALID_REQUEST", "No image file provided.")
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise ServiceError("INVALID_REQUEST", "Invalid file type. Only JPEG, PNG, and GIF images are allowed.")

    content = await file.read()
    if len(content) > MAX_IMAGE_SIZE:
        raise ServiceError("INVALID_REQUEST", "File size too large. Maximum size is 10MB.")

    result = await run_in_threadpool(upload_rooster_image, s3_client, content, file.content_type)
    logger.info(f"Rooster image {result['key']} uploaded by {user.identifier}")
    return json_success(result)


@router.get("/{rooster_id}")
def read_rooster(
    rooster_id: str,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_rooster = crud_roosters.get_rooster(db, user, rooster_id)
    return json_success(serialize(Rooster, db_rooster))


@router.patch("/{rooster_id}")
def update_rooster(
    rooster_id: str,
    rooster: RoosterUpdate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_rooster = crud_roosters.update_rooster(db, user, rooster_id, rooster)
    return json_success(serialize(Rooster, db_rooster))


@router.delete("/{rooster_id}")
def delete_rooster(
    rooster_id: str,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    crud_roosters.delete_rooster(db, user, rooster_id)
    return json_success({"deleted": True})
