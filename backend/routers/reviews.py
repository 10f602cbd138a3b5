from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database import get_db
from schemas.reviews import Review, ReviewCreate, ReviewStatusUpdate
from utils.auth_utils import SessionUser, get_session_user
from utils.responses import json_success, serialize, serialize_many
from crud import reviews as crud_reviews

router = APIRouter(prefix="/feedback/reviews", tags=["Feedback"])
logger = logging.getLogger("reviews")


@router.get("")
def read_reviews(
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    reviews = crud_reviews.get_reviews(db, user, status)
    return json_success(serialize_many(Review, reviews))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_review(
    review: ReviewCreate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_review = crud_reviews.create_review(db, user, review)
    return json_success(serialize(Review, db_review), status_code=status.HTTP_201_CREATED)


@router.put("")
def update_review_status(
    update: ReviewStatusUpdate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    """Moderate a review: publish, hide, or send it back to pending."""
    db_review = crud_reviews.update_review_status(db, user, update)
    return json_success({
        "id": db_review.id,
        "status": db_review.status,
        "message": "Review status updated successfully",
    })


@router.delete("")
def delete_review(
    id: Optional[str] = None,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    crud_reviews.delete_review(db, user, id)
    return json_success({"deleted": True})
