import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from models.reviews import Review
from schemas.reviews import REVIEW_STATUSES, ReviewCreate, ReviewStatusUpdate
from utils.errors import ServiceError
from utils.permissions import REVIEW_POLICY, assert_permission
from utils.retry import run_in_transaction
from utils.time_utils import today

logger = logging.getLogger(__name__)

RESOURCE = "reviews"

TESTIMONIALS_DEFAULT_LIMIT = 10
TESTIMONIALS_MAX_LIMIT = 50


def _validate_review(review: ReviewCreate) -> None:
    if not all(value.strip() for value in (review.customer, review.rooster, review.comment)) or not review.rating:
        raise ServiceError("INVALID_REQUEST", "Missing required fields: customer, rating, rooster, comment")
    if review.rating < 1 or review.rating > 5:
        raise ServiceError("INVALID_RATING")


def submit_review(db: Session, review: ReviewCreate, submitted_by: Optional[str] = None) -> Review:
    """Store a new review as pending; it stays off the public site until moderated."""
    _validate_review(review)

    def work(session: Session) -> Review:
        db_review = Review(
            **review.model_dump(),
            date=today(),
            status="pending",
            created_by=submitted_by,
        )
        session.add(db_review)
        session.flush()
        return db_review

    db_review = run_in_transaction(db, work)
    logger.info(f"Review {db_review.id} ({review.rating} stars on '{review.rooster}') submitted by {submitted_by or 'public visitor'}")
    return db_review


def create_review(db: Session, user, review: ReviewCreate) -> Review:
    assert_permission(user, "create", REVIEW_POLICY, RESOURCE)
    return submit_review(db, review, submitted_by=user.identifier)


def get_reviews(db: Session, user, status: Optional[str] = None) -> List[Review]:
    assert_permission(user, "read", REVIEW_POLICY, RESOURCE)
    query = db.query(Review)
    if status:
        query = query.filter(Review.status == status)
    return query.order_by(Review.date.desc(), Review.created_at.desc()).all()


def update_review_status(db: Session, user, update: ReviewStatusUpdate) -> Review:
    assert_permission(user, "update", REVIEW_POLICY, RESOURCE)
    if not update.id or not update.status:
        raise ServiceError("INVALID_REQUEST", "Missing required fields: id, status")
    if update.status not in REVIEW_STATUSES:
        raise ServiceError("INVALID_STATUS")

    def work(session: Session) -> Review:
        db_review = session.query(Review).filter(Review.id == update.id).with_for_update().first()
        if db_review is None:
            raise ServiceError("REVIEW_NOT_FOUND")
        db_review.status = update.status
        db_review.updated_by = user.identifier
        return db_review

    db_review = run_in_transaction(db, work)
    logger.info(f"Review {update.id} marked {update.status} by {user.identifier}")
    return db_review


def delete_review(db: Session, user, review_id: Optional[str]) -> None:
    assert_permission(user, "delete", REVIEW_POLICY, RESOURCE)
    if not review_id:
        raise ServiceError("INVALID_REQUEST", "Review ID is required.")

    def work(session: Session) -> None:
        db_review = session.query(Review).filter(Review.id == review_id).with_for_update().first()
        if db_review is None:
            raise ServiceError("REVIEW_NOT_FOUND")
        session.delete(db_review)

    run_in_transaction(db, work)
    logger.info(f"Review {review_id} deleted by {user.identifier}")


def clamp_testimonial_limit(raw_limit: Optional[str]) -> int:
    try:
        limit = int(raw_limit) if raw_limit else TESTIMONIALS_DEFAULT_LIMIT
    except ValueError:
        limit = TESTIMONIALS_DEFAULT_LIMIT
    if limit == 0:
        limit = TESTIMONIALS_DEFAULT_LIMIT
    return max(1, min(TESTIMONIALS_MAX_LIMIT, limit))


def get_testimonials(db: Session, limit: int = TESTIMONIALS_DEFAULT_LIMIT) -> List[Review]:
    """Published reviews only, newest first."""
    return (
        db.query(Review)
        .filter(Review.status == "published")
        .order_by(Review.date.desc(), Review.created_at.desc())
        .limit(limit)
        .all()
    )
