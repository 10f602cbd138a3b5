"""Endpoints for the public marketing site. None of them need a session."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database import get_db
from schemas.reviews import Review, ReviewCreate, Testimonial
from schemas.rooster_breeds import PublicRoosterBreed
from schemas.roosters import Rooster
from utils.responses import json_success, serialize, serialize_many
from crud import reviews as crud_reviews
from crud import rooster_breeds as crud_breeds
from crud import roosters as crud_roosters

router = APIRouter(prefix="/public", tags=["Public"])
logger = logging.getLogger("public")


@router.get("/roosters")
def read_public_roosters(db: Session = Depends(get_db)):
    roosters = crud_roosters.list_public_roosters(db)
    return json_success(serialize_many(Rooster, roosters))


@router.get("/breeds")
def read_public_breeds(db: Session = Depends(get_db)):
    breeds = crud_breeds.list_breeds(db)
    return json_success(serialize_many(PublicRoosterBreed, breeds))


@router.post("/reviews", status_code=status.HTTP_201_CREATED)
def submit_public_review(review: ReviewCreate, db: Session = Depends(get_db)):
    """Visitors' reviews always start as pending and need moderation."""
    db_review = crud_reviews.submit_review(db, review)
    return json_success(serialize(Review, db_review), status_code=status.HTTP_201_CREATED)


@router.get("/testimonials")
def read_testimonials(limit: Optional[str] = None, db: Session = Depends(get_db)):
    reviews = crud_reviews.get_testimonials(db, crud_reviews.clamp_testimonial_limit(limit))
    return json_success(serialize_many(Testimonial, reviews))
